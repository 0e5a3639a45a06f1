from __future__ import annotations

from pathlib import Path

import pandas as pd

from flowsheet.models.tabular_document import TabularDocument
from flowsheet.services.tabular_export import to_dataframe

"""Workbook writer.

Serializes a TabularDocument into a single-sheet .xlsx (pandas + openpyxl) or
a .csv file. The document is written as is: header row, then the rows in
order, all cells as text.
"""

__all__ = [
    "OUTPUT_SUFFIXES",
    "WriteError",
    "write_document",
]

OUTPUT_SUFFIXES = {".xlsx", ".csv"}


class WriteError(Exception):
    """Raised when the output file cannot be written."""


def write_document(document: TabularDocument, path: Path, *, sheet_name: str = "Datos") -> Path:
    """Write the document to `path`, creating parent directories.

    Returns:
        The written path

    Raises:
        WriteError: Unsupported suffix or I/O failure
    """
    suffix = path.suffix.lower()
    if suffix not in OUTPUT_SUFFIXES:
        raise WriteError(f"unsupported output format: {path.suffix or '<none>'}")
    df = to_dataframe(document)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".xlsx":
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
        else:
            df.to_csv(path, index=False, encoding="utf-8")
    except OSError as e:
        raise WriteError(f"failed to write {path}: {e}") from e
    return path
