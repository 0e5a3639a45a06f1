from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.columns import ColumnCatalog
from ..models.tabular_document import FlattenedRow, TabularDocument

"""Document assembly.

Reads each projected row out in catalog order. No filtering, sorting or value
changes happen here; rows keep the order they were supplied in.
"""

__all__ = [
    "RowShapeError",
    "export_document",
    "to_dataframe",
]


class RowShapeError(Exception):
    """Raised when a row's columns differ from the catalog's."""


def export_document(catalog: ColumnCatalog, rows: Sequence[FlattenedRow]) -> TabularDocument:
    """Assemble the header and row cells in the catalog's column order.

    Raises:
        RowShapeError: A row is missing a catalog column or carries an extra one
    """
    columns = catalog.columns
    expected = set(columns)
    body: list[tuple[str, ...]] = []
    for row in rows:
        if row.cells.keys() != expected:
            missing = [c.header for c in columns if c not in row.cells]
            extra = [c.header for c in row.cells if c not in expected]
            raise RowShapeError(
                f"row message_id={row.message_id} does not match catalog: "
                f"missing={missing} extra={extra}"
            )
        body.append(tuple(row.cells[c] for c in columns))
    return TabularDocument(headers=catalog.headers, rows=tuple(body))


def to_dataframe(document: TabularDocument) -> pd.DataFrame:
    """DataFrame view of the document for the workbook writer."""
    return pd.DataFrame(list(document.rows), columns=list(document.headers), dtype=object)
