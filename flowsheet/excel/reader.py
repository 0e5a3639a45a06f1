from __future__ import annotations

from pathlib import Path

import pandas as pd

from flowsheet.models.raw_record import SOURCE_COLUMNS, RawRecord

"""Message history loader.

Reads the first sheet of an .xlsx/.xls workbook, or a .csv file, with a header
row followed by one message per row. Only empty cells are treated as missing;
strings such as "NA" or "null" are kept verbatim so payload text is never
rewritten by pandas' NaN detection.
"""

__all__ = [
    "EXCEL_SUFFIXES",
    "MissingColumnsError",
    "RecordSourceError",
    "REQUIRED_COLUMNS",
    "read_frame",
    "read_records",
]

EXCEL_SUFFIXES = {".xlsx", ".xls"}
CSV_SUFFIXES = {".csv"}

REQUIRED_COLUMNS = {"messageId", "messageDate", "content"}


class RecordSourceError(Exception):
    """Raised when the source file is missing, unsupported or unreadable."""


class MissingColumnsError(Exception):
    """Raised when required columns are missing in the source header."""


def read_frame(path: Path, *, csv_separator: str = ",") -> pd.DataFrame:
    """Read the source file into a DataFrame of raw cell values.

    Raises:
        RecordSourceError: File missing, unsupported suffix, or unreadable
    """
    if not path.exists():
        raise RecordSourceError(f"input file not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            # dtype=object keeps datetimes and ints as cell values (no float coercion)
            df = pd.read_excel(path, sheet_name=0, dtype=object, keep_default_na=False, na_values=[""])
        elif suffix in CSV_SUFFIXES:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, sep=csv_separator)
        else:
            raise RecordSourceError(f"unsupported input format: {path.suffix or '<none>'}")
    except RecordSourceError:
        raise
    except (OSError, ValueError) as e:
        raise RecordSourceError(f"failed to read {path.name}: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]
    return df


def read_records(path: Path, *, csv_separator: str = ",") -> list[RawRecord]:
    """Load the message history as RawRecords, in file order.

    Columns other than messageId/contactId/messageDate/sendType/content are
    ignored; contactId and sendType may be absent.

    Raises:
        RecordSourceError: File missing, unsupported or unreadable
        MissingColumnsError: messageId, messageDate or content missing from header
    """
    df = read_frame(path, csv_separator=csv_separator)
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise MissingColumnsError(f"{path.name} missing columns: {sorted(missing)}")

    present = [c for c in SOURCE_COLUMNS if c in df.columns]
    records: list[RawRecord] = []
    # Header is row 1, so the first record is source row 2
    for offset, raw in enumerate(df[present].to_dict(orient="records")):
        if all(pd.isna(v) or v == "" for v in raw.values()):
            continue
        records.append(RawRecord.from_mapping(raw, row_number=offset + 2))
    return records
