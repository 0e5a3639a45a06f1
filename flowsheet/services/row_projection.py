from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..models.columns import (
    CONTACT_ID,
    DATE,
    FIXED_COLUMNS,
    MESSAGE_COLUMN,
    MESSAGE_ID,
    TIME,
    ColumnCatalog,
    ColumnSpec,
    FixedColumn,
    IndicatorColumn,
    ScalarColumn,
)
from ..models.error_record import MALFORMED_DATE
from ..models.payload import FreeTextPayload, ParsedPayload
from ..models.raw_record import RawRecord
from ..models.tabular_document import FlattenedRow
from .text_normalizer import DEFAULT_ENCODING, normalize_text, to_text

"""Projection pass: one record + frozen catalog -> one complete row.

Every column of the catalog gets a cell, blank when the record has nothing for
it, so rows from sparse payloads still line up with the header. Projection is
a pure function of its inputs; informational problems (unsplittable
messageDate) travel on the row as warnings.
"""

__all__ = [
    "DEFAULT_MARKER",
    "DateParts",
    "message_catalog",
    "project_message_row",
    "project_row",
    "split_message_date",
]

DEFAULT_MARKER = "X"
DATE_TIME_SEPARATOR = "T"

# Trailing UTC designator or numeric offset: Z, +02:00, -0500, +02
_OFFSET_RE = re.compile(r"(?:Z|[+-]\d{2}(?::?\d{2})?)$", re.IGNORECASE)


@dataclass(frozen=True)
class DateParts:
    date: str
    time: str
    malformed: bool = False


def split_message_date(value: str) -> DateParts:
    """Split an ISO-8601 timestamp into date and time cells.

    Purely syntactic: "2024-03-01T10:00:00+02:00" -> ("2024-03-01", "10:00:00").
    The offset is dropped, not applied. A value without the "T" separator is
    returned unsplit in the date cell and flagged malformed; an empty value is
    two empty cells.
    """
    if not value:
        return DateParts(date="", time="")
    if DATE_TIME_SEPARATOR not in value:
        return DateParts(date=value, time="", malformed=True)
    date, _, time = value.partition(DATE_TIME_SEPARATOR)
    return DateParts(date=date, time=_OFFSET_RE.sub("", time))


def _fixed_cells(raw: RawRecord) -> tuple[dict[ColumnSpec, str], tuple[str, ...]]:
    parts = split_message_date(raw.message_date)
    cells: dict[ColumnSpec, str] = {
        MESSAGE_ID: raw.message_id,
        CONTACT_ID: raw.contact_id,
        DATE: parts.date,
        TIME: parts.time,
    }
    warnings = (MALFORMED_DATE,) if parts.malformed else ()
    return cells, warnings


def _answers(payload: ParsedPayload) -> Mapping[str, Any]:
    return {str(k): v for k, v in payload.flow_response.items()}


def _scalar_cell(answers: Mapping[str, Any], key: str, encoding: str) -> str:
    value = answers.get(key)
    if value is None or isinstance(value, list):
        return ""
    return normalize_text(to_text(value), encoding)


def _indicator_cell(answers: Mapping[str, Any], column: IndicatorColumn, marker: str) -> str:
    selected = answers.get(column.key)
    if not isinstance(selected, list):
        return ""
    return marker if any(to_text(item) == column.value for item in selected) else ""


def project_row(
    raw: RawRecord,
    payload: ParsedPayload,
    catalog: ColumnCatalog,
    *,
    marker: str = DEFAULT_MARKER,
    encoding: str = DEFAULT_ENCODING,
) -> FlattenedRow:
    """Project one record onto the catalog.

    - ScalarColumn(key): normalized scalar answer; blank if absent or a list
    - IndicatorColumn(key, option): `marker` if the list under key holds option
    - fixed columns: messageId, contactId, date and time from messageDate

    Fixed columns missing from the catalog are not emitted, so the row always
    has exactly the catalog's columns.
    """
    fixed, warnings = _fixed_cells(raw)
    answers = _answers(payload)
    cells: dict[ColumnSpec, str] = {}
    for column in catalog.columns:
        if isinstance(column, FixedColumn):
            cells[column] = fixed.get(column, "")
        elif isinstance(column, IndicatorColumn):
            cells[column] = _indicator_cell(answers, column, marker)
        else:
            cells[column] = _scalar_cell(answers, column.key, encoding)
    return FlattenedRow(
        message_id=raw.message_id, cells=cells, warnings=warnings, row_number=raw.row_number
    )


def message_catalog(fixed: tuple[FixedColumn, ...] = FIXED_COLUMNS) -> ColumnCatalog:
    """Catalog of the free-text message export: fixed columns + `message`."""
    return ColumnCatalog(fixed=fixed, discovered=(MESSAGE_COLUMN,))


def project_message_row(
    raw: RawRecord,
    payload: ParsedPayload,
    catalog: ColumnCatalog | None = None,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> FlattenedRow:
    """Project one record for the free-text message export.

    The `message` cell holds the normalized body of a FreeTextPayload and is
    blank for every other payload variant.
    """
    if catalog is None:
        catalog = message_catalog()
    fixed, warnings = _fixed_cells(raw)
    body = payload.body if isinstance(payload, FreeTextPayload) else None
    cells: dict[ColumnSpec, str] = {}
    for column in catalog.columns:
        if isinstance(column, FixedColumn):
            cells[column] = fixed.get(column, "")
        elif column == MESSAGE_COLUMN:
            cells[column] = normalize_text(to_text(body), encoding)
        else:
            cells[column] = ""
    return FlattenedRow(
        message_id=raw.message_id, cells=cells, warnings=warnings, row_number=raw.row_number
    )
