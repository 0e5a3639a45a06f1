"""Domain models for the message export flattener.

This package contains the record, payload, column catalog and document models
shared by the parsing, discovery, projection and export services.
"""

from .columns import (
    FIXED_COLUMNS,
    MESSAGE_COLUMN,
    ColumnCatalog,
    ColumnSpec,
    FixedColumn,
    IndicatorColumn,
    ScalarColumn,
)
from .error_record import ErrorRecord
from .export_result import ExportResult
from .payload import (
    EmptyPayload,
    FlowResponsePayload,
    FreeTextPayload,
    ParsedPayload,
    ParseFailure,
    ParseResult,
)
from .raw_record import RawRecord
from .tabular_document import FlattenedRow, TabularDocument

__all__ = [
    # Input
    "RawRecord",
    # Payload variants
    "EmptyPayload",
    "FlowResponsePayload",
    "FreeTextPayload",
    "ParsedPayload",
    "ParseFailure",
    "ParseResult",
    # Columns
    "ColumnCatalog",
    "ColumnSpec",
    "FIXED_COLUMNS",
    "FixedColumn",
    "IndicatorColumn",
    "MESSAGE_COLUMN",
    "ScalarColumn",
    # Output
    "ErrorRecord",
    "ExportResult",
    "FlattenedRow",
    "TabularDocument",
]
