from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Structured, per-record error entry written as JSON Lines by the error log
buffer. Supports row=-1 for records whose source row is unknown (e.g. records
handed in programmatically instead of read from a file).

Fixed keys: timestamp, file, row, message_id, error_type, detail.
"""

__all__ = [
    "ErrorRecord",
    "MALFORMED_DATE",
    "PARSE_FAILURE",
]

PARSE_FAILURE = "PARSE_FAILURE"
MALFORMED_DATE = "MALFORMED_DATE"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name the record was read from ("<memory>" if none)
        row: Row number (1-based). Use -1 when the row is unknown
        message_id: messageId of the offending record
        error_type: Error classification in UPPER_SNAKE_CASE format
        detail: Description of the problem
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    message_id: str
    error_type: str  # UPPER_SNAKE
    detail: str

    @staticmethod
    def create(file: str, row: int, message_id: str, error_type: str, detail: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            message_id=message_id,
            error_type=error_type,
            detail=detail,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
