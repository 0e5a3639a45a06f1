from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

"""RawRecord model for the message export flattener.

RawRecord represents one row of the message history export exactly as the
loader produced it. The camelCase source headers are mapped onto snake_case
attributes; nothing about the embedded payload is interpreted here.
"""

__all__ = [
    "RawRecord",
    "SOURCE_COLUMNS",
]

# Source header -> attribute name
SOURCE_COLUMNS: dict[str, str] = {
    "messageId": "message_id",
    "contactId": "contact_id",
    "messageDate": "message_date",
    "sendType": "send_type",
    "content": "content",
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _as_text(value: Any) -> str:
    if _is_blank(value):
        return ""
    # Excel may materialize messageDate as a datetime
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class RawRecord:
    """One input message record.

    `content` is either the JSON-encoded payload string or a structure the
    loader already decoded. `row_number` is the 1-based data row position in
    the source and is used only for error reporting.
    """
    message_id: str
    contact_id: str
    message_date: str
    send_type: str
    content: Any
    row_number: int = -1

    @staticmethod
    def from_mapping(data: Mapping[str, Any], row_number: int = -1) -> RawRecord:
        """Build a RawRecord from a loader row keyed by source headers.

        Missing or empty cells become empty strings; a missing payload becomes
        None so the parser can report it.
        """
        content = data.get("content")
        if _is_blank(content):
            content = None
        return RawRecord(
            message_id=_as_text(data.get("messageId")),
            contact_id=_as_text(data.get("contactId")),
            message_date=_as_text(data.get("messageDate")),
            send_type=_as_text(data.get("sendType")),
            content=content,
            row_number=row_number,
        )
