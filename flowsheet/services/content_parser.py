from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from numbers import Number
from typing import Any

from ..models.payload import (
    EmptyPayload,
    FlowResponsePayload,
    FreeTextPayload,
    ParseFailure,
    ParseResult,
)
from ..models.raw_record import RawRecord

"""Payload decoding for a single message record.

parse_content() never raises: a payload that cannot be decoded comes back as a
ParseFailure tagged with the record's identifier so the caller can count and
report it while the rest of the batch continues.
"""

__all__ = [
    "parse_content",
]

logger = logging.getLogger(__name__)


def _decode(content: Any) -> Any:
    """Return the decoded payload structure.

    Raises:
        ValueError: content is missing, not valid JSON, or of an unsupported type
        RecursionError: JSON nested deeper than the decoder can follow
    """
    if content is None:
        raise ValueError("missing content")
    if isinstance(content, (str, bytes, bytearray)):
        # json.JSONDecodeError is a ValueError
        return json.loads(content)
    # Already materialized by the loader (a workbook cell holding 3 or TRUE)
    if isinstance(content, (Mapping, list, bool, Number)):
        return content
    raise ValueError(f"unsupported content type: {type(content).__name__}")


def parse_content(raw: RawRecord) -> ParseResult:
    """Decode a record's embedded payload into one of the payload variants.

    Shapes, in priority order:
    1. {"eventParameters": {"flowResponse": {...}}} -> FlowResponsePayload
    2. {"body": ...} -> FreeTextPayload
    3. anything else that decodes -> EmptyPayload
    """
    try:
        decoded = _decode(raw.content)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        logger.debug(f"payload not decoded message_id={raw.message_id}: {type(e).__name__}")
        return ParseFailure(message_id=raw.message_id, row_number=raw.row_number, reason=str(e))

    if not isinstance(decoded, Mapping):
        logger.debug(f"payload is not an object message_id={raw.message_id}")
        return EmptyPayload(message_id=raw.message_id)

    event_parameters = decoded.get("eventParameters")
    if isinstance(event_parameters, Mapping) and "flowResponse" in event_parameters:
        flow_response = event_parameters["flowResponse"]
        if isinstance(flow_response, Mapping):
            return FlowResponsePayload(message_id=raw.message_id, flow_response=dict(flow_response))
        logger.debug(f"flowResponse is not an object message_id={raw.message_id}")
        return EmptyPayload(message_id=raw.message_id)

    if "body" in decoded:
        return FreeTextPayload(message_id=raw.message_id, body=decoded["body"])

    logger.debug(f"eventParameters not found message_id={raw.message_id}")
    return EmptyPayload(message_id=raw.message_id)
