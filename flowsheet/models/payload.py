from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

"""Parsed payload variants.

A record's `content` decodes into exactly one of three payload shapes, or
fails to decode and becomes a ParseFailure:

- FlowResponsePayload: `eventParameters.flowResponse` answers (field -> scalar or list)
- FreeTextPayload: a free-text `body` message
- EmptyPayload: valid JSON matching neither shape

All payload variants expose `flow_response`, empty for the last two, so the
projection code can treat them uniformly.
"""

__all__ = [
    "EMPTY_FLOW_RESPONSE",
    "EmptyPayload",
    "FlowResponsePayload",
    "FreeTextPayload",
    "ParseFailure",
    "ParsedPayload",
    "ParseResult",
]

EMPTY_FLOW_RESPONSE: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class FlowResponsePayload:
    message_id: str
    flow_response: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FreeTextPayload:
    message_id: str
    body: Any = ""

    @property
    def flow_response(self) -> Mapping[str, Any]:
        return EMPTY_FLOW_RESPONSE


@dataclass(frozen=True)
class EmptyPayload:
    message_id: str

    @property
    def flow_response(self) -> Mapping[str, Any]:
        return EMPTY_FLOW_RESPONSE


@dataclass(frozen=True)
class ParseFailure:
    """A record whose payload could not be decoded.

    Attributes:
        message_id: Identifier of the offending record
        row_number: Source row number (-1 when unknown)
        reason: Human readable decode error
    """
    message_id: str
    row_number: int
    reason: str


ParsedPayload = Union[FlowResponsePayload, FreeTextPayload, EmptyPayload]
ParseResult = Union[ParsedPayload, ParseFailure]
