from __future__ import annotations

from dataclasses import dataclass
from typing import Union

"""Column catalog models.

A ColumnCatalog is the frozen, ordered set of output columns for one export
run: the fixed leading columns followed by the columns discovered from the
flow responses. It is built once by the discovery pass and only read after.
"""

__all__ = [
    "ColumnCatalog",
    "ColumnSpec",
    "FIXED_COLUMNS",
    "FixedColumn",
    "IndicatorColumn",
    "INDICATOR_SEPARATOR",
    "MESSAGE_COLUMN",
    "ScalarColumn",
    "column_sort_key",
]

# Header label separator for indicator columns: "<field> | <option>"
INDICATOR_SEPARATOR = " | "


@dataclass(frozen=True)
class FixedColumn:
    name: str

    @property
    def header(self) -> str:
        return self.name


@dataclass(frozen=True)
class ScalarColumn:
    key: str

    @property
    def header(self) -> str:
        return self.key


@dataclass(frozen=True)
class IndicatorColumn:
    """Presence column for one option of a multi-select field."""
    key: str
    value: str

    @property
    def header(self) -> str:
        return f"{self.key}{INDICATOR_SEPARATOR}{self.value}"


ColumnSpec = Union[FixedColumn, ScalarColumn, IndicatorColumn]

MESSAGE_ID = FixedColumn("messageId")
CONTACT_ID = FixedColumn("contactId")
DATE = FixedColumn("date")
TIME = FixedColumn("time")

FIXED_COLUMNS: tuple[FixedColumn, ...] = (MESSAGE_ID, CONTACT_ID, DATE, TIME)

# Single payload column of the free-text message export
MESSAGE_COLUMN = ScalarColumn("message")


def column_sort_key(column: ScalarColumn | IndicatorColumn) -> tuple[str, int, str]:
    """Total order for discovered columns: key, scalar before indicators, option."""
    if isinstance(column, IndicatorColumn):
        return (column.key, 1, column.value)
    return (column.key, 0, "")


@dataclass(frozen=True)
class ColumnCatalog:
    """Ordered, deduplicated output columns (fixed first, then discovered)."""
    fixed: tuple[FixedColumn, ...]
    discovered: tuple[ScalarColumn | IndicatorColumn, ...]

    @property
    def columns(self) -> tuple[ColumnSpec, ...]:
        return self.fixed + self.discovered

    @property
    def headers(self) -> tuple[str, ...]:
        """Header labels, unique within the catalog.

        Fixed labels are kept as is. A discovered label that repeats an earlier
        one (a flow key named "date", a scalar key "a | b" next to the option
        column of field "a") gets the first free " (n)" suffix, n >= 2, in
        catalog order.
        """
        seen: set[str] = set()
        labels: list[str] = []
        for column in self.columns:
            label = column.header
            n = 2
            while label in seen:
                label = f"{column.header} ({n})"
                n += 1
            seen.add(label)
            labels.append(label)
        return tuple(labels)

    def __len__(self) -> int:
        return len(self.fixed) + len(self.discovered)

    def __contains__(self, column: object) -> bool:
        return column in self.fixed or column in self.discovered
