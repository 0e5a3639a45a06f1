from __future__ import annotations

from dataclasses import dataclass, field

from .columns import ColumnSpec

"""FlattenedRow and TabularDocument models.

FlattenedRow is one projected output row keyed by column; TabularDocument is
the final header + rows artifact handed to the workbook writer.
"""

__all__ = [
    "FlattenedRow",
    "TabularDocument",
]


@dataclass(frozen=True)
class FlattenedRow:
    """One projected row.

    `cells` holds a string for every column of the catalog the row was
    projected against, and nothing else. `warnings` carries informational
    flags raised while projecting (e.g. MALFORMED_DATE); they never drop the row.
    """
    message_id: str
    cells: dict[ColumnSpec, str]
    warnings: tuple[str, ...] = ()
    row_number: int = -1


@dataclass(frozen=True)
class TabularDocument:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.rows)
