from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.columns import (
    FIXED_COLUMNS,
    ColumnCatalog,
    FixedColumn,
    IndicatorColumn,
    ScalarColumn,
    column_sort_key,
)
from ..models.payload import ParseFailure, ParseResult
from .text_normalizer import to_text

"""Column discovery pass.

Scans every parsed payload's flow response once and returns the frozen
ColumnCatalog the projection pass works against:

- list value under `key` -> one IndicatorColumn(key, option) per distinct option
- any other value under `key` -> ScalarColumn(key)

A key seen as a scalar in one record and as a list in another keeps both kinds
of columns. Discovered columns are sorted by (key, scalar first, option), so
the catalog does not depend on record order. Discovery over disjoint shards
can be combined with merge_catalogs().
"""

__all__ = [
    "discover_columns",
    "merge_catalogs",
]

logger = logging.getLogger(__name__)


def _freeze(
    found: Iterable[ScalarColumn | IndicatorColumn], fixed: tuple[FixedColumn, ...]
) -> ColumnCatalog:
    return ColumnCatalog(fixed=fixed, discovered=tuple(sorted(found, key=column_sort_key)))


def discover_columns(
    payloads: Iterable[ParseResult], fixed: tuple[FixedColumn, ...] = FIXED_COLUMNS
) -> ColumnCatalog:
    """Build the column catalog from all parsed payloads.

    ParseFailure entries are skipped; they contribute no columns.
    """
    # dict as an insertion-ordered set (first-seen dedup)
    found: dict[ScalarColumn | IndicatorColumn, None] = {}
    scanned = 0
    for payload in payloads:
        if isinstance(payload, ParseFailure):
            continue
        scanned += 1
        for key, value in payload.flow_response.items():
            if isinstance(value, list):
                for item in value:
                    found.setdefault(IndicatorColumn(key=str(key), value=to_text(item)), None)
            else:
                found.setdefault(ScalarColumn(key=str(key)), None)

    catalog = _freeze(found, fixed)
    logger.debug(f"discovered columns={len(catalog.discovered)} payloads={scanned}")
    return catalog


def merge_catalogs(*catalogs: ColumnCatalog) -> ColumnCatalog:
    """Union the discovered columns of shard catalogs.

    All catalogs must share the same fixed columns. The result is independent
    of argument order.

    Raises:
        ValueError: No catalogs given, or fixed columns differ
    """
    if not catalogs:
        raise ValueError("merge_catalogs requires at least one catalog")
    fixed = catalogs[0].fixed
    found: set[ScalarColumn | IndicatorColumn] = set()
    for catalog in catalogs:
        if catalog.fixed != fixed:
            raise ValueError(f"fixed columns differ: {fixed} != {catalog.fixed}")
        found.update(catalog.discovered)
    return _freeze(found, fixed)
