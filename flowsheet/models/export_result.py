from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .payload import ParseFailure

"""Export result model.

Aggregated statistics of one export run, used for the SUMMARY output line and
the CLI exit code.
"""


@dataclass(frozen=True)
class ExportResult:
    """Aggregated results of one export run.

    `exported_rows` counts projected rows; records that failed to parse are
    excluded from the document and listed in `failures`.
    """
    mode: str  # flow | message
    total_records: int  # records read from the source
    exported_rows: int  # rows written to the document
    parse_failures: int  # records excluded because the payload did not decode
    malformed_dates: int  # rows whose messageDate was passed through unsplit
    column_count: int  # fixed + discovered columns
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    output_path: Path | None = None
    failures: list[ParseFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return self.parse_failures > 0
