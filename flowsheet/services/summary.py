from __future__ import annotations

from ..models.export_result import ExportResult

"""Summary line rendering.

Format:
SUMMARY records={n} exported={m} parse_failures={k} malformed_dates={d}
columns={c} elapsed_sec={s} throughput_rps={r}
"""


def _format_number(value: float) -> str:
    # Integers without ".0", tiny values without scientific notation
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 4))


def render_summary_line(result: ExportResult) -> str:
    """Render the SUMMARY line for an export run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ExportResult(
        ...     mode="flow", total_records=10, exported_rows=9, parse_failures=1,
        ...     malformed_dates=0, column_count=12, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=4.5,
        ... )
        >>> render_summary_line(result)
        'SUMMARY records=10 exported=9 parse_failures=1 malformed_dates=0 columns=12 elapsed_sec=2 throughput_rps=4.5'
    """
    return (
        f"SUMMARY records={result.total_records} "
        f"exported={result.exported_rows} "
        f"parse_failures={result.parse_failures} "
        f"malformed_dates={result.malformed_dates} "
        f"columns={result.column_count} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
