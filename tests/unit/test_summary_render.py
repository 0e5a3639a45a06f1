from __future__ import annotations

from datetime import UTC, datetime

from flowsheet.models.export_result import ExportResult
from flowsheet.services.summary import render_summary_line


def _result(**overrides) -> ExportResult:
    start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)
    values = dict(
        mode="flow",
        total_records=4,
        exported_rows=3,
        parse_failures=1,
        malformed_dates=0,
        column_count=9,
        start_time=start,
        end_time=start,
        elapsed_seconds=0.84,
        throughput_rows_per_sec=3.5714,
    )
    values.update(overrides)
    return ExportResult(**values)


def test_render_summary_line():
    assert render_summary_line(_result()) == (
        "SUMMARY records=4 exported=3 parse_failures=1 malformed_dates=0 "
        "columns=9 elapsed_sec=0.84 throughput_rps=3.5714"
    )


def test_render_summary_line_integer_and_zero_values():
    line = render_summary_line(_result(elapsed_seconds=2.0, throughput_rows_per_sec=0.0))
    assert line.endswith("elapsed_sec=2 throughput_rps=0")


def test_render_summary_line_tiny_elapsed_without_exponent():
    line = render_summary_line(_result(elapsed_seconds=0.000012))
    assert "elapsed_sec=0.000012" in line
    assert "e-" not in line


def test_has_failures():
    assert _result().has_failures
    assert not _result(parse_failures=0).has_failures
