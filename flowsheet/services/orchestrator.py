from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ExportConfig
from ..excel.reader import MissingColumnsError, RecordSourceError, read_records
from ..excel.writer import WriteError, write_document
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import MALFORMED_DATE, PARSE_FAILURE, ErrorRecord
from ..models.export_result import ExportResult
from ..models.payload import ParseFailure, ParsedPayload
from ..models.raw_record import RawRecord
from ..models.tabular_document import FlattenedRow, TabularDocument
from .content_parser import parse_content
from .progress import ProgressTracker
from .row_projection import DEFAULT_MARKER, message_catalog, project_message_row, project_row
from .schema_discovery import discover_columns
from .tabular_export import export_document
from .text_normalizer import DEFAULT_ENCODING

"""Export orchestration.

Runs the whole batch transform in order:
1. parse every record's payload (failures are set aside and reported)
2. discover the column catalog from all parsed payloads (flow mode only)
3. project every parsed record onto the frozen catalog
4. assemble the TabularDocument

run_export() adds the file boundary: read the input, write the workbook,
flush the error log.
"""

__all__ = [
    "EXPORT_MODES",
    "ProcessingError",
    "build_document",
    "run_export",
]

logger = logging.getLogger(__name__)

EXPORT_MODES = ("flow", "message")
MEMORY_SOURCE = "<memory>"


class ProcessingError(Exception):
    """Fatal export error (input unreadable, output not writable, bad mode)."""


def _record_failure(error_log: ErrorLogBuffer, source: str, failure: ParseFailure) -> None:
    logger.warning(
        f"parse failure message_id={failure.message_id} row={failure.row_number}: {failure.reason}"
    )
    error_log.append(
        ErrorRecord.create(
            file=source,
            row=failure.row_number,
            message_id=failure.message_id,
            error_type=PARSE_FAILURE,
            detail=failure.reason,
        )
    )


def _record_malformed_date(error_log: ErrorLogBuffer, source: str, raw: RawRecord) -> None:
    logger.debug(f"messageDate not split message_id={raw.message_id} value={raw.message_date!r}")
    error_log.append(
        ErrorRecord.create(
            file=source,
            row=raw.row_number,
            message_id=raw.message_id,
            error_type=MALFORMED_DATE,
            detail=f"no date/time separator in {raw.message_date!r}",
        )
    )


def build_document(
    records: Sequence[RawRecord],
    *,
    mode: str = "flow",
    marker: str = DEFAULT_MARKER,
    encoding: str = DEFAULT_ENCODING,
    error_log: ErrorLogBuffer | None = None,
    source: str = MEMORY_SOURCE,
) -> tuple[TabularDocument, ExportResult]:
    """Transform records into a TabularDocument plus run statistics.

    Parse failures never abort the batch: the record is excluded and listed
    in the result. An empty batch yields a document with only the fixed
    columns.

    Raises:
        ProcessingError: Unknown mode
    """
    if mode not in EXPORT_MODES:
        raise ProcessingError(f"unknown export mode: {mode!r} (expected one of {EXPORT_MODES})")
    if error_log is None:
        error_log = ErrorLogBuffer()
    start_time = datetime.now(UTC)

    parsed: list[tuple[RawRecord, ParsedPayload]] = []
    failures: list[ParseFailure] = []
    for raw in records:
        result = parse_content(raw)
        if isinstance(result, ParseFailure):
            failures.append(result)
            _record_failure(error_log, source, result)
        else:
            parsed.append((raw, result))

    if mode == "flow":
        catalog = discover_columns(payload for _, payload in parsed)
    else:
        catalog = message_catalog()
    logger.info(
        f"mode={mode} records={len(records)} parsed={len(parsed)} "
        f"failures={len(failures)} columns={len(catalog)}"
    )

    rows: list[FlattenedRow] = []
    malformed_dates = 0
    with ProgressTracker(len(parsed)) as progress:
        for raw, payload in parsed:
            if mode == "flow":
                row = project_row(raw, payload, catalog, marker=marker, encoding=encoding)
            else:
                row = project_message_row(raw, payload, catalog, encoding=encoding)
            if MALFORMED_DATE in row.warnings:
                malformed_dates += 1
                _record_malformed_date(error_log, source, raw)
            rows.append(row)
            progress.advance()

    document = export_document(catalog, rows)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = len(rows) / elapsed_seconds if elapsed_seconds > 0 else 0.0
    result = ExportResult(
        mode=mode,
        total_records=len(records),
        exported_rows=len(rows),
        parse_failures=len(failures),
        malformed_dates=malformed_dates,
        column_count=len(catalog),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        failures=failures,
    )
    return document, result


def run_export(
    config: ExportConfig,
    *,
    records: Sequence[RawRecord] | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ExportResult:
    """Read the configured input, export it and write the workbook.

    Args:
        config: Export configuration
        records: Pre-loaded records; when given the input file is not read
        error_log: Error log buffer (a new one writing under ./logs by default)

    Raises:
        ProcessingError: Input missing/unreadable, unknown mode, or write failure
    """
    if error_log is None:
        error_log = ErrorLogBuffer()
    input_path = Path(config.input_path)
    source = MEMORY_SOURCE
    if records is None:
        try:
            records = read_records(input_path)
        except (RecordSourceError, MissingColumnsError) as e:
            raise ProcessingError(str(e)) from e
        source = input_path.name
        logger.info(f"loaded records={len(records)} from {input_path}")

    document, result = build_document(
        records,
        mode=config.mode,
        marker=config.presence_marker,
        encoding=config.text_encoding,
        error_log=error_log,
        source=source,
    )

    output_path = Path(config.output_path)
    try:
        write_document(document, output_path, sheet_name=config.sheet_name)
    except WriteError as e:
        raise ProcessingError(str(e)) from e
    finally:
        try:
            log_path = error_log.flush()
        except OSError as e:
            # An unwritable error log does not fail the export
            logger.warning(f"error log flush failed: {e}")
        else:
            if log_path is not None:
                logger.info(f"error log written: {log_path}")
    logger.info(f"wrote rows={len(document)} columns={len(document.headers)} -> {output_path}")

    return replace(result, output_path=output_path)
