from __future__ import annotations

import json
import random
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import flow_content, make_record
from flowsheet.config.loader import ExportConfig
from flowsheet.excel.writer import WriteError
from flowsheet.logging.error_log import ErrorLogBuffer
from flowsheet.models.error_record import MALFORMED_DATE, PARSE_FAILURE
from flowsheet.services.orchestrator import ProcessingError, build_document, run_export


def test_build_document_flow_mode(sample_records, tmp_path: Path):
    log = ErrorLogBuffer(logs_dir=tmp_path)
    doc, result = build_document(sample_records, error_log=log)
    assert doc.headers == (
        "messageId", "contactId", "date", "time",
        "city", "color | blue", "color | red", "name",
    )
    assert [row[0] for row in doc.rows] == ["m1", "m2", "m3"]
    assert doc.rows[0][4:] == ("", "X", "X", "Ana")
    assert doc.rows[1][4:] == ("Bogotá", "X", "", "")
    assert doc.rows[2][4:] == ("", "", "", "")
    assert result.total_records == 4
    assert result.exported_rows == 3
    assert result.parse_failures == 1
    assert result.failures[0].message_id == "m4"
    assert result.column_count == 8
    assert [r.error_type for r in log.records] == [PARSE_FAILURE]
    assert log.records[0].row == 5


def test_build_document_message_mode(sample_records):
    doc, result = build_document(sample_records, mode="message")
    assert doc.headers == ("messageId", "contactId", "date", "time", "message")
    assert [row[4] for row in doc.rows] == ["", "", "hola"]
    assert result.mode == "message"
    assert result.parse_failures == 1


def test_build_document_empty_input():
    doc, result = build_document([])
    assert doc.headers == ("messageId", "contactId", "date", "time")
    assert doc.rows == ()
    assert result.exported_rows == 0
    assert not result.has_failures


def test_build_document_counts_malformed_dates(tmp_path: Path):
    log = ErrorLogBuffer(logs_dir=tmp_path)
    records = [make_record("m1", "{}", message_date="2024/03/01 10:00")]
    doc, result = build_document(records, error_log=log)
    assert result.malformed_dates == 1
    assert doc.rows[0][2:4] == ("2024/03/01 10:00", "")
    assert [r.error_type for r in log.records] == [MALFORMED_DATE]


def test_build_document_is_deterministic_under_reordering():
    records = [
        make_record(f"m{i}", flow_content({"tags": [f"t{(i * 7) % 5}", f"t{i % 3}"], f"q{i % 4}": f"a{i}"}))
        for i in range(20)
    ]
    doc, _ = build_document(records)
    shuffled = records[:]
    random.Random(3).shuffle(shuffled)
    doc2, _ = build_document(shuffled)
    assert doc2.headers == doc.headers
    assert len(doc2) == len(doc)
    by_id = {row[0]: row for row in doc.rows}
    assert all(by_id[row[0]] == row for row in doc2.rows)


def test_build_document_isolates_deeply_nested_payload(tmp_path: Path):
    log = ErrorLogBuffer(logs_dir=tmp_path)
    records = [
        make_record("ok", flow_content({"a": "1"})),
        make_record("deep", "[" * 100_000 + "]" * 100_000, row_number=3),
    ]
    doc, result = build_document(records, error_log=log)
    assert [row[0] for row in doc.rows] == ["ok"]
    assert doc.rows[0][4:] == ("1",)
    assert [f.message_id for f in result.failures] == ["deep"]
    assert [r.row for r in log.records] == [3]


def test_build_document_rejects_unknown_mode():
    with pytest.raises(ProcessingError, match="unknown export mode"):
        build_document([], mode="pivot")


def test_build_document_marker_and_encoding():
    records = [make_record("m1", json.dumps({"eventParameters": {"flowResponse": {"c": ["x"]}}}))]
    doc, _ = build_document(records, marker="Sí", encoding="latin-1")
    assert doc.rows[0][-1] == "Sí"


def test_run_export_with_preloaded_records(temp_workdir: Path, sample_records):
    cfg = ExportConfig(input_path="unused.xlsx", output_path="out/result.csv")
    log = ErrorLogBuffer(logs_dir=temp_workdir / "logs")
    result = run_export(cfg, records=sample_records, error_log=log)
    assert result.output_path == Path("out/result.csv")
    assert (temp_workdir / "out" / "result.csv").exists()
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    assert json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])["file"] == "<memory>"


def test_run_export_missing_input(temp_workdir: Path):
    cfg = ExportConfig(input_path="data/missing.xlsx")
    with pytest.raises(ProcessingError, match="not found"):
        run_export(cfg)


def test_run_export_write_failure_still_flushes_error_log(temp_workdir: Path, sample_records):
    cfg = ExportConfig(input_path="unused.xlsx", output_path="out/result.xlsx")
    log = ErrorLogBuffer(logs_dir=temp_workdir / "logs")
    with patch("flowsheet.services.orchestrator.write_document", side_effect=WriteError("disk full")):
        with pytest.raises(ProcessingError, match="disk full"):
            run_export(cfg, records=sample_records, error_log=log)
    assert list((temp_workdir / "logs").glob("errors-*.log"))
