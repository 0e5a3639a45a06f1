# Shared pytest fixtures
from __future__ import annotations
import json
import logging
import tempfile
from pathlib import Path
from typing import Any

import pytest

from flowsheet.logging.init import LOGGER_NAME
from flowsheet.models.raw_record import RawRecord


def flow_content(answers: dict[str, Any]) -> str:
    return json.dumps({"eventParameters": {"flowResponse": answers}}, ensure_ascii=False)


def make_record(
    message_id: str = "m1",
    content: Any = None,
    *,
    contact_id: str = "c1",
    message_date: str = "2024-03-01T10:00:00+02:00",
    send_type: str = "INBOUND",
    row_number: int = -1,
) -> RawRecord:
    return RawRecord(
        message_id=message_id,
        contact_id=contact_id,
        message_date=message_date,
        send_type=send_type,
        content=content,
        row_number=row_number,
    )


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    yield
    # Drop handlers bound to this test's captured stdout
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_path: ./data/messages.xlsx
output_path: ./out/Datos_Exportados.xlsx
mode: flow
sheet_name: Datos
presence_marker: X
api:
  base_url: https://api.example.test
  application_id: 14
  date_from: "2024-01-01"
  date_to: "2024-12-31"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "export.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_records() -> list[RawRecord]:
    return [
        make_record("m1", flow_content({"color": ["red", "blue"], "name": "Ana"}), row_number=2),
        make_record("m2", flow_content({"color": ["blue"], "city": "Bogotá"}), row_number=3),
        make_record("m3", json.dumps({"body": "hola"}), row_number=4),
        make_record("m4", "{not json", row_number=5),
    ]


@pytest.fixture()
def write_messages_xlsx(temp_workdir: Path, sample_records: list[RawRecord]) -> Path:
    import pandas as pd

    path = temp_workdir / "data" / "messages.xlsx"
    rows = [
        {
            "messageId": r.message_id,
            "contactId": r.contact_id,
            "messageDate": r.message_date,
            "sendType": r.send_type,
            "content": r.content,
        }
        for r in sample_records
    ]
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="messages", index=False)
    return path
