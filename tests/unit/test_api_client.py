from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from flowsheet.api.client import (
    MESSAGE_HISTORY_CSV_PATH,
    ApiError,
    MessagingApiClient,
    download_message_history,
)


def _client(response=None, exc=None) -> tuple[MessagingApiClient, MagicMock]:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value = response
    return MessagingApiClient("https://api.example.test/", "secret", session=session, timeout=5), session


def _response(status: int, content: bytes = b"", text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.content = content
    resp.text = text
    return resp


def test_get_message_history_csv_by_date_success():
    client, session = _client(_response(200, b"messageId,content\n"))
    data = client.get_message_history_csv_by_date(14, "2024-01-01", "2024-12-31")
    assert data == b"messageId,content\n"
    session.get.assert_called_once_with(
        f"https://api.example.test{MESSAGE_HISTORY_CSV_PATH}",
        params={"applicationId": 14, "dateFrom": "2024-01-01", "dateTo": "2024-12-31"},
        timeout=5,
    )
    assert session.headers["Authorization"] == "Bearer secret"


def test_http_error_raises_api_error_with_status():
    client, _ = _client(_response(401, text='{"message": "unauthorized"}'))
    with pytest.raises(ApiError) as e:
        client.get_message_history_csv_by_date(14, "2024-01-01", "2024-01-31")
    assert e.value.status_code == 401
    assert "unauthorized" in e.value.body


def test_transport_error_raises_api_error():
    client, _ = _client(exc=requests.ConnectionError("boom"))
    with pytest.raises(ApiError, match="request failed"):
        client.get_message_history_csv_by_date(14, "2024-01-01", "2024-01-31")


@pytest.mark.parametrize(
    "application_id,date_from,date_to",
    [
        ("14", "2024-01-01", "2024-01-31"),
        (True, "2024-01-01", "2024-01-31"),
        (14, "01/01/2024", "2024-01-31"),
        (14, "2024-02-01", "2024-01-31"),
    ],
)
def test_invalid_arguments_rejected_before_request(application_id, date_from, date_to):
    client, session = _client(_response(200))
    with pytest.raises(ApiError):
        client.get_message_history_csv_by_date(application_id, date_from, date_to)
    session.get.assert_not_called()


def test_base_url_required():
    with pytest.raises(ApiError):
        MessagingApiClient("")


def test_download_message_history_writes_file(tmp_path: Path):
    client, _ = _client(_response(200, b"messageId\nm1\n"))
    dest = download_message_history(client, 14, "2024-01-01", "2024-01-31", tmp_path / "in" / "h.csv")
    assert dest.read_bytes() == b"messageId\nm1\n"
