from __future__ import annotations

import logging
import re
from pathlib import Path

import requests

"""Messaging platform client: message history CSV download.

Only one operation of the platform API is used: fetching the message history
of an application between two dates as CSV. The downloaded file is what the
loader turns into RawRecords.
"""

__all__ = [
    "ApiError",
    "MESSAGE_HISTORY_CSV_PATH",
    "MessagingApiClient",
    "download_message_history",
]

logger = logging.getLogger(__name__)

MESSAGE_HISTORY_CSV_PATH = "/v1/chat/message/history/csv"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ApiError(Exception):
    """Raised for invalid arguments, transport failures and non-2xx responses."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MessagingApiClient:
    """Thin HTTP client for the message history endpoint.

    Args:
        base_url: API root, e.g. "https://api.example.com"
        api_key: Sent as a bearer token when given
        timeout: Request timeout in seconds
        history_path: Endpoint path of the CSV history export
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        timeout: float = 30.0,
        history_path: str = MESSAGE_HISTORY_CSV_PATH,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ApiError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.history_path = history_path
        self.session = session or requests.Session()
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def get_message_history_csv_by_date(
        self, application_id: int, date_from: str, date_to: str
    ) -> bytes:
        """Fetch the message history CSV for `application_id` in [date_from, date_to].

        Dates are YYYY-MM-DD strings.

        Raises:
            ApiError: Bad arguments, request failure or non-2xx status
        """
        if not isinstance(application_id, int) or isinstance(application_id, bool):
            raise ApiError(f"application_id must be an integer: {application_id!r}")
        for name, value in (("date_from", date_from), ("date_to", date_to)):
            if not isinstance(value, str) or not _DATE_RE.match(value):
                raise ApiError(f"{name} must be YYYY-MM-DD: {value!r}")
        if date_from > date_to:
            raise ApiError(f"date_from {date_from} is after date_to {date_to}")

        url = f"{self.base_url}{self.history_path}"
        params = {"applicationId": application_id, "dateFrom": date_from, "dateTo": date_to}
        logger.debug(f"GET {url} params={params}")
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"request failed: {e}") from e
        if not resp.ok:
            raise ApiError(
                f"message history request failed: HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp.content


def download_message_history(
    client: MessagingApiClient,
    application_id: int,
    date_from: str,
    date_to: str,
    destination: Path,
) -> Path:
    """Fetch the history CSV and save it to `destination`.

    Raises:
        ApiError: As get_message_history_csv_by_date
        OSError: The file cannot be written
    """
    payload = client.get_message_history_csv_by_date(application_id, date_from, date_to)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(payload)
    logger.info(f"downloaded message history bytes={len(payload)} -> {destination}")
    return destination
