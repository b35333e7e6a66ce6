# sheetchat/infra/sheets.py

import logging
from typing import Protocol

import requests

from sheetchat.core.errors import TransportError

logger = logging.getLogger(__name__)

SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"
COLUMNS = "A:D"


class RowStore(Protocol):
    """The only two operations the chat needs from its backing store."""

    def list_rows(self) -> list[list[str]]: ...

    def append_row(self, values: list[str]) -> None: ...


class SheetsRowStore:
    def __init__(self, spreadsheet_id: str, sheet_name: str, token_provider, session: requests.Session | None = None):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.token_provider = token_provider
        self.session = session or requests.Session()

    @property
    def range_url(self) -> str:
        return f"{SHEETS_API}/{self.spreadsheet_id}/values/{self.sheet_name}!{COLUMNS}"

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token_provider.get_token()}"}

    def list_rows(self) -> list[list[str]]:
        """Fetch every row of the messages sheet, header included."""
        try:
            resp = self.session.get(self.range_url, headers=self._headers())
        except requests.RequestException as e:
            raise TransportError(f"Sheet read failed ({e})") from e

        if not resp.ok:
            raise TransportError(f"Sheet read failed ({resp.status_code})")

        # Proxies and login pages can answer 200 with HTML
        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError("Sheet read failed (invalid response)") from e
        if not isinstance(data, dict):
            raise TransportError("Sheet read failed (invalid response)")

        return data.get("values") or []

    def append_row(self, values: list[str]) -> None:
        try:
            resp = self.session.post(
                f"{self.range_url}:append",
                params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
                headers=self._headers(),
                json={"values": [values]},
            )
        except requests.RequestException as e:
            raise TransportError(f"Append failed ({e})") from e

        if not resp.ok:
            raise TransportError(f"Append failed ({resp.status_code})")

        logger.debug("Appended row %s to %s", values[0] if values else "?", self.sheet_name)
