# sheetchat/config.py

import os
from pydantic import BaseModel

# =========================
# CONFIGURATION
# =========================

SPREADSHEET_ID = os.getenv("SHEETCHAT_SPREADSHEET_ID", "")
SHEET_NAME = os.getenv("SHEETCHAT_SHEET_NAME", "messages")
POLL_INTERVAL = float(os.getenv("SHEETCHAT_POLL_INTERVAL", "10"))
STORE_BACKEND = os.getenv("SHEETCHAT_STORE", "sheets")  # "sheets" or "sql"
DATABASE_URL = os.getenv("SHEETCHAT_DATABASE_URL", "sqlite:///./sheetchat.db")
LOG_LEVEL = os.getenv("SHEETCHAT_LOG_LEVEL", "INFO")
SEND_RATE_LIMIT = "30/minute"


class Settings(BaseModel):
    spreadsheet_id: str = SPREADSHEET_ID
    sheet_name: str = SHEET_NAME
    poll_interval: float = POLL_INTERVAL
    store_backend: str = STORE_BACKEND
    database_url: str = DATABASE_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """Re-read the environment (module constants are fixed at import)."""
        return cls(
            spreadsheet_id=os.getenv("SHEETCHAT_SPREADSHEET_ID", SPREADSHEET_ID),
            sheet_name=os.getenv("SHEETCHAT_SHEET_NAME", SHEET_NAME),
            poll_interval=float(os.getenv("SHEETCHAT_POLL_INTERVAL", str(POLL_INTERVAL))),
            store_backend=os.getenv("SHEETCHAT_STORE", STORE_BACKEND),
            database_url=os.getenv("SHEETCHAT_DATABASE_URL", DATABASE_URL),
        )
