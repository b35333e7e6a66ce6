# sheetchat/services/store_factory.py

from sheetchat.config import Settings
from sheetchat.core.errors import ConfigurationError
from sheetchat.infra.google_auth import TokenProvider
from sheetchat.infra.sheets import SheetsRowStore
from sheetchat.infra.sql_store import SqlRowStore


def build_store_factory(settings: Settings):
    """
    Returns store_factory(account) for ChatSession.connect, picking the
    backend named in settings.store_backend.
    """
    if settings.store_backend == "sql":
        store = None

        def sql_factory(account):
            nonlocal store
            if store is None:
                store = SqlRowStore(settings.database_url)
            return store

        return sql_factory

    if settings.store_backend != "sheets":
        raise ConfigurationError(f"Unknown store backend: {settings.store_backend}")

    def sheets_factory(account):
        if not settings.spreadsheet_id:
            raise ConfigurationError("SHEETCHAT_SPREADSHEET_ID is not set.")
        tokens = TokenProvider(account)
        tokens.get_token()
        return SheetsRowStore(settings.spreadsheet_id, settings.sheet_name, tokens)

    return sheets_factory
