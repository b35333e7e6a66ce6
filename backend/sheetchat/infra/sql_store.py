import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sheetchat.config import DATABASE_URL
from sheetchat.core.errors import TransportError
from sheetchat.models.base import Base
from sheetchat.models.sheet_row import SheetRow

logger = logging.getLogger(__name__)

# =========================
# ENGINE CONFIGURATION
# =========================

def create_store_engine(url: str = DATABASE_URL):
    """
    Build an engine for the row store.
    SQLite gets a shared connection for in-memory URLs so every thread
    (poller and API) sees the same table.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,  # Check connections before using them
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        echo=False,
    )


def init_db(engine):
    """Create the sheet_rows table if it is missing."""
    Base.metadata.create_all(bind=engine)
    logger.info("Row store tables ready")


def test_connection(engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database connection failed: %s", e)
        return False


# =========================
# ROW STORE
# =========================

class SqlRowStore:
    """Append-only table that behaves like the messages sheet."""

    def __init__(self, url: str = DATABASE_URL, engine=None):
        self.engine = engine or create_store_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            raise TransportError(f"Row store unavailable ({e.__class__.__name__})") from e

    @contextmanager
    def db_session(self):
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise TransportError(f"Row store failed ({e.__class__.__name__})") from e
        finally:
            session.close()

    def list_rows(self) -> list[list[str]]:
        with self.db_session() as session:
            rows = session.query(SheetRow).order_by(SheetRow.position).all()
            return [[r.row_id, r.ts, r.ciphertext, r.version] for r in rows]

    def append_row(self, values: list[str]) -> None:
        row_id, ts, ciphertext, version = (list(values) + [""] * 4)[:4]
        with self.db_session() as session:
            session.add(SheetRow(row_id=row_id, ts=ts, ciphertext=ciphertext, version=version))
