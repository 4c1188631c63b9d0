"""EMBUDO — Database Engine & Session Factory.

Two tables: `daily_records` (one row per date, the record as JSON) and
`raw_sheet_imports` (the audit trail of every imported payload).
"""

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy import text
from embudo.config import settings
from embudo.models.raw_models import RawSheetImport
from embudo.models.stored_models import StoredRecord
from embudo.core.logging import get_logger

logger = get_logger("database")

db_url = settings.effective_database_url

EMBUDO_TABLES = [StoredRecord.__table__, RawSheetImport.__table__]


def _mask_url(url: str) -> str:
    """Hide the password of a server DB URL before it reaches the logs."""
    if "@" not in url:
        return url
    credentials, host = url.split("@", 1)
    scheme, _, userinfo = credentials.partition("//")
    if ":" not in userinfo:
        return url
    user = userinfo.split(":", 1)[0]
    return f"{scheme}//{user}:****@{host}"


engine_kwargs: dict = {"echo": False}

if db_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs["pool_pre_ping"] = True
    engine_kwargs["pool_recycle"] = 300

engine = create_engine(db_url, **engine_kwargs)
logger.info(f"Record store: {_mask_url(db_url)}")


def check_connection() -> bool:
    """SELECT 1 against the record store."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Record store reachable")
        return True
    except Exception as e:
        logger.error(f"Record store unreachable: {e}")
        return False


def init_db() -> None:
    """Create the record and import-audit tables if they are missing."""
    SQLModel.metadata.create_all(engine, tables=EMBUDO_TABLES)
    logger.info(f"Tables ready: {', '.join(t.name for t in EMBUDO_TABLES)}")


def get_session():
    """Dependency — yields a DB session."""
    with Session(engine) as session:
        yield session
