from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def _connect_args(database_url: str) -> dict:
    # FastAPI serves sync routes from a threadpool.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(config.DATABASE_URL, connect_args=_connect_args(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_schema() -> None:
    # Import for side effects so every table is registered on Base.metadata.
    from backend.models import application, document, parent, parent_note, student, university, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


MAX_ROW_ID = 2**63 - 1  # largest signed 64-bit integer key


def is_storable_id(value) -> bool:
    """True when ``value`` fits an integer primary key column."""
    return isinstance(value, int) and 0 < value <= MAX_ROW_ID
