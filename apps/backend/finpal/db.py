from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .config import settings


class Base(DeclarativeBase):
    """SQLAlchemy Declarative Base."""

    pass


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory(url: str) -> bool:
    return _is_sqlite(url) and ":memory:" in url


def build_engine(url: str) -> Engine:
    """Engine for `url` with pooling suited to the backend (SQLite file, SQLite memory, server DB)."""
    kwargs = dict(pool_pre_ping=True, echo=False)
    if _is_sqlite(url):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(pool_recycle=1800, pool_size=5, max_overflow=10)
    if _is_memory(url):
        # One shared connection so the app and test sessions see the same tables
        kwargs["poolclass"] = StaticPool

    eng = create_engine(url, **kwargs)

    if _is_sqlite(url) and not _is_memory(url):

        @event.listens_for(eng, "connect")
        def _sqlite_pragma(dbapi_conn, _):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.close()

    return eng


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Create all tables registered on Base (and the SQLite data directory)."""
    import finpal.orm_models  # noqa: F401

    url = str(engine.url)
    if url.startswith("sqlite:///") and not _is_memory(url):
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
