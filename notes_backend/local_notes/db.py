import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "local-notes"


def _data_dir() -> Path:
    """Directory holding the default SQLite file (NOTES_DATA_DIR or ~/.local/share/local-notes)."""
    raw = (os.getenv("NOTES_DATA_DIR") or "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_DATA_DIR


def _require_sqlite(url: str) -> str:
    """Return ``url`` unchanged if it names a SQLite database; notes never leave the machine."""
    backend = make_url(url).get_backend_name()
    if backend != "sqlite":
        raise ValueError(f"Notes storage must be a local sqlite database, got {backend!r}")
    return url


def _build_database_url() -> str:
    """
    Build a SQLAlchemy database URL for the local key-value medium.

    Preference order:
    1) NOTES_DATABASE_URL (must be a sqlite URL)
    2) A SQLite file named notes.db inside NOTES_DATA_DIR (or the default data dir)
    """
    env_url = (os.getenv("NOTES_DATABASE_URL") or "").strip()
    if env_url:
        return _require_sqlite(env_url)
    return f"sqlite:///{_data_dir() / 'notes.db'}"


def build_engine(url: str) -> Engine:
    """
    Create an engine for the SQLite database at ``url``.

    It is opened with check_same_thread disabled because the bridge serves
    requests from a thread pool. Nothing connects until first use.
    """
    return create_engine(
        _require_sqlite(url),
        pool_pre_ping=True,
        connect_args={"check_same_thread": False},
    )


DATABASE_URL = _build_database_url()

Base = declarative_base()

# Engine + session configuration
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# PUBLIC_INTERFACE
def create_tables(bind: Engine) -> None:
    """Create the key-value table if it does not exist (and the SQLite file's directory)."""
    # Registers StoredValue on Base.metadata.
    from local_notes import models  # noqa: F401

    database = bind.url.database
    if bind.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)


# PUBLIC_INTERFACE
def make_session_factory(url: str) -> sessionmaker:
    """Build an isolated engine + session factory for ``url`` and make sure its table exists."""
    bound = build_engine(url)
    create_tables(bound)
    return sessionmaker(autocommit=False, autoflush=False, bind=bound)
