import logging
import os
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from lib.errors import DBUnavailable

logger = logging.getLogger(__name__)

# Default SQLite path, kept in a user data directory.
# Override with GONNECTIAN_DB_URL (full SQLAlchemy URL) or GONNECTIAN_DB_PATH.
if platform.system() == "Windows":
    _DEFAULT_DB_PATH = Path(os.environ.get("APPDATA", Path.home())) / "gonnectian-console" / "gonnectian.db"
else:
    _DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "gonnectian-console" / "gonnectian.db"

DEFAULT_TAG = "default"

# tag -> (engine, session factory)
_registry: Dict[str, tuple] = {}


def get_db_url() -> str:
    if url := os.environ.get("GONNECTIAN_DB_URL"):
        return url
    db_path = os.environ.get("GONNECTIAN_DB_PATH", str(_DEFAULT_DB_PATH))
    return f"sqlite:///{db_path}"


def register_database(tag: str = DEFAULT_TAG, db_url: Optional[str] = None) -> Engine:
    """Create an engine for *db_url* and register it under *tag*.

    Registering the same tag again replaces the previous engine.
    """
    url = db_url or get_db_url()
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # needed for SQLite + threading
        if url == f"sqlite:///{_DEFAULT_DB_PATH}":
            _DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, echo=False, connect_args=connect_args)
    if tag in _registry:
        _registry[tag][0].dispose()
    _registry[tag] = (engine, sessionmaker(bind=engine, expire_on_commit=False))
    logger.debug("registered database %r -> %s", tag, engine.url.render_as_string(hide_password=True))
    return engine


def unregister_database(tag: str) -> None:
    entry = _registry.pop(tag, None)
    if entry is not None:
        entry[0].dispose()


def get_engine(tag: str = DEFAULT_TAG) -> Engine:
    """Return the engine registered under *tag* or raise DBUnavailable."""
    try:
        return _registry[tag][0]
    except KeyError:
        raise DBUnavailable(f"no database registered under tag {tag!r}") from None


@contextmanager
def get_session(tag: str = DEFAULT_TAG) -> Generator[Session, None, None]:
    """Context manager that yields a database session with auto commit/rollback."""
    try:
        factory = _registry[tag][1]
    except KeyError:
        raise DBUnavailable(f"no database registered under tag {tag!r}") from None
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
