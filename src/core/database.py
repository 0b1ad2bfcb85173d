"""Database connection and session management.

This module handles the SQLite database connection using SQLAlchemy.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from config import DATA_DIR, DATABASE_URL
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401


def make_engine(url: str, **kwargs) -> Engine:
    """Create an engine, enabling foreign key checks on SQLite.

    Args:
        url: SQLAlchemy database URL.
        **kwargs: Extra keyword arguments for ``create_engine``.

    Returns:
        Configured Engine.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

        return engine
    return create_engine(url, **kwargs)


if DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
    # Ensure data directory exists
    DATA_DIR.mkdir(parents=True, exist_ok=True)

engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create tables if they do not exist."""
    Base.metadata.create_all(bind=bind)


def get_db():
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
