"""
Session factory for the lead tables
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker, Session

from leaddesk.database.connection import DatabasePool
from leaddesk.database.models import Base
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)

# Bound lazily to the pool's engine on first use
SessionLocal: Optional[sessionmaker] = None


def init_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Bind the session factory to an engine (the shared pool's engine by default).
    Calling it again with an explicit engine rebinds the factory.
    """
    global SessionLocal
    if SessionLocal is None or engine is not None:
        SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine or DatabasePool.get_engine(),
        )
    return SessionLocal


def init_db(engine: Optional[Engine] = None) -> None:
    """Create the categories, leads, lead_categories and competitors tables if missing"""
    engine = engine or DatabasePool.get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info(f"[green]Tables ready:[/green] {', '.join(sorted(Base.metadata.tables))}")


def get_session() -> Session:
    """New session; the caller closes it"""
    factory = SessionLocal or init_session_factory()
    return factory()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request; rolled back on error, always closed"""
    db = get_session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
