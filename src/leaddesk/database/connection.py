"""
Engine construction and the shared connection pool
"""
from typing import Optional

from sqlalchemy import create_engine, event, Engine

from leaddesk.core.config import settings, DatabaseConfig
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    # ON DELETE CASCADE on lead links and competitors is a no-op otherwise
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for `url`.
    SQLite connections get foreign key enforcement switched on.
    """
    engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def engine_from_config(config: DatabaseConfig) -> Engine:
    """Engine for the configured database; pool sizing only applies to server databases"""
    if config.is_sqlite:
        return build_engine(
            config.url,
            echo=config.pool.echo,
            connect_args={"check_same_thread": False},
        )
    return build_engine(
        config.url,
        pool_pre_ping=True,
        pool_size=config.pool.size,
        max_overflow=config.pool.max_overflow,
        pool_timeout=config.pool.timeout,
        pool_recycle=config.pool.recycle,
        echo=config.pool.echo,
    )


class DatabasePool:
    """
    Process-wide engine holder.
    Every session, request and import run shares the one engine created here.
    """

    _engine: Optional[Engine] = None

    @classmethod
    def initialize(cls, config: Optional[DatabaseConfig] = None) -> None:
        """Create the engine from `config` (default: settings.database). No-op when already up."""
        if cls._engine is not None:
            logger.warning("Database pool already initialized")
            return

        try:
            cls._engine = engine_from_config(config or settings.database)
        except Exception as e:
            logger.error(f"[red]❌ Failed to initialize database pool:[/red] {e}")
            raise

        logger.info(
            f"[green]Database pool initialized:[/green] "
            f"[cyan]{cls._engine.url.render_as_string(hide_password=True)}[/cyan]"
        )

    @classmethod
    def get_engine(cls) -> Engine:
        """The shared engine, created on first use"""
        if cls._engine is None:
            cls.initialize()
        return cls._engine

    @classmethod
    def close(cls) -> None:
        """Dispose of the engine and its connections"""
        if cls._engine is None:
            return
        try:
            cls._engine.dispose()
            logger.info("[green]Database pool closed[/green]")
        except Exception as e:
            logger.error(f"[red]Error closing database pool:[/red] {e}")
        finally:
            cls._engine = None

    @classmethod
    def get_pool_status(cls) -> dict:
        """Initialization flag, dialect and checked-out connection count"""
        if cls._engine is None:
            return {"initialized": False, "dialect": None, "checked_out": 0}

        checked_out = getattr(cls._engine.pool, "checkedout", None)
        return {
            "initialized": True,
            "dialect": cls._engine.dialect.name,
            "checked_out": checked_out() if callable(checked_out) else 0,
        }
