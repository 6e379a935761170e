"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import func
from sqlalchemy.orm import Session

from leaddesk.core.config import settings
from leaddesk.core.dependencies import get_db
from leaddesk.api.v1.router import api_router
from leaddesk.database.connection import DatabasePool
from leaddesk.database.models import Category, Lead
from leaddesk.database.session import init_db, init_session_factory, session_scope
from leaddesk.services.events import event_bus, log_event, WILDCARD
from leaddesk.utils.logging import get_logger, app_logger

logger = get_logger(__name__)


def _table_counts(db: Session) -> dict:
    return {
        "categories": db.query(func.count(Category.id)).scalar() or 0,
        "leads": db.query(func.count(Lead.id)).scalar() or 0,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: engine, session factory, tables, change-event logging.
    Shutdown: unsubscribe and dispose of the engine.
    """
    app_logger.info("🚀 [bold green]Starting leaddesk...[/bold green]")
    try:
        DatabasePool.initialize()
        init_session_factory()
        init_db()
        with session_scope() as db:
            counts = _table_counts(db)
        app_logger.info(
            f"✅ [bold green]Ready[/bold green]: {counts['categories']} categories, "
            f"{counts['leads']} leads (import store: [cyan]{settings.store.type}[/cyan])"
        )
    except Exception as e:
        app_logger.error(f"❌ [bold red]Startup failed:[/bold red] {e}")
        raise

    unsubscribe = event_bus.subscribe(WILDCARD, log_event)

    yield

    app_logger.info("🛑 [yellow]Shutting down...[/yellow]")
    unsubscribe()
    DatabasePool.close()


app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    description=settings.description,
    openapi_url=f"{settings.api_v1_str}/openapi.json",
    lifespan=lifespan,
)

if settings.backend_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.backend_cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "API is running", "version": settings.version}


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Database reachability, pool state and row counts"""
    try:
        return {
            "status": "healthy",
            "store": settings.store.type,
            "database": {**DatabasePool.get_pool_status(), **_table_counts(db)},
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "unhealthy", "store": settings.store.type, "error": str(e)}
