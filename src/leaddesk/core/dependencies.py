"""
Shared dependencies for FastAPI routes
"""
from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session

from leaddesk.core.config import settings
from leaddesk.database.session import get_session
from leaddesk.repositories.lead_store import LeadStore, SQLAlchemyLeadStore


def get_db() -> Generator:
    """
    Database session dependency.
    Yields a database session from the pool and ensures it's closed after use.
    """
    db = get_session()
    try:
        yield db
    finally:
        db.close()


def get_lead_store(db: Session = Depends(get_db)) -> LeadStore:
    """
    Lead store the importer writes to, chosen by `store.type` in config.yaml.
    """
    if settings.store.type == "supabase":
        from leaddesk.external.supabase.store import SupabaseLeadStore
        return SupabaseLeadStore()
    return SQLAlchemyLeadStore(db)
