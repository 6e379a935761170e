"""
Analytics API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from leaddesk.core.dependencies import get_db
from leaddesk.schemas.analytics import LeadStats, UserActivity
from leaddesk.services.analytics_service import AnalyticsService
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/categories/{category_id}/analytics", response_model=LeadStats)
async def get_category_analytics(category_id: int, db: Session = Depends(get_db)):
    """Status and rating distributions plus the 7-day creation trend of a category."""
    try:
        return AnalyticsService(db).category_stats(category_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error computing analytics for category {category_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/users/{user_id}/activity", response_model=UserActivity)
async def get_user_activity(user_id: str, db: Session = Depends(get_db)):
    """Contact activity over the leads assigned to a user."""
    try:
        return AnalyticsService(db).user_activity(user_id)
    except Exception as e:
        logger.error(f"[red]Error computing activity for user {user_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
