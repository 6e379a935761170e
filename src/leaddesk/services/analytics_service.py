"""
Lead analytics: per-category summaries and per-user contact activity
"""
import math
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from leaddesk.database.models.base import utcnow
from leaddesk.database.models.database import Category, Lead, LeadCategory, LeadStatus
from leaddesk.schemas.analytics import DailyCount, LeadStats, UserActivity
from leaddesk.schemas.leads import LeadRead
from leaddesk.services.lead_service import LeadService
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)

TREND_DAYS = 7


def summarize_leads(leads: Sequence[LeadRead], today: date) -> LeadStats:
    """
    Summarize a list of leads.

    Args:
        leads: Leads to summarize (typically one category)
        today: Last day of the creation trend window

    Returns:
        LeadStats; leads without a status count as fresh, the average rating
        only covers rated leads and is 0 when none are rated
    """
    status_counts = Counter(lead.status or LeadStatus.FRESH.value for lead in leads)

    rated = [lead.rating for lead in leads if lead.rating]
    average_rating = sum(rated) / len(rated) if rated else 0.0

    rating_distribution = {star: 0 for star in range(1, 6)}
    for lead in leads:
        star = math.floor(lead.rating or 0)
        if star in rating_distribution:
            rating_distribution[star] += 1

    created_per_day = Counter(lead.created_at.date() for lead in leads if lead.created_at)
    window = [today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)]

    return LeadStats(
        total_leads=len(leads),
        interested_leads=status_counts.get(LeadStatus.INTERESTED.value, 0),
        follow_up_leads=status_counts.get(LeadStatus.FOLLOW_UP.value, 0),
        average_rating=round(average_rating, 2),
        status_distribution=dict(status_counts),
        rating_distribution=rating_distribution,
        leads_over_time=[DailyCount(day=day, leads=created_per_day.get(day, 0)) for day in window],
    )


class AnalyticsService:
    """Analytics queries over the SQL database"""

    def __init__(self, db: Session):
        self.db = db

    def category_stats(self, category_id: int, today: Optional[date] = None) -> LeadStats:
        leads = [LeadRead.model_validate(lead) for lead in LeadService(self.db).list_category_leads(category_id)]
        return summarize_leads(leads, today or utcnow().date())

    def _count(self, user_id: str, *criteria) -> int:
        # Only leads that still belong to an existing category
        categorized = (
            select(LeadCategory.lead_id)
            .join(Category, Category.id == LeadCategory.category_id)
        )
        query = (
            self.db.query(func.count(Lead.id))
            .filter(Lead.assigned_to == user_id)
            .filter(Lead.id.in_(categorized))
        )
        for criterion in criteria:
            query = query.filter(criterion)
        return query.scalar() or 0

    def user_activity(self, user_id: str, now: Optional[datetime] = None) -> UserActivity:
        """
        Contact activity over a user's assigned leads.
        A lead counts as contacted once its status left "Fresh Lead"; windows
        are measured on updated_at from midnight of `now`.
        """
        now = now or utcnow()
        today = datetime(now.year, now.month, now.day)
        yesterday = today - timedelta(days=1)
        last_7_days = today - timedelta(days=7)
        last_30_days = today - timedelta(days=30)

        contacted = Lead.status != LeadStatus.FRESH.value
        interested = Lead.status == LeadStatus.INTERESTED.value
        not_interested = Lead.status == LeadStatus.NOT_INTERESTED.value

        activity = UserActivity(
            user_id=user_id,
            total_leads=self._count(user_id),
            contacted_today=self._count(user_id, contacted, Lead.updated_at >= today),
            contacted_yesterday=self._count(
                user_id, contacted, Lead.updated_at >= yesterday, Lead.updated_at < today
            ),
            contacted_last_7_days=self._count(user_id, contacted, Lead.updated_at >= last_7_days),
            contacted_last_30_days=self._count(user_id, contacted, Lead.updated_at >= last_30_days),
            interested_today=self._count(user_id, interested, Lead.updated_at >= today),
            interested_last_7_days=self._count(user_id, interested, Lead.updated_at >= last_7_days),
            interested_last_30_days=self._count(user_id, interested, Lead.updated_at >= last_30_days),
            not_interested_today=self._count(user_id, not_interested, Lead.updated_at >= today),
            not_interested_last_7_days=self._count(user_id, not_interested, Lead.updated_at >= last_7_days),
            not_interested_last_30_days=self._count(user_id, not_interested, Lead.updated_at >= last_30_days),
            follow_up_scheduled=self._count(
                user_id,
                Lead.status == LeadStatus.FOLLOW_UP.value,
                Lead.follow_up_date.isnot(None),
            ),
        )
        logger.debug(f"[dim]Activity for {user_id}:[/dim] {activity.model_dump()}")
        return activity
