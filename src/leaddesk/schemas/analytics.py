"""
Analytics response schemas
"""
from typing import Dict, List
from datetime import date
from leaddesk.schemas.base import BaseSchema


class DailyCount(BaseSchema):
    day: date
    leads: int


class LeadStats(BaseSchema):
    """Aggregate view of a category's leads"""
    total_leads: int
    interested_leads: int
    follow_up_leads: int
    average_rating: float
    status_distribution: Dict[str, int]
    rating_distribution: Dict[int, int]
    leads_over_time: List[DailyCount]


class UserActivity(BaseSchema):
    """Contact activity of one user over their assigned leads"""
    user_id: str
    total_leads: int = 0
    contacted_today: int = 0
    contacted_yesterday: int = 0
    contacted_last_7_days: int = 0
    contacted_last_30_days: int = 0
    interested_today: int = 0
    interested_last_7_days: int = 0
    interested_last_30_days: int = 0
    not_interested_today: int = 0
    not_interested_last_7_days: int = 0
    not_interested_last_30_days: int = 0
    follow_up_scheduled: int = 0
