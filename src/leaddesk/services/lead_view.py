"""
Filtering, sorting and paging of an in-memory lead list.

Everything here is a pure function of its inputs so list screens can be
computed (and tested) without touching a store.
"""
import math
from datetime import date
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, field_validator

from leaddesk.database.models.database import LeadStatus
from leaddesk.schemas.leads import LeadRead

SORTABLE_FIELDS = ("name", "rating", "reviews", "status", "follow_up_date", "created_at", "updated_at")
SEARCHABLE_FIELDS = ("name", "phone", "website", "owner_name")


class LeadFilter(BaseModel):
    """Which leads are visible"""
    status: Optional[LeadStatus] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = None
    follow_up_before: Optional[date] = None  # follow-up due on or before this day

    class Config:
        use_enum_values = True

    def matches(self, lead: LeadRead) -> bool:
        if self.status is not None and lead.status != self.status:
            return False
        if self.assigned_to is not None and lead.assigned_to != self.assigned_to:
            return False
        if self.follow_up_before is not None:
            if lead.follow_up_date is None or lead.follow_up_date > self.follow_up_before:
                return False
        needle = (self.search or "").strip().lower()
        if needle:
            haystack = (getattr(lead, f) for f in SEARCHABLE_FIELDS)
            if not any(value and needle in str(value).lower() for value in haystack):
                return False
        return True


class LeadSort(BaseModel):
    """Sort key; missing values always sort last"""
    field: str = "created_at"
    descending: bool = False

    @field_validator("field")
    @classmethod
    def check_field(cls, v: str) -> str:
        if v not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {v!r}; choose one of {', '.join(SORTABLE_FIELDS)}")
        return v


class LeadPage(BaseModel):
    """One page of the visible leads"""
    items: List[LeadRead]
    total: int
    page: int
    page_size: int
    total_pages: int


def _sort_value(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


def sort_leads(leads: Sequence[LeadRead], sort: LeadSort) -> List[LeadRead]:
    present = [lead for lead in leads if getattr(lead, sort.field) is not None]
    missing = [lead for lead in leads if getattr(lead, sort.field) is None]
    present.sort(key=lambda lead: _sort_value(getattr(lead, sort.field)), reverse=sort.descending)
    return present + missing


def select_visible_leads(
    leads: Sequence[LeadRead],
    lead_filter: Optional[LeadFilter] = None,
    sort: Optional[LeadSort] = None,
    page: int = 1,
    page_size: int = 25,
) -> LeadPage:
    """
    Filter, sort and slice a lead list.

    Args:
        leads: Every lead of the current list (e.g. a category)
        lead_filter: Visibility rules, None shows everything
        sort: Sort key, None keeps input order
        page: 1-based page number; pages past the end come back empty
        page_size: Leads per page

    Returns:
        LeadPage with the slice and totals over the filtered list
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    visible = [lead for lead in leads if lead_filter is None or lead_filter.matches(lead)]
    if sort is not None:
        visible = sort_leads(visible, sort)

    total = len(visible)
    start = (page - 1) * page_size
    return LeadPage(
        items=visible[start:start + page_size],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )
