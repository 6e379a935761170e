"""
Lead request and response schemas
"""
from typing import Optional, List
from datetime import datetime, date
from leaddesk.database.models.database import LeadStatus
from leaddesk.schemas.base import BaseSchema, IDSchema, TimestampSchema, RecordId


class LeadBase(BaseSchema):
    """Base lead schema with common fields"""
    name: str
    reviews: Optional[int] = None
    rating: Optional[float] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    owner_name: Optional[str] = None
    query: Optional[str] = None


class LeadCreate(LeadBase):
    """Field set handed to a store for insertion"""
    status: LeadStatus = LeadStatus.FRESH.value
    follow_up_date: Optional[date] = None
    notes: str = ""


class LeadRecord(IDSchema):
    """A freshly inserted lead; only the store-assigned id and name are relied on"""
    name: str


class CompetitorBase(BaseSchema):
    """A competitor entry parsed from a lead's competitors cell"""
    name: Optional[str] = None
    link: Optional[str] = None
    reviews: Optional[int] = None


class CompetitorCreate(CompetitorBase):
    """Competitor row ready for insertion"""
    lead_id: RecordId


class CompetitorRead(CompetitorCreate, IDSchema):
    """Persisted competitor"""
    pass


class LeadRead(LeadBase, IDSchema, TimestampSchema):
    """Lead as returned by the API"""
    status: LeadStatus = LeadStatus.FRESH.value
    follow_up_date: Optional[date] = None
    notes: str = ""
    assigned_to: Optional[str] = None


class LeadDetail(LeadRead):
    """Lead with its competitors"""
    competitors: List[CompetitorRead] = []


class LeadUpdate(BaseSchema):
    """Partial update of a lead's tracking fields"""
    status: Optional[LeadStatus] = None
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None


class LeadAssignRequest(BaseSchema):
    """Bulk assignment of leads to a user (None unassigns)"""
    lead_ids: List[int]
    assigned_to: Optional[str] = None


class CategoryAssignRequest(BaseSchema):
    """Assignment of every lead in a category to a user (None unassigns)"""
    assigned_to: Optional[str] = None


class LeadAssignResponse(BaseSchema):
    """Result of a bulk assignment"""
    updated: int
    assigned_to: Optional[str] = None


class LeadPageResponse(BaseSchema):
    """One page of a filtered, sorted lead list"""
    items: List[LeadRead]
    total: int
    page: int
    page_size: int
    total_pages: int
