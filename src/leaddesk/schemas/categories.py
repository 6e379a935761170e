"""
Category request and response schemas
"""
from typing import Optional
from datetime import datetime
from pydantic import field_validator
from leaddesk.schemas.base import BaseSchema, IDSchema, RecordId


class CategoryCreate(BaseSchema):
    """Request body for creating a category"""
    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name must not be blank")
        return v[:255]


class CategoryRecord(IDSchema):
    """A persisted category as returned by a lead store"""
    name: str
    created_at: Optional[datetime] = None


class CategorySummary(CategoryRecord):
    """Category with the number of leads linked to it"""
    lead_count: int = 0


class LeadCategoryLink(BaseSchema):
    """Join row between a lead and a category"""
    lead_id: RecordId
    category_id: RecordId
