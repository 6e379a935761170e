"""
Base schema classes
"""
from pydantic import BaseModel as PydanticBaseModel
from datetime import datetime
from typing import Optional, Union

# Store-assigned identifier: integers from the SQL store, integers or uuids from the hosted backend
RecordId = Union[int, str]


class BaseSchema(PydanticBaseModel):
    """Base schema with common configuration"""

    class Config:
        from_attributes = True  # Allows ORM mode (formerly orm_mode)
        populate_by_name = True
        use_enum_values = True  # Store enum members as their plain string values


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IDSchema(BaseSchema):
    """Schema with ID field"""
    id: RecordId
