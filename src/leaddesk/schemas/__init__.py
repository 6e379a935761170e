"""
Pydantic schemas for request/response validation
"""
from leaddesk.schemas.base import (
    BaseSchema,
    TimestampSchema,
    IDSchema,
    RecordId,
)
from leaddesk.schemas.categories import (
    CategoryCreate,
    CategoryRecord,
    CategorySummary,
    LeadCategoryLink,
)
from leaddesk.schemas.leads import (
    LeadBase,
    LeadCreate,
    LeadRecord,
    LeadRead,
    LeadDetail,
    LeadUpdate,
    LeadAssignRequest,
    CategoryAssignRequest,
    LeadAssignResponse,
    LeadPageResponse,
    CompetitorBase,
    CompetitorCreate,
    CompetitorRead,
)
from leaddesk.schemas.imports import (
    GroupError,
    GroupOutcome,
    ImportResult,
)
from leaddesk.schemas.analytics import (
    DailyCount,
    LeadStats,
    UserActivity,
)

__all__ = [
    # Base schemas
    "BaseSchema",
    "TimestampSchema",
    "IDSchema",
    "RecordId",
    # Category schemas
    "CategoryCreate",
    "CategoryRecord",
    "CategorySummary",
    "LeadCategoryLink",
    # Lead schemas
    "LeadBase",
    "LeadCreate",
    "LeadRecord",
    "LeadRead",
    "LeadDetail",
    "LeadUpdate",
    "LeadAssignRequest",
    "CategoryAssignRequest",
    "LeadAssignResponse",
    "LeadPageResponse",
    "CompetitorBase",
    "CompetitorCreate",
    "CompetitorRead",
    # Import schemas
    "GroupError",
    "GroupOutcome",
    "ImportResult",
    # Analytics schemas
    "DailyCount",
    "LeadStats",
    "UserActivity",
]
