"""
Category API endpoints
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from leaddesk.api.v1.dependencies import verify_api_key
from leaddesk.core.dependencies import get_db
from leaddesk.database.models.database import LeadStatus
from leaddesk.schemas.categories import CategoryCreate, CategoryRecord, CategorySummary
from leaddesk.schemas.leads import CategoryAssignRequest, LeadAssignResponse, LeadPageResponse
from leaddesk.services.category_service import CategoryService
from leaddesk.services.lead_service import LeadService
from leaddesk.services.lead_view import LeadFilter, LeadSort
from leaddesk.utils.exceptions import ValidationError
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/categories", response_model=List[CategorySummary])
async def list_categories(db: Session = Depends(get_db)):
    """List categories with their lead counts."""
    try:
        return CategoryService(db).list_categories()
    except Exception as e:
        logger.error(f"[red]Error listing categories:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/categories",
    response_model=CategoryRecord,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)],
)
async def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    """Create an empty category. Names must be unique."""
    try:
        return CategoryService(db).create_category(payload.name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error creating category {payload.name!r}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/categories/{category_id}", dependencies=[Depends(verify_api_key)])
async def delete_category(category_id: int, db: Session = Depends(get_db)):
    """Delete a category and every lead linked to it."""
    try:
        deleted = CategoryService(db).delete_category(category_id)
        return {"message": f"Category {category_id} deleted", "leads_deleted": deleted}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error deleting category {category_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories/{category_id}/leads", response_model=LeadPageResponse)
async def get_category_leads(
    category_id: int,
    status_filter: Optional[LeadStatus] = Query(None, alias="status"),
    assigned_to: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, phone, website or owner"),
    follow_up_before: Optional[date] = Query(None, description="Follow-up due on or before this day"),
    sort_by: str = Query("created_at"),
    descending: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """
    One page of a category's leads.

    Returns:
        Leads on the requested page plus totals over the filtered list
    """
    try:
        try:
            sort = LeadSort(field=sort_by, descending=descending)
        except PydanticValidationError as e:
            raise ValidationError(e.errors()[0]["msg"])
        lead_filter = LeadFilter(
            status=status_filter,
            assigned_to=assigned_to,
            search=search,
            follow_up_before=follow_up_before,
        )
        page_data = LeadService(db).view_category_leads(
            category_id, lead_filter, sort, page=page, page_size=page_size
        )
        return page_data.model_dump()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching leads of category {category_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/categories/{category_id}/assign",
    response_model=LeadAssignResponse,
    dependencies=[Depends(verify_api_key)],
)
async def assign_category_leads(category_id: int, payload: CategoryAssignRequest, db: Session = Depends(get_db)):
    """Assign every lead of a category to a user; a null assignee unassigns them."""
    try:
        updated = LeadService(db).assign_category_leads(category_id, payload.assigned_to)
        return {"updated": updated, "assigned_to": payload.assigned_to}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error assigning leads of category {category_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
