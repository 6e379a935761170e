"""
Leads API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from leaddesk.api.v1.dependencies import verify_api_key
from leaddesk.core.dependencies import get_db
from leaddesk.services.lead_service import LeadService
from leaddesk.utils.logging import get_logger
from leaddesk.schemas.leads import LeadAssignRequest, LeadAssignResponse, LeadDetail, LeadRead, LeadUpdate

logger = get_logger(__name__)
router = APIRouter()


@router.get("/leads/{lead_id}", response_model=LeadDetail)
async def get_lead(lead_id: int, db: Session = Depends(get_db)):
    """
    Get a lead with its competitors.

    Args:
        lead_id: Lead ID
        db: Database session
    """
    try:
        return LeadService(db).get_lead_detail(lead_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error fetching lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/leads/{lead_id}", response_model=LeadRead, dependencies=[Depends(verify_api_key)])
async def update_lead(lead_id: int, changes: LeadUpdate, db: Session = Depends(get_db)):
    """
    Update a lead's status, follow-up date, notes or assignee.
    Any status other than "Follow-up" clears the follow-up date.
    """
    try:
        lead = LeadService(db).update_lead(lead_id, changes)
        return LeadRead.model_validate(lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error updating lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/leads/assign", response_model=LeadAssignResponse, dependencies=[Depends(verify_api_key)])
async def assign_leads(payload: LeadAssignRequest, db: Session = Depends(get_db)):
    """Assign a batch of leads to a user; a null assignee unassigns them."""
    try:
        updated = LeadService(db).assign_leads(payload.lead_ids, payload.assigned_to)
        return {"updated": updated, "assigned_to": payload.assigned_to}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error assigning leads:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/leads/{lead_id}", dependencies=[Depends(verify_api_key)])
async def delete_lead(lead_id: int, db: Session = Depends(get_db)):
    """Delete a lead together with its category links and competitors."""
    try:
        LeadService(db).delete_lead(lead_id)
        return {"message": f"Lead {lead_id} deleted"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error deleting lead {lead_id}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
