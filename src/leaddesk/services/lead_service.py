"""
Lead service: reading category lead lists, updating lead tracking fields, deleting leads
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from leaddesk.database.models.base import utcnow
from leaddesk.database.models.database import Category, Lead, LeadCategory, LeadStatus
from leaddesk.schemas.leads import LeadDetail, LeadRead, LeadUpdate
from leaddesk.services.base_service import BaseService
from leaddesk.services.events import EventBus, event_bus, LEAD_DELETED, LEAD_UPDATED, LEADS_ASSIGNED
from leaddesk.services.lead_view import LeadFilter, LeadPage, LeadSort, select_visible_leads
from leaddesk.utils.exceptions import NotFoundError
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)


class LeadService(BaseService[Lead]):
    """Service for reading and updating leads"""

    label = "Lead"

    def __init__(self, db: Session, events: EventBus = event_bus):
        super().__init__(db, Lead)
        self.events = events

    def get_lead(self, lead_id: int) -> Lead:
        return self.get_or_404(lead_id)

    def get_lead_detail(self, lead_id: int) -> LeadDetail:
        """Lead with its competitors"""
        return LeadDetail.model_validate(self.get_lead(lead_id))

    def list_category_leads(self, category_id: int) -> List[Lead]:
        """All leads linked to a category, in insertion order"""
        if self.db.get(Category, category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        return (
            self.db.query(Lead)
            .join(LeadCategory, LeadCategory.lead_id == Lead.id)
            .filter(LeadCategory.category_id == category_id)
            .order_by(Lead.id)
            .all()
        )

    def view_category_leads(
        self,
        category_id: int,
        lead_filter: Optional[LeadFilter] = None,
        sort: Optional[LeadSort] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> LeadPage:
        """Filtered, sorted page of a category's leads"""
        leads = [LeadRead.model_validate(lead) for lead in self.list_category_leads(category_id)]
        return select_visible_leads(leads, lead_filter, sort, page=page, page_size=page_size)

    def update_lead(self, lead_id: int, changes: LeadUpdate) -> Lead:
        """
        Apply a partial update.

        Moving a lead to any status other than "Follow-up" clears its
        follow-up date. Explicit nulls clear follow_up_date and assigned_to;
        they are ignored for status and notes.
        """
        lead = self.get_lead(lead_id)
        data = changes.model_dump(exclude_unset=True)
        for key in ("status", "notes"):
            if key in data and data[key] is None:
                del data[key]

        if "status" in data and data["status"] != LeadStatus.FOLLOW_UP.value:
            data["follow_up_date"] = None

        if not data:
            return lead

        lead = self.apply(lead, **data)
        logger.info(f"[green]Updated lead[/green] [cyan]{lead_id}[/cyan]: {sorted(data)}")
        self.events.publish(
            LEAD_UPDATED,
            {"lead_id": lead_id, "changes": {k: (str(v) if v is not None else None) for k, v in data.items()}},
        )
        return lead

    def assign_leads(self, lead_ids: List[int], assigned_to: Optional[str]) -> int:
        """
        Assign (or, with None, unassign) a batch of leads.

        Returns:
            Number of leads updated
        """
        if not lead_ids:
            return 0
        updated = (
            self.db.query(Lead)
            .filter(Lead.id.in_(lead_ids))
            .update({Lead.assigned_to: assigned_to, Lead.updated_at: utcnow()}, synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"[green]Assigned {updated} leads to[/green] [cyan]{assigned_to or 'nobody'}[/cyan]")
        self.events.publish(LEADS_ASSIGNED, {"lead_ids": list(lead_ids), "assigned_to": assigned_to, "updated": updated})
        return updated

    def assign_category_leads(self, category_id: int, assigned_to: Optional[str]) -> int:
        """
        Assign every lead of a category, overwriting earlier assignments.

        Returns:
            Number of leads updated
        """
        if self.db.get(Category, category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        lead_ids = [
            lead_id
            for (lead_id,) in self.db.query(LeadCategory.lead_id).filter(LeadCategory.category_id == category_id)
        ]
        return self.assign_leads(lead_ids, assigned_to)

    def delete_lead(self, lead_id: int) -> None:
        """Delete a lead; its category links and competitors go with it"""
        lead = self.get_or_404(lead_id)
        name = lead.name
        try:
            self.db.delete(lead)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"[yellow]Deleted lead[/yellow] [cyan]{lead_id}[/cyan] ({name})")
        self.events.publish(LEAD_DELETED, {"lead_id": lead_id, "name": name})
