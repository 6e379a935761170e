"""
Category management
"""
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from leaddesk.database.models.database import Category, Lead, LeadCategory
from leaddesk.schemas.categories import CategorySummary
from leaddesk.services.base_service import BaseService
from leaddesk.services.events import EventBus, event_bus, CATEGORY_CREATED, CATEGORY_DELETED
from leaddesk.utils.exceptions import ValidationError
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService(BaseService[Category]):
    """Create, list and delete categories"""

    label = "Category"

    def __init__(self, db: Session, events: EventBus = event_bus):
        super().__init__(db, Category)
        self.events = events

    def list_categories(self) -> List[CategorySummary]:
        """All categories with their lead counts, oldest first"""
        rows = (
            self.db.query(Category, func.count(LeadCategory.id))
            .outerjoin(LeadCategory, LeadCategory.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.created_at, Category.id)
            .all()
        )
        return [
            CategorySummary(id=category.id, name=category.name, created_at=category.created_at, lead_count=count)
            for category, count in rows
        ]

    def create_category(self, name: str) -> Category:
        """Create a category; names are unique (exact, case-sensitive match)"""
        if self.find_one_by(name=name):
            raise ValidationError(f"Category '{name}' already exists")
        category = self.create(name=name)
        logger.info(f"[green]Created category[/green] [bold cyan]{name}[/bold cyan]")
        self.events.publish(CATEGORY_CREATED, {"category_id": category.id, "name": category.name})
        return category

    def delete_category(self, category_id: int) -> int:
        """
        Delete a category together with every lead linked to it.

        Returns:
            Number of leads deleted
        """
        category = self.get_or_404(category_id)

        leads = (
            self.db.query(Lead)
            .join(LeadCategory, LeadCategory.lead_id == Lead.id)
            .filter(LeadCategory.category_id == category_id)
            .all()
        )
        name = category.name
        try:
            for lead in leads:
                self.db.delete(lead)
            self.db.delete(category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"[yellow]Deleted category[/yellow] [bold cyan]{name}[/bold cyan] "
            f"and {len(leads)} leads"
        )
        self.events.publish(
            CATEGORY_DELETED, {"category_id": category_id, "name": name, "leads_deleted": len(leads)}
        )
        return len(leads)
