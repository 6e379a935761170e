"""
Lead store: the write operations the import pipeline performs against persistence.
"""
from contextlib import contextmanager
from typing import List, Optional, Protocol, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leaddesk.database.models.database import Category, Competitor, Lead, LeadCategory
from leaddesk.schemas.categories import CategoryRecord, LeadCategoryLink
from leaddesk.schemas.leads import CompetitorCreate, LeadCreate, LeadRecord
from leaddesk.utils.exceptions import StoreError
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class LeadStore(Protocol):
    """
    Persistence operations used by the importer.
    Every call is one round trip; failures surface as StoreError.
    """

    async def find_category(self, name: str) -> Optional[CategoryRecord]:
        ...

    async def create_category(self, name: str) -> CategoryRecord:
        ...

    async def bulk_insert_leads(self, fields: List[LeadCreate]) -> List[LeadRecord]:
        """Insert leads and return them with store-assigned ids, in input order"""
        ...

    async def bulk_insert_links(self, links: List[LeadCategoryLink]) -> None:
        ...

    async def bulk_insert_competitors(self, rows: List[CompetitorCreate]) -> None:
        ...


class SQLAlchemyLeadStore:
    """LeadStore backed by a SQLAlchemy session; each operation commits on its own"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _operation(self, name: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Store operation {name} failed:[/red] {e}")
            raise StoreError(name, str(e))

    async def find_category(self, name: str) -> Optional[CategoryRecord]:
        with self._operation("find_category"):
            category = (
                self.db.query(Category)
                .filter(Category.name == name)
                .order_by(Category.id)
                .first()
            )
        return CategoryRecord.model_validate(category) if category else None

    async def create_category(self, name: str) -> CategoryRecord:
        with self._operation("create_category"):
            category = Category(name=name)
            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
        return CategoryRecord.model_validate(category)

    async def bulk_insert_leads(self, fields: List[LeadCreate]) -> List[LeadRecord]:
        if not fields:
            return []
        with self._operation("bulk_insert_leads"):
            leads = [Lead(**item.model_dump()) for item in fields]
            self.db.add_all(leads)
            self.db.flush()
            # Read ids before commit expires the instances
            records = [LeadRecord(id=lead.id, name=lead.name) for lead in leads]
            self.db.commit()
        return records

    async def bulk_insert_links(self, links: List[LeadCategoryLink]) -> None:
        if not links:
            return
        with self._operation("bulk_insert_links"):
            self.db.add_all(
                LeadCategory(lead_id=link.lead_id, category_id=link.category_id)
                for link in links
            )
            self.db.commit()

    async def bulk_insert_competitors(self, rows: List[CompetitorCreate]) -> None:
        if not rows:
            return
        with self._operation("bulk_insert_competitors"):
            self.db.add_all(Competitor(**row.model_dump()) for row in rows)
            self.db.commit()
