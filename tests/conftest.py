"""
Shared fixtures: an in-memory SQLite database and an in-process lead store
with failure injection.
"""
from typing import Callable, Dict, List, Optional

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leaddesk.database.connection import build_engine
from leaddesk.database.models import Base, Category, Lead, LeadCategory
from leaddesk.schemas.categories import CategoryRecord, LeadCategoryLink
from leaddesk.schemas.leads import CompetitorCreate, LeadCreate, LeadRecord
from leaddesk.services.events import EventBus
from leaddesk.utils.exceptions import StoreError


@pytest.fixture
def engine():
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def add_lead(db):
    """Factory inserting a lead linked to a category (created on first use by name)"""

    def factory(category_name: str = "Plumbers", **fields) -> Lead:
        category = db.query(Category).filter(Category.name == category_name).first()
        if category is None:
            category = Category(name=category_name)
            db.add(category)
            db.flush()
        fields.setdefault("name", "Lead")
        lead = Lead(**fields)
        db.add(lead)
        db.flush()
        db.add(LeadCategory(lead_id=lead.id, category_id=category.id))
        db.commit()
        return lead

    return factory


class FakeLeadStore:
    """
    Dict-backed LeadStore.

    `failures` maps an operation name to a predicate over the operation's
    argument; when the predicate returns True the call raises StoreError.
    """

    def __init__(self):
        self.categories: Dict[str, CategoryRecord] = {}
        self.leads: List[dict] = []
        self.links: List[LeadCategoryLink] = []
        self.competitors: List[CompetitorCreate] = []
        self.failures: Dict[str, Callable] = {}
        self.calls: List[str] = []
        self.truncate_lead_batches = False
        self._next_id = 1

    def fail(self, operation: str, when: Optional[Callable] = None) -> None:
        self.failures[operation] = when or (lambda arg: True)

    def _check(self, operation: str, arg) -> None:
        self.calls.append(operation)
        predicate = self.failures.get(operation)
        if predicate is not None and predicate(arg):
            raise StoreError(operation, "simulated failure")

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    async def find_category(self, name: str) -> Optional[CategoryRecord]:
        self._check("find_category", name)
        return self.categories.get(name)

    async def create_category(self, name: str) -> CategoryRecord:
        self._check("create_category", name)
        record = CategoryRecord(id=self._new_id(), name=name)
        self.categories[name] = record
        return record

    async def bulk_insert_leads(self, fields: List[LeadCreate]) -> List[LeadRecord]:
        self._check("bulk_insert_leads", fields)
        records = []
        for item in fields:
            lead_id = self._new_id()
            self.leads.append({"id": lead_id, **item.model_dump()})
            records.append(LeadRecord(id=lead_id, name=item.name))
        if self.truncate_lead_batches:
            return records[:-1]
        return records

    async def bulk_insert_links(self, links: List[LeadCategoryLink]) -> None:
        self._check("bulk_insert_links", links)
        self.links.extend(links)

    async def bulk_insert_competitors(self, rows: List[CompetitorCreate]) -> None:
        self._check("bulk_insert_competitors", rows)
        self.competitors.extend(rows)

    @property
    def writes(self) -> List[str]:
        return [call for call in self.calls if call != "find_category"]


@pytest.fixture
def fake_store():
    return FakeLeadStore()
