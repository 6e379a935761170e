import asyncio

import pytest
from sqlalchemy import event

from leaddesk.database.models import Category, Competitor, Lead, LeadCategory
from leaddesk.repositories.lead_store import LeadStore, SQLAlchemyLeadStore
from leaddesk.schemas.categories import LeadCategoryLink
from leaddesk.schemas.leads import CompetitorCreate, LeadCreate
from leaddesk.services.import_service import ImportOptions, LeadImportService
from leaddesk.utils.exceptions import StoreError


def test_sqlalchemy_store_satisfies_protocol(db):
    assert isinstance(SQLAlchemyLeadStore(db), LeadStore)


def test_find_and_create_category(db):
    store = SQLAlchemyLeadStore(db)

    assert asyncio.run(store.find_category("Plumbers")) is None
    created = asyncio.run(store.create_category("Plumbers"))
    found = asyncio.run(store.find_category("Plumbers"))

    assert found.id == created.id
    assert found.name == "Plumbers"
    assert asyncio.run(store.find_category("plumbers")) is None


def test_bulk_insert_leads_returns_ids_in_input_order(db):
    store = SQLAlchemyLeadStore(db)

    records = asyncio.run(store.bulk_insert_leads([LeadCreate(name="A"), LeadCreate(name="B", rating=4.5)]))

    assert [record.name for record in records] == ["A", "B"]
    assert db.get(Lead, records[1].id).rating == 4.5
    assert db.get(Lead, records[0].id).status == "Fresh Lead"


def test_bulk_insert_leads_does_not_reload_each_lead(db, engine):
    store = SQLAlchemyLeadStore(db)
    statements = []

    def capture(conn, cursor, statement, *args):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        records = asyncio.run(store.bulk_insert_leads([LeadCreate(name=f"Lead {i}") for i in range(5)]))
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    assert [record.name for record in records] == [f"Lead {i}" for i in range(5)]
    assert len({record.id for record in records}) == 5
    assert not [s for s in statements if s.lstrip().upper().startswith("SELECT")]


def test_empty_batches_do_not_touch_the_database(db):
    store = SQLAlchemyLeadStore(db)

    assert asyncio.run(store.bulk_insert_leads([])) == []
    asyncio.run(store.bulk_insert_links([]))
    asyncio.run(store.bulk_insert_competitors([]))

    assert db.query(Lead).count() == 0


def test_links_to_missing_rows_raise_store_error(db):
    store = SQLAlchemyLeadStore(db)

    with pytest.raises(StoreError) as exc_info:
        asyncio.run(store.bulk_insert_links([LeadCategoryLink(lead_id=999, category_id=999)]))

    assert exc_info.value.operation == "bulk_insert_links"
    assert exc_info.value.status_code == 500
    # Session is usable again after the rollback
    assert asyncio.run(store.find_category("anything")) is None


def test_competitors_for_missing_lead_raise_store_error(db):
    store = SQLAlchemyLeadStore(db)

    with pytest.raises(StoreError, match="bulk_insert_competitors failed"):
        asyncio.run(store.bulk_insert_competitors([CompetitorCreate(lead_id=42, name="Ghost")]))


def test_csv_import_end_to_end(db):
    store = SQLAlchemyLeadStore(db)
    service = LeadImportService(store)
    long_name = "N" * 300
    content = (
        "query,name,rating,reviews,competitors\n"
        f'Plumbers,{long_name},4.5,12,"Name: Rival\nReviews: 1,204"\n'
        "Roofers,Top Roof,abc,,\n"
        "Plumbers,Pipe Pros,,,\n"
    )

    result = asyncio.run(service.import_csv(content, ImportOptions.grouped_by_column("query")))

    assert result.total_leads_imported == 3
    assert result.categories_created == 2
    assert db.query(Category).count() == 2

    plumbers = db.query(Category).filter(Category.name == "Plumbers").one()
    linked = (
        db.query(Lead)
        .join(LeadCategory, LeadCategory.lead_id == Lead.id)
        .filter(LeadCategory.category_id == plumbers.id)
        .order_by(Lead.id)
        .all()
    )
    assert [lead.name for lead in linked] == ["N" * 255, "Pipe Pros"]
    assert linked[0].reviews == 12

    top = db.query(Lead).filter(Lead.name == "Top Roof").one()
    assert top.rating is None

    competitor = db.query(Competitor).one()
    assert (competitor.lead_id, competitor.name, competitor.reviews) == (linked[0].id, "Rival", 1204)


def test_second_import_reuses_existing_category(db):
    service = LeadImportService(SQLAlchemyLeadStore(db))

    asyncio.run(service.import_csv("name\nOne\n", ImportOptions.for_category("Dentists")))
    second = asyncio.run(service.import_csv("name\nTwo\nThree\n", ImportOptions.for_category("Dentists")))

    assert second.categories_created == 0
    assert db.query(Category).count() == 1
    category = db.query(Category).one()
    assert db.query(LeadCategory).filter(LeadCategory.category_id == category.id).count() == 3
