"""
LeadStore implementation over the hosted backend's REST API
"""
from typing import List, Optional

import httpx

from leaddesk.external.supabase.client import SupabaseClient
from leaddesk.schemas.categories import CategoryRecord, LeadCategoryLink
from leaddesk.schemas.leads import CompetitorCreate, LeadCreate, LeadRecord
from leaddesk.utils.exceptions import StoreError

HTTP_BAD_GATEWAY = 502


def _describe(error: httpx.HTTPError) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}: {error.response.text}"
    return str(error) or error.__class__.__name__


class SupabaseLeadStore:
    """Writes categories, leads, links and competitors through PostgREST"""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self.client = client or SupabaseClient()

    async def find_category(self, name: str) -> Optional[CategoryRecord]:
        try:
            rows = await self.client.select(
                "categories",
                params={"select": "*", "name": f"eq.{name}", "order": "id.asc", "limit": 1},
            )
        except httpx.HTTPError as e:
            raise StoreError("find_category", _describe(e), HTTP_BAD_GATEWAY)
        return CategoryRecord.model_validate(rows[0]) if rows else None

    async def create_category(self, name: str) -> CategoryRecord:
        try:
            rows = await self.client.insert("categories", [{"name": name}])
        except httpx.HTTPError as e:
            raise StoreError("create_category", _describe(e), HTTP_BAD_GATEWAY)
        if not rows:
            raise StoreError("create_category", "no row returned", HTTP_BAD_GATEWAY)
        return CategoryRecord.model_validate(rows[0])

    async def bulk_insert_leads(self, fields: List[LeadCreate]) -> List[LeadRecord]:
        if not fields:
            return []
        payload = [item.model_dump(mode="json") for item in fields]
        try:
            rows = await self.client.insert("leads", payload)
        except httpx.HTTPError as e:
            raise StoreError("bulk_insert_leads", _describe(e), HTTP_BAD_GATEWAY)
        return [LeadRecord(id=row["id"], name=row["name"]) for row in rows]

    async def bulk_insert_links(self, links: List[LeadCategoryLink]) -> None:
        if not links:
            return
        try:
            await self.client.insert(
                "lead_categories",
                [link.model_dump(mode="json") for link in links],
                returning=False,
            )
        except httpx.HTTPError as e:
            raise StoreError("bulk_insert_links", _describe(e), HTTP_BAD_GATEWAY)

    async def bulk_insert_competitors(self, rows: List[CompetitorCreate]) -> None:
        if not rows:
            return
        try:
            await self.client.insert(
                "competitors",
                [row.model_dump(mode="json") for row in rows],
                returning=False,
            )
        except httpx.HTTPError as e:
            raise StoreError("bulk_insert_competitors", _describe(e), HTTP_BAD_GATEWAY)
