"""
Hosted backend REST (PostgREST) client
"""
import httpx
from typing import Any, Dict, List, Optional
from leaddesk.core.config import SupabaseConfig, settings
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)


class SupabaseClient:
    """
    Client for the hosted backend's table REST API.
    Handles authentication headers, requests, and error logging.
    """

    def __init__(
        self,
        config: Optional[SupabaseConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or settings.supabase
        if config is None:
            raise RuntimeError("Supabase store selected but no 'supabase' section in config.yaml")
        self.base_url = config.url.rstrip("/")
        self.api_key = config.api_key
        self.db_schema = config.db_schema
        self.timeout = config.timeout
        self._transport = transport

    def _get_headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        """Request headers with the API key and target schema"""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Accept-Profile": self.db_schema,
            "Content-Profile": self.db_schema,
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table.lstrip('/')}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def select(
        self,
        table: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name (e.g. "categories")
            params: PostgREST query parameters (e.g. {"name": "eq.Acme"})

        Returns:
            List of row dicts
        """
        url = self._table_url(table)
        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._get_headers(), params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[red]❌ Failed to read {table}:[/red] "
                f"[yellow]{e.response.status_code}[/yellow] - {e.response.text}"
            )
            raise
        except httpx.HTTPError as e:
            logger.error(f"[red]❌ HTTP error reading {table}:[/red] {str(e)}")
            raise

    async def insert(
        self,
        table: str,
        rows: List[Dict[str, Any]],
        returning: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Insert rows into a table in one request.

        Args:
            table: Table name
            rows: Row dicts to insert
            returning: Ask for the inserted rows back (ids included)

        Returns:
            Inserted rows in request order, or an empty list when not returning
        """
        url = self._table_url(table)
        prefer = "return=representation" if returning else "return=minimal"
        try:
            logger.debug(f"[cyan]Inserting {len(rows)} rows into[/cyan] {url}")
            async with self._client() as client:
                response = await client.post(url, json=rows, headers=self._get_headers(prefer))
                response.raise_for_status()
                if not returning or not response.content:
                    return []
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[red]❌ Failed to insert into {table}:[/red] "
                f"[yellow]{e.response.status_code}[/yellow] - {e.response.text}"
            )
            raise
        except httpx.HTTPError as e:
            logger.error(f"[red]❌ HTTP error inserting into {table}:[/red] {str(e)}")
            raise
