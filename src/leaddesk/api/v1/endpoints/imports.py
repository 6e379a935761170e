"""
CSV import endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from leaddesk.api.v1.dependencies import verify_api_key
from leaddesk.core.config import settings
from leaddesk.core.dependencies import get_lead_store
from leaddesk.database.models.database import LeadStatus
from leaddesk.repositories.lead_store import LeadStore
from leaddesk.schemas.imports import ImportResult
from leaddesk.services.import_service import ImportOptions, LeadImportService
from leaddesk.utils.exceptions import ValidationError
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/imports", response_model=ImportResult, dependencies=[Depends(verify_api_key)])
async def import_leads(
    file: UploadFile = File(..., description="CSV file with a header row"),
    category_name: Optional[str] = Form(None, description="Import every row into this category"),
    category_column: Optional[str] = Form(None, description="Column holding each row's category (default: query)"),
    default_status: Optional[LeadStatus] = Form(None, description="Status given to imported leads"),
    store: LeadStore = Depends(get_lead_store),
):
    """
    Import leads from a CSV file.

    Without `category_name`, rows are grouped into categories by the value of
    their category column, creating categories that don't exist yet. Rows
    without a name (or category) are skipped. A file that can't be parsed is
    rejected with 400 before anything is written; failures of individual
    categories are reported in `errors` while the other categories import.

    Returns:
        Import totals, per-category outcomes and errors
    """
    try:
        content = await file.read()
        if len(content) > settings.importer.max_upload_bytes:
            raise ValidationError(
                f"File too large: {len(content)} bytes (limit {settings.importer.max_upload_bytes})"
            )

        status_value = default_status.value if default_status else None
        if category_name is not None:
            options = ImportOptions.for_category(category_name, default_status=status_value)
        else:
            options = ImportOptions.grouped_by_column(category_column, default_status=status_value)

        logger.info(f"[cyan]Import requested:[/cyan] {file.filename} ({len(content)} bytes)")
        service = LeadImportService(store)
        return await service.import_csv(content, options)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[red]Error importing {file.filename}:[/red] {e}")
        raise HTTPException(status_code=500, detail=str(e))
