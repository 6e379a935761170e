"""
CSV import result schemas
"""
from typing import List, Optional
from leaddesk.schemas.base import BaseSchema


class GroupError(BaseSchema):
    """
    Failure recorded for one category group.
    `fatal` is True when the group's leads were not imported (resolve or
    insert failure) and False for best-effort steps (links, competitors).
    """
    category: str
    stage: str  # "resolve" | "insert_leads" | "link" | "competitors"
    message: str
    fatal: bool = True


class GroupOutcome(BaseSchema):
    """What happened to one category group"""
    category: str
    rows: int
    imported: int = 0
    category_created: bool = False
    competitors_imported: int = 0


class ImportResult(BaseSchema):
    """Aggregate result of one import run"""
    total_leads_imported: int = 0
    categories_created: int = 0
    created_category_names: List[str] = []
    groups: List[GroupOutcome] = []
    errors: List[GroupError] = []
    summary: Optional[str] = None

    @property
    def failed_categories(self) -> List[str]:
        return [e.category for e in self.errors if e.fatal]
