"""
CSV decoding and per-row normalization for lead imports
"""
import csv
import io
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from leaddesk.database.models.database import (
    NAME_MAX_LENGTH,
    WEBSITE_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    OWNER_NAME_MAX_LENGTH,
    QUERY_MAX_LENGTH,
    CATEGORY_NAME_MAX_LENGTH,
    COMPETITOR_NAME_MAX_LENGTH,
)
from leaddesk.schemas.leads import CompetitorBase, LeadCreate
from leaddesk.services.competitor_parser import parse_competitors
from leaddesk.utils.exceptions import CSVParseError
from leaddesk.utils.helpers import truncate_string, parse_int, parse_float
from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)

CSVRow = Dict[str, Optional[str]]

# Optional columns carried over onto a lead; "name" is always required
OPTIONAL_FIELDS: FrozenSet[str] = frozenset(
    {"reviews", "rating", "website", "phone", "owner_name", "query", "competitors"}
)


class ParsedLead:
    """A validated row: the lead's field set, its competitors and its category key"""

    __slots__ = ("lead", "competitors", "category")

    def __init__(self, lead: LeadCreate, competitors: List[CompetitorBase], category: Optional[str] = None):
        self.lead = lead
        self.competitors = competitors
        self.category = category

    def __repr__(self) -> str:
        return f"ParsedLead(name={self.lead.name!r}, category={self.category!r}, competitors={len(self.competitors)})"


def decode_content(content: Union[bytes, str]) -> str:
    """Decode uploaded bytes as UTF-8 (a leading BOM is dropped)"""
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVParseError(f"Unable to read CSV file: not valid UTF-8 ({e.reason} at byte {e.start})")


def read_csv_rows(content: Union[bytes, str]) -> List[CSVRow]:
    """
    Decode a CSV document with a header row into a list of column -> value dicts.

    The whole file is decoded before anything is returned: malformed quoting, a
    repeated column name in the header or a row whose field count doesn't match
    the header raises CSVParseError and no rows come back. Blank lines are skipped.

    Args:
        content: Raw file bytes or already decoded text

    Returns:
        One dict per data row, keyed by the stripped header names
    """
    text = decode_content(content)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)

    header: Optional[List[str]] = None
    rows: List[CSVRow] = []
    try:
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            if header is None:
                header = [column.strip() for column in record]
                duplicates = sorted({c for c in header if c and header.count(c) > 1})
                if duplicates:
                    raise CSVParseError(f"Duplicate column names in header: {', '.join(duplicates)}")
                continue
            if len(record) != len(header):
                raise CSVParseError(
                    f"Row {reader.line_num}: expected {len(header)} fields but found {len(record)}"
                )
            rows.append({column: value for column, value in zip(header, record) if column})
    except csv.Error as e:
        raise CSVParseError(f"Unable to parse CSV file: line {reader.line_num}: {e}")

    if header is None:
        raise CSVParseError("CSV file is empty: a header row is required")

    logger.debug(f"[dim]Decoded {len(rows)} CSV rows with columns:[/dim] {header}")
    return rows


def normalize_row(
    row: CSVRow,
    default_status: str,
    fields: Iterable[str] = OPTIONAL_FIELDS,
    category_column: Optional[str] = None,
) -> Optional[ParsedLead]:
    """
    Turn a raw CSV row into a lead field set.

    Strings are stripped, blanks become None, and values are cut to the
    storage column widths without complaint. Numbers are parsed leniently:
    anything unparseable becomes None.

    Args:
        row: Raw column -> value mapping
        default_status: Status given to every imported lead
        fields: Optional columns to carry over
        category_column: Column holding the category key, when grouping per row

    Returns:
        ParsedLead, or None when the row lacks a name (or its category key)
    """
    name = truncate_string(row.get("name"), NAME_MAX_LENGTH)
    if not name:
        return None

    category = None
    if category_column:
        category = truncate_string(row.get(category_column), CATEGORY_NAME_MAX_LENGTH)
        if not category:
            return None

    fields = set(fields)

    def pick(column: str):
        return row.get(column) if column in fields else None

    lead = LeadCreate(
        name=name,
        reviews=parse_int(pick("reviews")),
        rating=parse_float(pick("rating")),
        website=truncate_string(pick("website"), WEBSITE_MAX_LENGTH),
        phone=truncate_string(pick("phone"), PHONE_MAX_LENGTH),
        owner_name=truncate_string(pick("owner_name"), OWNER_NAME_MAX_LENGTH),
        query=truncate_string(pick("query"), QUERY_MAX_LENGTH),
        status=default_status,
        follow_up_date=None,
        notes="",
    )

    competitors = []
    for competitor in parse_competitors(pick("competitors")):
        competitor.name = truncate_string(competitor.name, COMPETITOR_NAME_MAX_LENGTH)
        competitors.append(competitor)

    return ParsedLead(lead=lead, competitors=competitors, category=category)
