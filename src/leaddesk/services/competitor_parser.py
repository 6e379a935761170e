"""
Parser for the free-text competitors cell of a lead CSV row.

The cell holds zero or more entries separated by blank lines, each entry made
of "Name: ...", "Link: ..." and "Reviews: ..." lines in any order:

    Name: Bob's Shop
    Link: http://x.test
    Reviews: 1,204 ratings

    Name: Second
"""
import re
from typing import Any, List, Optional

from leaddesk.schemas.leads import CompetitorBase

_ENTRY_SEPARATOR = re.compile(r"\n[ \t]*\n")
_REVIEW_COUNT = re.compile(r"\d+(?:,\d{3})*")

NAME_PREFIX = "Name:"
LINK_PREFIX = "Link:"
REVIEWS_PREFIX = "Reviews:"


def parse_review_count(text: str) -> Optional[int]:
    """First number in the text, thousands separators allowed ("1,204 reviews" -> 1204)"""
    match = _REVIEW_COUNT.search(text)
    if not match:
        return None
    return int(match.group(0).replace(",", ""))


def _parse_entry(entry: str) -> Optional[CompetitorBase]:
    name = None
    link = None
    reviews = None

    for raw_line in entry.split("\n"):
        line = raw_line.strip()
        if line.startswith(NAME_PREFIX):
            name = line[len(NAME_PREFIX):].strip() or None
        elif line.startswith(LINK_PREFIX):
            link = line[len(LINK_PREFIX):].strip() or None
        elif line.startswith(REVIEWS_PREFIX):
            reviews = parse_review_count(line[len(REVIEWS_PREFIX):])

    # Link and reviews alone don't make a competitor
    if not name:
        return None
    return CompetitorBase(name=name, link=link, reviews=reviews)


def parse_competitors(value: Any) -> List[CompetitorBase]:
    """
    Parse a competitors cell into an ordered list of entries.

    Never raises: empty or unusable input yields an empty list, and entries
    without a Name line are dropped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        value = "\n".join(str(v) for v in value if v)
    text = str(value).replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return []

    competitors = []
    for entry in _ENTRY_SEPARATOR.split(text):
        competitor = _parse_entry(entry)
        if competitor is not None:
            competitors.append(competitor)
    return competitors
