"""JDK Enhancement Proposal lookups scraped from openjdk.org."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from arisa.cache.lookup_cache import LookupCache
from arisa.datatypes.lookup_datatypes import JepRecord
from arisa.errors import FetchError, InvalidFormat
from arisa.services.html_extract import Element, parse_html
from arisa.services.http_client import HttpClient, HttpStatusError

JEP_URL = "https://openjdk.org/jeps/{number}"

MAX_TITLE = 200
MAX_SECTION = 800
MAX_EXCERPT = 300
MAX_LISTED = 3

_ISSUE = re.compile(r"JDK-\d+")

# header table label -> JepRecord field
_HEADER_FIELDS: Dict[str, str] = {
    "author": "author",
    "owner": "owner",
    "type": "jep_type",
    "scope": "scope",
    "status": "status",
    "release": "release",
    "component": "component",
    "discussion": "discussion",
    "reviewed by": "reviewed_by",
    "endorsed by": "endorsed_by",
    "created": "created",
    "updated": "updated",
}


def validate_jep_number(number: int) -> int:
    if not 0 < number < 65536:
        raise InvalidFormat("JEP numbers are between 1 and 65535")
    return number


def _issue_from_cell(cell: Element) -> str:
    for candidate in [*cell.hrefs(), cell.text()]:
        match = _ISSUE.search(candidate)
        if match:
            return match.group(0)
    return cell.clean_text()


def _section_text(document: Element, anchor: str, *chain: str) -> Optional[str]:
    heading = document.find_by_id(anchor)
    target = heading.adjacent(*chain) if heading else None
    if target is None:
        return None
    text = target.clean_text()
    return text or None


def _section_items(document: Element, anchor: str) -> Tuple[str, ...]:
    heading = document.find_by_id(anchor)
    listing = heading.adjacent("ul") if heading else None
    if listing is None:
        return ()
    return tuple(text for li in listing.find_all("li") if (text := li.clean_text()))


def parse_jep_html(markup: str, number: int) -> JepRecord:
    """Extract a :class:`JepRecord` from the HTML of a JEP page."""
    document = parse_html(markup)

    heading = document.find("h1")
    title = heading.clean_text() if heading else f"JEP {number}"
    prefix = f"JEP {number}: "
    if title.startswith(prefix):
        title = title[len(prefix):]

    fields: Dict[str, object] = {}
    for table in document.find_all("table", class_="head"):
        for row in table.find_all("tr"):
            cells = row.find_all("td")
            if len(cells) < 2:
                continue
            label = cells[0].clean_text().lower()
            if label == "issue":
                fields["issue"] = _issue_from_cell(cells[1])
            elif label in _HEADER_FIELDS:
                fields[_HEADER_FIELDS[label]] = cells[1].clean_text()

    motivation = _section_text(document, "Motivation", "h3", "p")
    description = _section_text(document, "Description", "p")

    return JepRecord(
        number=number,
        title=title,
        summary=_section_text(document, "Summary", "p"),
        goals=_section_items(document, "Goals"),
        non_goals=_section_items(document, "Non-Goals"),
        motivation=motivation if motivation and len(motivation) < MAX_SECTION else None,
        description=description if description and len(description) < MAX_SECTION else None,
        **fields,  # type: ignore[arg-type]
    )


async def fetch_jep(http: HttpClient, number: int) -> JepRecord:
    url = JEP_URL.format(number=number)
    try:
        markup = await http.get_text(url)
    except HttpStatusError as exc:
        raise FetchError(f"JEP {number} not found or inaccessible (HTTP {exc.status})") from exc
    return parse_jep_html(markup, number)


async def lookup_jep(cache: LookupCache[JepRecord], http: HttpClient, number: int) -> JepRecord:
    validate_jep_number(number)
    return await cache.get_or_fetch(number, lambda: fetch_jep(http, number))


# -------------------- Formatting --------------------

def _excerpt(text: str, limit: int = MAX_EXCERPT) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def _listing(title: str, items: Tuple[str, ...], noun: str) -> str:
    block = f"\n**{title}**\n" + "".join(f"• {item}\n" for item in items[:MAX_LISTED])
    if len(items) > MAX_LISTED:
        block += f"• ... and {len(items) - MAX_LISTED} more {noun}\n"
    return block


def format_jep_title(record: JepRecord) -> str:
    if len(record.title) > MAX_TITLE:
        return f"JEP {record.number}: {record.title[:180]}..."
    return f"JEP {record.number}: {record.title}"


def format_jep(record: JepRecord, detailed: bool = False) -> str:
    """Render the embed body for a JEP; ``detailed`` adds goals and rationale."""
    parts: List[str] = []

    header = " ".join(
        f"**{label}:** {value}"
        for label, value in (("Status", record.status), ("Release", record.release), ("Type", record.jep_type))
        if value
    )
    if header:
        parts.append(header + "\n\n")

    if record.author:
        parts.append(f"**Author:** {record.author}\n")
    if record.owner:
        parts.append(f"**Owner:** {record.owner}\n")
    if record.summary:
        parts.append(f"\n**Summary**\n{record.summary}\n")

    if detailed:
        if record.goals:
            parts.append(_listing("Goals", record.goals, "goals"))
        if record.non_goals:
            parts.append(_listing("Non-Goals", record.non_goals, "non-goals"))
        if record.motivation:
            parts.append(f"\n**Motivation**\n{_excerpt(record.motivation)}\n")
        if record.description:
            parts.append(f"\n**Implementation**\n{_excerpt(record.description)}\n")
        if record.component:
            parts.append(f"\n**Component:** {record.component}\n")
        if record.reviewed_by:
            parts.append(f"**Reviewed by:** {record.reviewed_by}\n")
        if record.endorsed_by:
            parts.append(f"**Endorsed by:** {record.endorsed_by}\n")

    if record.issue:
        parts.append(f"\n**Issue:** {record.issue}\n")
    if record.created:
        parts.append(f"**Created:** {record.created}\n")

    parts.append(f"\n**Link:** {record.url}")
    return "".join(parts)
