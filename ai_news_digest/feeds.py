"""Feed parsing and recency helpers."""

from __future__ import annotations

import logging
import re
import warnings
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from .models import NewsItem

logger = logging.getLogger(__name__)

# Titles and summaries are routinely bare URLs.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

MAX_DESCRIPTION_LENGTH = 300

_WHITESPACE = re.compile(r"\s+")
_ENTRY_BLOCK = re.compile(r"<(item|entry)(?:\s[^>]*)?>(.*?)</\1>", re.DOTALL)
_ATOM_LINK = re.compile(r"<link\b[^>]*?\bhref=[\"']([^\"']+)[\"'][^>]*>")

_DATE_TAGS = ("pubDate", "published", "updated", "dc:date")
_DESCRIPTION_TAGS = ("description", "summary", "content")


def strip_html(value: Optional[str]) -> str:
    """Return the text content of an HTML fragment on a single line."""
    if not value:
        return ""
    text = BeautifulSoup(value, "html.parser").get_text()
    return _WHITESPACE.sub(" ", text).strip()


def extract_tag(xml: Optional[str], tag: str) -> Optional[str]:
    """Return the content of the first ``tag`` element, preferring CDATA."""
    if not xml:
        return None
    name = re.escape(tag)
    cdata = re.search(
        rf"<{name}(?:\s[^>]*)?>\s*<!\[CDATA\[(.*?)\]\]>\s*</{name}>", xml, re.DOTALL
    )
    if cdata:
        return cdata.group(1)
    match = re.search(rf"<{name}(?:\s[^>]*)?>(.*?)</{name}>", xml, re.DOTALL)
    return match.group(1) if match else None


def _as_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value if value.startswith(("http://", "https://")) else None


def extract_link(xml: Optional[str]) -> Optional[str]:
    """Resolve an entry URL from an Atom href, an RSS link or the guid."""
    if not xml:
        return None
    atom = _ATOM_LINK.search(xml)
    if atom:
        return atom.group(1)

    link = _as_url(extract_tag(xml, "link"))
    if link:
        return link

    return _as_url(extract_tag(xml, "guid"))


def _first_tag(block: str, tags: Sequence[str]) -> Optional[str]:
    for tag in tags:
        value = extract_tag(block, tag)
        if value is not None and value.strip():
            return value.strip()
    return None


def parse_feed(xml: Optional[str]) -> List[NewsItem]:
    """Parse RSS ``<item>`` or Atom ``<entry>`` blocks into news items.

    Blocks missing a title, link, date or description still produce an
    item, with ``None`` in the missing fields.
    """
    if not xml:
        return []

    items: List[NewsItem] = []
    for match in _ENTRY_BLOCK.finditer(xml):
        block = match.group(2)

        raw_title = extract_tag(block, "title")
        title = strip_html(raw_title) or None

        raw_description = _first_tag(block, _DESCRIPTION_TAGS)
        description = strip_html(raw_description)[:MAX_DESCRIPTION_LENGTH] or None

        items.append(
            NewsItem(
                title=title,
                link=extract_link(block),
                date=_first_tag(block, _DATE_TAGS),
                description=description,
            )
        )

    logger.debug("Parsed %d entries from feed document", len(items))
    return items


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse RFC 822 or ISO 8601 timestamps into aware datetimes."""
    if not value or not value.strip():
        return None
    text = value.strip()

    parsed: Optional[datetime]
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def filter_by_date(items: Iterable[NewsItem], cutoff: datetime) -> List[NewsItem]:
    """Keep items published at or after ``cutoff`` and every undated item."""
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)

    kept: List[NewsItem] = []
    for item in items:
        published = parse_date(item.date)
        if published is None or published >= cutoff:
            kept.append(item)
        else:
            logger.debug(
                "Skipping item older than cutoff (%s < %s): %s",
                published,
                cutoff,
                item.link,
            )
    return kept
