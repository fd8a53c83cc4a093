"""Rendering helpers for digest outputs."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Mapping, Optional

from .feeds import parse_date
from .labels import Language, get_labels
from .models import SourceResult
from .templating import get_environment

_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def format_date(value: str, lang: Optional[str] = None) -> str:
    """Render a short localized date, or return ``value`` when unparseable."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    if Language.resolve(lang) is Language.EN:
        return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"
    return f"{parsed.year}年{parsed.month}月{parsed.day}日"


def format_markdown(
    results: Mapping[str, SourceResult],
    *,
    days: int,
    lang: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render the digest as a Markdown document using the Jinja2 template."""
    env = get_environment()
    template = env.get_template("digest.md.j2")
    sources = [result for result in results.values() if result.has_any_items()]
    return template.render(
        labels=get_labels(lang),
        lang=Language.resolve(lang).value,
        days=days,
        now=now or datetime.now(),
        sources=sources,
    )


def format_json(results: Mapping[str, SourceResult]) -> str:
    """Render the fetched results as indented JSON keyed by source."""
    payload = {key: result.to_dict() for key, result in results.items()}
    return json.dumps(payload, indent=2, ensure_ascii=False)
