"""Parsers for GitHub REST API responses."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from .models import NewsItem

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
SEARCH_URL = f"{API_ROOT}/search/repositories"

MAX_RELEASES = 5
MAX_TRENDING = 10
MAX_BODY_LENGTH = 300
MIN_TRENDING_STARS = 10
TRENDING_TOPICS = ("ai", "llm", "machine-learning")


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        logger.debug("Ignoring GitHub response that is not valid JSON")
        return None


def _text(value: Any) -> Optional[str]:
    """Stripped string form of a JSON scalar, or None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value).strip() or None


def _clip(value: Any) -> Optional[str]:
    text = _text(value)
    if text is None:
        return None
    return text[:MAX_BODY_LENGTH]


def releases_url(owner: str, repo: str) -> str:
    return f"{API_ROOT}/repos/{owner}/{repo}/releases"


def parse_github_releases(text: str) -> List[NewsItem]:
    """Map a releases list to news items, newest first, at most five."""
    releases = _loads(text)
    if not isinstance(releases, list):
        return []

    items: List[NewsItem] = []
    for release in releases[:MAX_RELEASES]:
        if not isinstance(release, dict):
            continue
        title = _text(release.get("name")) or _text(release.get("tag_name"))
        items.append(
            NewsItem(
                title=title or "Unnamed release",
                link=_text(release.get("html_url")),
                date=_text(release.get("published_at")) or _text(release.get("created_at")),
                description=_clip(release.get("body")),
            )
        )
    return items


def parse_github_trending(text: str) -> List[NewsItem]:
    """Map a repository search response to news items, at most ten."""
    data = _loads(text)
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        return []

    items: List[NewsItem] = []
    for repo in data["items"][:MAX_TRENDING]:
        if not isinstance(repo, dict):
            continue
        try:
            stars = int(repo.get("stargazers_count") or 0)
        except (TypeError, ValueError, OverflowError):
            stars = 0
        items.append(
            NewsItem(
                title=f"{repo.get('full_name')} (★{stars})",
                link=_text(repo.get("html_url")),
                date=_text(repo.get("updated_at")) or _text(repo.get("created_at")),
                description=_clip(repo.get("description")),
                stars=stars,
            )
        )
    return items


def build_trending_query(days: int, now: Optional[datetime] = None) -> str:
    """Search query for AI repositories created within the last ``days``."""
    now = now or datetime.now(timezone.utc)
    since = (now - timedelta(days=days)).strftime("%Y-%m-%d")
    topics = " OR ".join(f"topic:{topic}" for topic in TRENDING_TOPICS)
    return f"{topics} created:>{since} stars:>{MIN_TRENDING_STARS}"
