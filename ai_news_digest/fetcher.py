"""HTTP retrieval of feeds and GitHub endpoints."""

from __future__ import annotations

import concurrent.futures
import logging
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import requests

from . import __version__
from .config import NEWS_SOURCES
from .feeds import filter_by_date, parse_feed
from .github import (
    SEARCH_URL,
    MAX_TRENDING,
    build_trending_query,
    parse_github_releases,
    parse_github_trending,
    releases_url,
)
from .models import FeedSpec, ItemGroup, RepoSpec, SourceConfig, SourceResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
DEFAULT_CONCURRENCY = 8
USER_AGENT = f"ai-news-digest/{__version__}"
TRENDING_LABEL = "Trending AI Repos"

_DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json, application/atom+xml, application/rss+xml, text/xml, */*",
}


def fetch_url(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, object]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """GET ``url`` and return the decoded body; non-2xx raises HTTPError."""
    request_headers = {**_DEFAULT_HEADERS, **(headers or {})}
    logger.debug("GET %s", url)
    response = requests.get(
        url, headers=request_headers, params=params, timeout=timeout
    )

    if response.status_code == 403:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining == "0":
            logger.warning("GitHub API rate limit exceeded while fetching %s", url)

    response.raise_for_status()

    content_type = response.headers.get("Content-Type", "")
    if "charset" not in content_type.lower():
        response.encoding = "utf-8"
    return response.text


def github_headers(token: Optional[str] = None) -> Dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_rss_feed(feed: FeedSpec, timeout: float = DEFAULT_TIMEOUT) -> ItemGroup:
    """Fetch and parse a single RSS or Atom feed."""
    logger.info("Fetching feed '%s' (%s)", feed.label, feed.url)
    try:
        body = fetch_url(feed.url, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Failed to fetch feed '%s' (%s): %s", feed.label, feed.url, exc)
        return ItemGroup(label=feed.label, error=str(exc))

    items = parse_feed(body)
    logger.info("Collected %d entries from feed '%s'", len(items), feed.label)
    return ItemGroup(label=feed.label, items=items)


def fetch_github_releases(
    repo: RepoSpec, token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT
) -> ItemGroup:
    """Fetch the latest releases of a repository."""
    url = releases_url(repo.owner, repo.repo)
    logger.info("Fetching releases for %s/%s", repo.owner, repo.repo)
    try:
        body = fetch_url(
            url, headers=github_headers(token), params={"per_page": 5}, timeout=timeout
        )
    except requests.RequestException as exc:
        logger.warning(
            "Failed to fetch releases for %s/%s: %s", repo.owner, repo.repo, exc
        )
        return ItemGroup(label=repo.label, error=str(exc))

    items = parse_github_releases(body)
    logger.info("Collected %d releases from %s/%s", len(items), repo.owner, repo.repo)
    return ItemGroup(label=repo.label, items=items)


def fetch_github_trending(
    days: int,
    token: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    now: Optional[datetime] = None,
) -> ItemGroup:
    """Search for recently created AI repositories ordered by stars."""
    params = {
        "q": build_trending_query(days, now),
        "sort": "stars",
        "order": "desc",
        "per_page": MAX_TRENDING,
    }
    logger.info("Searching trending repositories: %s", params["q"])
    try:
        body = fetch_url(
            SEARCH_URL, headers=github_headers(token), params=params, timeout=timeout
        )
    except requests.RequestException as exc:
        logger.warning("Failed to fetch trending repositories: %s", exc)
        return ItemGroup(label=TRENDING_LABEL, error=str(exc))

    items = parse_github_trending(body)
    logger.info("Collected %d trending repositories", len(items))
    return ItemGroup(label=TRENDING_LABEL, items=items)


def _guarded(task: Callable[[], ItemGroup], label: str) -> ItemGroup:
    try:
        return task()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to process '%s'", label)
        return ItemGroup(label=label, error=str(exc))


def fetch_all_news(
    sources: Mapping[str, SourceConfig] = NEWS_SOURCES,
    *,
    max_age_days: int = 1,
    source_keys: Optional[Iterable[str]] = None,
    token: Optional[str] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = DEFAULT_TIMEOUT,
    now: Optional[datetime] = None,
) -> Dict[str, SourceResult]:
    """Fetch every endpoint of the selected sources and apply the cutoff.

    Groups keep the order in which their source configures them, regardless
    of which request completes first.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=max_age_days)
    keys = list(source_keys) if source_keys is not None else list(sources)

    results: Dict[str, SourceResult] = {}
    tasks: List[Tuple[List[ItemGroup], str, Callable[[], ItemGroup]]] = []

    for key in keys:
        source = sources.get(key)
        if source is None:
            logger.warning("Unknown news source '%s'; skipping", key)
            continue
        if key in results:
            continue

        result = SourceResult(name=source.name)
        results[key] = result

        for feed in source.feeds:
            tasks.append(
                (result.feeds, feed.label, partial(fetch_rss_feed, feed, timeout))
            )
        for repo in source.github:
            tasks.append(
                (
                    result.releases,
                    repo.label,
                    partial(fetch_github_releases, repo, token, timeout),
                )
            )
        if source.trending:
            tasks.append(
                (
                    result.trending,
                    TRENDING_LABEL,
                    partial(fetch_github_trending, max_age_days, token, timeout, now),
                )
            )

    logger.info(
        "Fetching %d endpoints across %d sources (cutoff %s)",
        len(tasks),
        len(results),
        cutoff.isoformat(),
    )

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max(1, concurrency)
    ) as executor:
        submitted = [
            (target, executor.submit(_guarded, task, label))
            for target, label, task in tasks
        ]
        for target, future in submitted:
            target.append(future.result())

    for result in results.values():
        for group in result.groups():
            group.items = filter_by_date(group.items, cutoff)

    logger.info(
        "Fetched %d items in total",
        sum(result.total_items() for result in results.values()),
    )
    return results
