"""Shared data models for ai_news_digest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FeedSpec:
    """Configuration for a single RSS or Atom feed."""

    url: str
    label: str
    type: str = "rss"


@dataclass(frozen=True)
class RepoSpec:
    """A GitHub repository polled for releases."""

    owner: str
    repo: str
    label: str


@dataclass(frozen=True)
class SourceConfig:
    """A named news origin made of feeds, repositories and trending search."""

    name: str
    feeds: Tuple[FeedSpec, ...] = ()
    github: Tuple[RepoSpec, ...] = ()
    trending: bool = False


@dataclass
class NewsItem:
    """Single entry from a feed, a release list or a trending search."""

    title: Optional[str]
    link: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    stars: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "link": self.link,
            "date": self.date,
            "description": self.description,
        }
        if self.stars is not None:
            payload["stars"] = self.stars
        return payload


@dataclass
class ItemGroup:
    """Items fetched from one feed, repository or trending query."""

    label: str
    items: List[NewsItem] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "label": self.label,
            "items": [item.to_dict() for item in self.items],
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass
class SourceResult:
    """Everything fetched for a source during one run."""

    name: str
    feeds: List[ItemGroup] = field(default_factory=list)
    releases: List[ItemGroup] = field(default_factory=list)
    trending: List[ItemGroup] = field(default_factory=list)

    def groups(self) -> List[ItemGroup]:
        return [*self.feeds, *self.releases, *self.trending]

    def has_any_items(self) -> bool:
        return any(group.items for group in self.groups())

    def total_items(self) -> int:
        return sum(len(group.items) for group in self.groups())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "feeds": [group.to_dict() for group in self.feeds],
            "releases": [group.to_dict() for group in self.releases],
            "trending": [group.to_dict() for group in self.trending],
        }


@dataclass(frozen=True)
class DigestArgs:
    """Parsed command-line options for the digest command."""

    format: str = "markdown"
    output: str = "console"
    days: int = 1
    sources: Tuple[str, ...] = ()
    lang: str = "en"
    help: bool = False
    config: Optional[str] = None
    log_level: Optional[str] = None
    log_file: Optional[str] = None
