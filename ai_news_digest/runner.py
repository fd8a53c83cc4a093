"""High-level orchestration for the ai_news_digest application."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from .config import NEWS_SOURCES, get_output_dir
from .fetcher import DEFAULT_CONCURRENCY, fetch_all_news
from .models import SourceConfig, SourceResult
from .renderers import format_json, format_markdown

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """Runtime options for executing the application."""

    format: str = "markdown"
    output: str = "console"
    days: int = 1
    source_keys: Optional[Sequence[str]] = None
    lang: str = "en"
    sources: Mapping[str, SourceConfig] = field(default_factory=lambda: NEWS_SOURCES)
    github_token: Optional[str] = None
    output_dir: Optional[Path] = None
    concurrency: int = DEFAULT_CONCURRENCY


@dataclass
class RunResult:
    """Returned data after executing the app."""

    output_text: str
    results: Dict[str, SourceResult]
    saved_path: Optional[Path] = None


def output_path(format_name: str, output_dir: Path, now: datetime) -> Path:
    extension = "json" if format_name == "json" else "md"
    return output_dir / f"ai-news-{now.strftime('%Y-%m-%d')}.{extension}"


def save_to_file(
    content: str,
    format_name: str,
    output_dir: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write the digest to the dated file, replacing a same-day digest."""
    location = output_path(
        format_name, Path(output_dir or get_output_dir()), now or datetime.now()
    )
    if location.parent and not location.parent.exists():
        location.parent.mkdir(parents=True, exist_ok=True)

    location.write_text(content, encoding="utf-8")
    logger.info("Saved digest to %s", location)
    return location


def render(
    results: Mapping[str, SourceResult],
    format_name: str,
    days: int,
    lang: str,
    now: Optional[datetime] = None,
) -> str:
    if format_name == "json":
        return format_json(results)
    return format_markdown(results, days=days, lang=lang, now=now)


def execute(config: RunConfig) -> RunResult:
    """Run the application logic and return the result payload."""
    now = datetime.now()
    results = fetch_all_news(
        config.sources,
        max_age_days=config.days,
        source_keys=config.source_keys,
        token=config.github_token,
        concurrency=config.concurrency,
    )

    output_text = render(results, config.format, config.days, config.lang, now)

    saved_path = None
    if config.output == "file":
        saved_path = save_to_file(output_text, config.format, config.output_dir, now)

    return RunResult(output_text=output_text, results=results, saved_path=saved_path)
