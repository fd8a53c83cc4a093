"""Source definitions and environment-driven settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from xml.etree import ElementTree as ET

from .models import FeedSpec, RepoSpec, SourceConfig

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path.home() / ".claude" / "news"
DEFAULT_LANG = "en"

NEWS_SOURCES: Mapping[str, SourceConfig] = MappingProxyType(
    {
        "anthropic": SourceConfig(
            name="Anthropic / Claude",
            feeds=(
                FeedSpec(
                    url="https://www.anthropic.com/rss.xml", label="Anthropic Blog"
                ),
            ),
            github=(
                RepoSpec("anthropics", "claude-code", "Claude Code Releases"),
                RepoSpec("anthropics", "anthropic-sdk-python", "Anthropic Python SDK"),
                RepoSpec("anthropics", "courses", "Anthropic Courses"),
            ),
        ),
        "google": SourceConfig(
            name="Google / Gemini / DeepMind",
            feeds=(
                FeedSpec(
                    url="https://blog.google/technology/ai/rss/", label="Google AI Blog"
                ),
                FeedSpec(
                    url="https://deepmind.google/blog/rss.xml", label="DeepMind Blog"
                ),
            ),
            github=(
                RepoSpec("google-gemini", "gemini-api-cookbook", "Gemini API Cookbook"),
                RepoSpec(
                    "google-gemini", "generative-ai-js", "Google Generative AI JS"
                ),
            ),
        ),
        "xai": SourceConfig(
            name="xAI / Grok",
            github=(RepoSpec("xai-org", "grok-1", "Grok-1 Model"),),
        ),
        "openai": SourceConfig(
            name="OpenAI",
            feeds=(
                FeedSpec(url="https://openai.com/blog/rss.xml", label="OpenAI Blog"),
            ),
            github=(
                RepoSpec("openai", "openai-python", "OpenAI Python SDK"),
                RepoSpec("openai", "codex", "OpenAI Codex CLI"),
            ),
        ),
        "github_trending": SourceConfig(
            name="GitHub Trending AI Projects",
            trending=True,
        ),
    }
)


def get_output_dir() -> Path:
    """Directory where dated digest files are written."""
    configured = os.environ.get("AI_NEWS_OUTPUT_DIR")
    if configured:
        return Path(configured).expanduser()
    return DEFAULT_OUTPUT_DIR


def get_default_lang() -> str:
    return os.environ.get("AI_NEWS_LANG") or DEFAULT_LANG


def get_github_token() -> Optional[str]:
    return os.environ.get("GITHUB_TOKEN") or None


def _required(element: ET.Element, name: str, context: str) -> str:
    value = (element.attrib.get(name) or "").strip()
    if not value:
        raise ValueError(f"{context} is missing the '{name}' attribute.")
    return value


def parse_sources_config(path: str) -> Mapping[str, SourceConfig]:
    """Parse an XML sources file and return a read-only source table."""
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Sources file not found: {path}")

    logger.info("Loading source configuration from %s", config_path)
    try:
        root = ET.parse(config_path).getroot()
    except ET.ParseError as exc:
        raise ValueError(f"Sources file is not valid XML: {exc}") from exc

    sources: Dict[str, SourceConfig] = {}
    for node in root.findall("source"):
        key = _required(node, "key", "<source>")
        name = _required(node, "name", f"<source key='{key}'>")

        feeds = tuple(
            FeedSpec(
                url=_required(feed, "url", f"<feed> in source '{key}'"),
                label=_required(feed, "label", f"<feed> in source '{key}'"),
                type=feed.attrib.get("type", "rss"),
            )
            for feed in node.findall("feed")
        )
        repos = tuple(
            RepoSpec(
                owner=_required(repo, "owner", f"<github> in source '{key}'"),
                repo=_required(repo, "repo", f"<github> in source '{key}'"),
                label=_required(repo, "label", f"<github> in source '{key}'"),
            )
            for repo in node.findall("github")
        )
        trending = node.attrib.get("trending", "false").lower() == "true"

        sources[key] = SourceConfig(
            name=name, feeds=feeds, github=repos, trending=trending
        )
        logger.debug(
            "Registered source '%s' (%d feeds, %d repos, trending=%s)",
            key,
            len(feeds),
            len(repos),
            trending,
        )

    if not sources:
        raise ValueError(f"{path} does not define any <source> entries.")

    logger.info("Loaded %d sources from configuration", len(sources))
    return MappingProxyType(sources)
