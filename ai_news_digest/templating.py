"""Jinja2 environment for ai_news_digest templates."""

from __future__ import annotations

from importlib import resources

from jinja2 import Environment, FileSystemLoader, select_autoescape

_ENV: Environment | None = None

EXCERPT_LENGTH = 200


def _excerpt(value: str | None, limit: int = EXCERPT_LENGTH) -> str:
    """Cut ``value`` to ``limit`` characters, marking the cut with an ellipsis."""
    if not value:
        return ""
    if len(value) <= limit:
        return value
    return value[:limit].rstrip() + "..."


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        from .renderers import format_date

        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _ENV.filters["excerpt"] = _excerpt
        _ENV.filters["format_date"] = format_date
    return _ENV
