"""Command-line interface for the ai_news_digest application."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .config import (
    NEWS_SOURCES,
    get_default_lang,
    get_github_token,
    get_output_dir,
    parse_sources_config,
)
from .models import DigestArgs, SourceConfig
from .runner import RunConfig, execute

logger = logging.getLogger(__name__)

FORMATS = ("markdown", "json")
OUTPUTS = ("console", "file")
DEFAULT_LOG_LEVEL = "INFO"

USAGE = """\
AI News Digest - daily AI news aggregator

Usage:
  ai-news-digest [options]

Options:
  --format=markdown|json   Output format (default: markdown)
  --output=console|file    Output destination (default: console)
  --days=N                 Fetch news from the last N days (default: 1)
  --sources=a,b,c          Comma-separated sources (default: all)
  --lang=en|zh-TW|zh-CN|ja Output language (default: en)
  --config=PATH            XML file replacing the built-in sources
  --log-level=LEVEL        Logging level written to stderr (default: INFO)
  --log-file=PATH          Also write logs to PATH
  --help, -h               Show this help

Available sources:
  {sources}

Environment variables:
  GITHUB_TOKEN        GitHub API token (increases rate limits)
  AI_NEWS_OUTPUT_DIR  Output directory (default: {output_dir})
  AI_NEWS_LANG        Default output language
  AI_NEWS_LOG_LEVEL   Default logging level

Examples:
  ai-news-digest --lang=zh-TW
  ai-news-digest --days=3 --output=file
  ai-news-digest --sources=anthropic,google --format=json
"""


def build_parser() -> argparse.ArgumentParser:
    """Create a lenient parser; unknown flags are left for the caller to drop."""
    parser = argparse.ArgumentParser(
        prog="ai-news-digest",
        description="Fetch recent AI news and render a digest.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-h", "--help", nargs="?", const=True, default=False)
    parser.add_argument("--format", nargs="?")
    parser.add_argument("--output", nargs="?")
    parser.add_argument("--days", nargs="?")
    parser.add_argument("--sources", nargs="?")
    parser.add_argument("--lang", nargs="?")
    parser.add_argument("--config", nargs="?")
    parser.add_argument("--log-level", nargs="?")
    parser.add_argument("--log-file", nargs="?")
    return parser


def _parse_days(value: Optional[str]) -> int:
    try:
        days = int(value) if value is not None else 1
    except ValueError:
        return 1
    return days if days >= 1 else 1


def parse_args(
    argv: Optional[Sequence[str]] = None,
    available_sources: Mapping[str, SourceConfig] = NEWS_SOURCES,
) -> DigestArgs:
    """Parse digest options, falling back to defaults for anything invalid."""
    namespace, ignored = build_parser().parse_known_args(
        list(sys.argv[1:] if argv is None else argv)
    )
    if ignored:
        logger.debug("Ignoring unrecognised arguments: %s", ignored)

    if namespace.sources:
        sources = tuple(
            key.strip() for key in namespace.sources.split(",") if key.strip()
        )
    else:
        sources = tuple(available_sources)

    return DigestArgs(
        format=namespace.format if namespace.format in FORMATS else "markdown",
        output=namespace.output if namespace.output in OUTPUTS else "console",
        days=_parse_days(namespace.days),
        sources=sources,
        lang=namespace.lang or get_default_lang(),
        help=bool(namespace.help),
        config=namespace.config or None,
        log_level=namespace.log_level or None,
        log_file=namespace.log_file or None,
    )


def format_usage(sources: Mapping[str, SourceConfig] = NEWS_SOURCES) -> str:
    return USAGE.format(sources=", ".join(sources), output_dir=get_output_dir())


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging on stderr so stdout carries only the digest."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    logger.debug("Logging at %s", level_name.upper())


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)

    if args.help:
        print(format_usage())
        return 0

    level = args.log_level or os.environ.get("AI_NEWS_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    try:
        try:
            configure_logging(level, args.log_file)
        except ValueError as exc:
            configure_logging(DEFAULT_LOG_LEVEL, args.log_file)
            logger.warning("%s; using %s", exc, DEFAULT_LOG_LEVEL)
    except OSError as exc:
        configure_logging(DEFAULT_LOG_LEVEL)
        logger.error("Cannot open log file %s: %s", args.log_file, exc)
        return 1

    try:
        sources = NEWS_SOURCES
        if args.config:
            sources = parse_sources_config(args.config)
            args = parse_args(argv, available_sources=sources)

        logger.info(
            "Fetching news from %d sources (last %d day%s)",
            len(args.sources),
            args.days,
            "" if args.days == 1 else "s",
        )

        result = execute(
            RunConfig(
                format=args.format,
                output=args.output,
                days=args.days,
                source_keys=args.sources,
                lang=args.lang,
                sources=sources,
                github_token=get_github_token(),
            )
        )
    except (ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    print(result.output_text.rstrip("\n"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
