"""CLI for generating and installing the daily digest schedule."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from typing import List, Optional

from .config import get_default_lang, get_output_dir
from .scheduler import (
    ScheduleOptions,
    generate_github_actions_workflow,
    generate_launchd_plist,
    generate_windows_task,
    get_cron_line,
    get_digest_command,
    get_launchd_plist_path,
    install_cron,
    install_launchd,
    parse_time,
    uninstall_cron,
    uninstall_launchd,
    write_windows_task,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-news-schedule",
        description="Schedule a daily AI news digest.",
        allow_abbrev=False,
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--install",
        dest="action",
        action="store_const",
        const="install",
        help="Install the scheduled task.",
    )
    action.add_argument(
        "--uninstall",
        dest="action",
        action="store_const",
        const="uninstall",
        help="Remove the scheduled task.",
    )
    action.add_argument(
        "--show",
        dest="action",
        action="store_const",
        const="show",
        help="Print the generated configuration (default).",
    )
    parser.add_argument(
        "--time", default="06:30", help="Daily run time as HH:MM (default: 06:30)."
    )
    parser.add_argument(
        "--lang", default=None, help="Digest language (default: $AI_NEWS_LANG or en)."
    )
    parser.add_argument(
        "--no-file",
        dest="output_file",
        action="store_false",
        help="Print the digest only instead of saving it to a file.",
    )
    parser.set_defaults(action="show")
    return parser


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _system() -> str:
    return platform.system()


def show(options: ScheduleOptions) -> None:
    print("--- Crontab (Linux/macOS) ---")
    print(get_cron_line(options))
    print()

    if _system() == "Darwin":
        print("--- launchd (macOS) ---")
        print(f"Plist path: {get_launchd_plist_path()}")
        print(generate_launchd_plist(options))

    if _system() == "Windows":
        print("--- Windows Task Scheduler ---")
        print(generate_windows_task(options))

    print("--- GitHub Actions workflow ---")
    print(generate_github_actions_workflow(options))
    print("To install automatically, run:")
    print(f"  ai-news-schedule --install --time={options.time} --lang={options.lang}")


def install(options: ScheduleOptions) -> None:
    if _system() == "Windows":
        batch_path = write_windows_task(options)
        print(f"Batch file generated: {batch_path}")
        print("Run this file as Administrator to install the scheduled task.")
        return

    cron_line = install_cron(options)
    print("Installed crontab entry:")
    print(f"  {cron_line}")
    print(f"Digests will be generated daily at {options.time} in {get_output_dir()}")

    if _system() == "Darwin":
        plist_path = install_launchd(options)
        print(f"Installed launchd agent: {plist_path}")


def uninstall() -> None:
    if _system() == "Windows":
        print("Run as Administrator:")
        print('  schtasks /delete /tn "AI News Digest" /f')
        return

    uninstall_cron()
    print("Removed the AI News Digest crontab entry.")

    if _system() == "Darwin":
        removed = uninstall_launchd()
        if removed:
            print(f"Removed launchd agent: {removed}")

    print("Digest files in the output directory were preserved.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging()

    try:
        parse_time(args.time)
    except ValueError as exc:
        parser.error(str(exc))

    options = ScheduleOptions(
        time=args.time,
        lang=args.lang or get_default_lang(),
        output_file=args.output_file,
    )
    logger.info(
        "Platform %s, time %s, language %s, command %s",
        _system(),
        options.time,
        options.lang,
        " ".join(get_digest_command()),
    )

    try:
        if args.action == "install":
            install(options)
        elif args.action == "uninstall":
            uninstall()
        else:
            show(options)
    except (RuntimeError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
