"""Generate and install daily schedules for the digest command."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .config import get_output_dir
from .templating import get_environment

logger = logging.getLogger(__name__)

CRON_MARKER = "# AI-NEWS-DIGEST-CRON"
LAUNCHD_LABEL = "com.ai-news-digest"
WINDOWS_TASK_NAME = "AI News Digest"


@dataclass(frozen=True)
class ScheduleOptions:
    time: str = "06:30"
    lang: str = "en"
    output_file: bool = True


def parse_time(value: str) -> Tuple[int, int]:
    """Split ``HH:MM`` into hour and minute."""
    try:
        hours, minutes = (int(part) for part in value.split(":"))
    except ValueError as exc:
        raise ValueError(f"Invalid time '{value}'; expected HH:MM") from exc
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time '{value}'; expected HH:MM")
    return hours, minutes


def get_digest_command() -> List[str]:
    return [sys.executable, "-m", "ai_news_digest"]


def digest_arguments(options: ScheduleOptions) -> List[str]:
    arguments = [f"--lang={options.lang}"]
    if options.output_file:
        arguments.append("--output=file")
    return arguments


def get_cron_line(
    options: ScheduleOptions,
    command: Optional[List[str]] = None,
    output_dir: Optional[Path] = None,
) -> str:
    hours, minutes = parse_time(options.time)
    argv = (command or get_digest_command()) + digest_arguments(options)
    log_path = Path(output_dir or get_output_dir()) / "cron.log"
    return (
        f"{minutes} {hours} * * * {shlex.join(argv)} "
        f">> {shlex.quote(str(log_path))} 2>&1"
    )


def get_launchd_plist_path() -> Path:
    return Path.home() / "Library" / "LaunchAgents" / f"{LAUNCHD_LABEL}.plist"


def generate_launchd_plist(
    options: ScheduleOptions,
    command: Optional[List[str]] = None,
    output_dir: Optional[Path] = None,
) -> str:
    hours, minutes = parse_time(options.time)
    template = get_environment().get_template("launchd.plist.j2")
    return template.render(
        label=LAUNCHD_LABEL,
        arguments=(command or get_digest_command()) + digest_arguments(options),
        hour=hours,
        minute=minutes,
        output_dir=str(output_dir or get_output_dir()),
    )


def generate_windows_task(
    options: ScheduleOptions, command: Optional[List[str]] = None
) -> str:
    parse_time(options.time)
    argv = (command or get_digest_command()) + digest_arguments(options)
    template = get_environment().get_template("task.bat.j2")
    return template.render(
        task_name=WINDOWS_TASK_NAME,
        command=subprocess.list2cmdline(argv),
        time=options.time,
    )


def generate_github_actions_workflow(options: ScheduleOptions) -> str:
    hours, minutes = parse_time(options.time)
    template = get_environment().get_template("workflow.yml.j2")
    return template.render(
        time=options.time, hour=hours, minute=minutes, lang=options.lang
    )


def _is_digest_line(line: str) -> bool:
    return CRON_MARKER in line or "ai-news-digest" in line or "ai_news_digest" in line


def read_crontab() -> str:
    """Return the current user's crontab, or an empty string when none exists."""
    try:
        result = subprocess.run(
            ["crontab", "-l"], capture_output=True, text=True, check=False
        )
    except FileNotFoundError as exc:
        raise RuntimeError("crontab is not available on this system") from exc
    return result.stdout if result.returncode == 0 else ""


def write_crontab(content: str) -> None:
    result = subprocess.run(
        ["crontab", "-"], input=content, capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        raise RuntimeError(f"Failed to update crontab: {result.stderr.strip()}")


def _without_digest_lines(crontab: str) -> List[str]:
    return [
        line
        for line in crontab.splitlines()
        if line.strip() and not _is_digest_line(line)
    ]


def install_cron(options: ScheduleOptions, output_dir: Optional[Path] = None) -> str:
    """Replace any existing digest entry with a fresh one and return it."""
    output_dir = Path(output_dir or get_output_dir())
    cron_line = get_cron_line(options, output_dir=output_dir)

    lines = _without_digest_lines(read_crontab())
    lines.append(f"{cron_line} {CRON_MARKER}")

    output_dir.mkdir(parents=True, exist_ok=True)
    write_crontab("\n".join(lines) + "\n")
    logger.info("Installed crontab entry: %s", cron_line)
    return cron_line


def uninstall_cron() -> None:
    lines = _without_digest_lines(read_crontab())
    write_crontab("\n".join(lines) + "\n" if lines else "")
    logger.info("Removed digest entries from crontab")


def install_launchd(options: ScheduleOptions, output_dir: Optional[Path] = None) -> Path:
    """Write the launchd agent and load it; loading failures are only logged."""
    plist_path = get_launchd_plist_path()
    plist_path.parent.mkdir(parents=True, exist_ok=True)
    plist_path.write_text(
        generate_launchd_plist(options, output_dir=output_dir), encoding="utf-8"
    )

    subprocess.run(["launchctl", "unload", str(plist_path)], capture_output=True)
    result = subprocess.run(
        ["launchctl", "load", str(plist_path)], capture_output=True, text=True
    )
    if result.returncode != 0:
        logger.warning(
            "Saved %s but launchctl load failed: %s", plist_path, result.stderr.strip()
        )
    return plist_path


def uninstall_launchd() -> Optional[Path]:
    plist_path = get_launchd_plist_path()
    if not plist_path.exists():
        return None
    subprocess.run(["launchctl", "unload", str(plist_path)], capture_output=True)
    plist_path.unlink()
    return plist_path


def write_windows_task(options: ScheduleOptions, output_dir: Optional[Path] = None) -> Path:
    output_dir = Path(output_dir or get_output_dir())
    output_dir.mkdir(parents=True, exist_ok=True)
    batch_path = output_dir / "install-task.bat"
    batch_path.write_text(generate_windows_task(options), encoding="utf-8")
    return batch_path
