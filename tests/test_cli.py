import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from ai_news_digest import cli
from ai_news_digest.config import NEWS_SOURCES


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    try:
        yield root
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            root.addHandler(handler)
        root.setLevel(original_level)


def test_parse_args_defaults():
    args = cli.parse_args([])

    assert args.format == "markdown"
    assert args.output == "console"
    assert args.days == 1
    assert args.help is False
    assert args.sources == tuple(NEWS_SOURCES)
    assert args.lang == "en"


def test_parse_args_reads_every_flag():
    args = cli.parse_args(
        [
            "--days=3",
            "--lang=ja",
            "--format=json",
            "--output=file",
            "--sources= anthropic , google ,",
            "--config=sources.xml",
            "--log-level=DEBUG",
            "--log-file=digest.log",
        ]
    )

    assert args.days == 3
    assert args.lang == "ja"
    assert args.format == "json"
    assert args.output == "file"
    assert args.sources == ("anthropic", "google")
    assert args.config == "sources.xml"
    assert args.log_level == "DEBUG"
    assert args.log_file == "digest.log"


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_parse_args_help(flag):
    assert cli.parse_args([flag]).help is True


@pytest.mark.parametrize("value", ["abc", "0", "-2", ""])
def test_parse_args_invalid_days_default_to_one(value):
    assert cli.parse_args([f"--days={value}"]).days == 1


def test_parse_args_ignores_unknown_and_invalid_values():
    args = cli.parse_args(["--verbose", "--colour=red", "stray", "--format=xml", "--output=email"])

    assert args.format == "markdown"
    assert args.output == "console"


def test_parse_args_language_from_environment(monkeypatch):
    monkeypatch.setenv("AI_NEWS_LANG", "zh-CN")

    assert cli.parse_args([]).lang == "zh-CN"
    assert cli.parse_args(["--lang=ja"]).lang == "ja"


def test_configure_logging_defaults_to_console_only(restore_root_logger):
    cli.configure_logging("INFO")

    handlers = restore_root_logger.handlers
    assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_with_log_file_creates_file_handler(restore_root_logger, tmp_path):
    log_path = tmp_path / "logs" / "digest.log"
    cli.configure_logging("DEBUG", str(log_path))

    assert log_path.exists()
    assert any(isinstance(handler, logging.FileHandler) for handler in restore_root_logger.handlers)


def test_configure_logging_rejects_unknown_level(restore_root_logger):
    with pytest.raises(ValueError):
        cli.configure_logging("CHATTY")


def _fake_execute(captured, output_text="digest body\n"):
    def fake_execute(config):
        captured["config"] = config
        return SimpleNamespace(output_text=output_text, results={}, saved_path=None)

    return fake_execute


def test_main_runs_pipeline_and_prints_digest(monkeypatch, capsys):
    captured = {}
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "execute", _fake_execute(captured))
    monkeypatch.setenv("GITHUB_TOKEN", "token-123")

    exit_code = cli.main(["--days=3", "--lang=ja", "--sources=anthropic", "--output=file"])

    assert exit_code == 0
    assert capsys.readouterr().out == "digest body\n"
    config = captured["config"]
    assert config.days == 3
    assert config.lang == "ja"
    assert config.output == "file"
    assert config.source_keys == ("anthropic",)
    assert config.github_token == "token-123"
    assert config.sources is NEWS_SOURCES


def test_main_help_prints_usage(monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "execute", lambda config: pytest.fail("help must not fetch anything")
    )

    assert cli.main(["-h"]) == 0

    out = capsys.readouterr().out
    assert "--format=markdown|json" in out
    assert "github_trending" in out


def test_main_log_level_precedence(monkeypatch):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: levels.append(level))
    monkeypatch.setattr(cli, "execute", _fake_execute({}))
    monkeypatch.setenv("AI_NEWS_LOG_LEVEL", "WARNING")

    cli.main([])
    cli.main(["--log-level=DEBUG"])

    assert levels == ["WARNING", "DEBUG"]


def test_main_uses_sources_file(monkeypatch, tmp_path):
    config_file = tmp_path / "sources.xml"
    config_file.write_text(
        '<sources><source key="custom" name="Custom">'
        '<feed url="https://custom.example.com/rss" label="Custom Blog"/>'
        "</source></sources>",
        encoding="utf-8",
    )
    captured = {}
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "execute", _fake_execute(captured))

    assert cli.main([f"--config={config_file}"]) == 0

    config = captured["config"]
    assert list(config.sources) == ["custom"]
    assert config.source_keys == ("custom",)


def test_main_returns_error_for_missing_sources_file(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)

    assert cli.main([f"--config={tmp_path / 'missing.xml'}"]) == 1


def test_main_returns_error_when_writing_fails(monkeypatch):
    def failing_execute(config):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "execute", failing_execute)

    assert cli.main(["--output=file"]) == 1


def test_main_returns_error_on_unexpected_exception(monkeypatch):
    def broken_execute(config):
        raise KeyError("boom")

    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "execute", broken_execute)

    assert cli.main([]) == 1


def test_format_usage_lists_output_directory(monkeypatch, tmp_path):
    monkeypatch.setenv("AI_NEWS_OUTPUT_DIR", str(tmp_path))

    assert str(Path(tmp_path)) in cli.format_usage()


def test_parse_args_help_with_explicit_value_does_not_exit():
    assert cli.parse_args(["--help=yes"]).help is True


def test_main_returns_error_when_log_file_cannot_be_opened(
    monkeypatch, restore_root_logger, tmp_path
):
    monkeypatch.setattr(
        cli, "execute", lambda config: pytest.fail("must not run without logging")
    )

    assert cli.main([f"--log-file={tmp_path}"]) == 1
    assert not any(
        isinstance(handler, logging.FileHandler) for handler in restore_root_logger.handlers
    )
