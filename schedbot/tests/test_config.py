from __future__ import annotations

import logging

import pytest

from schedbot.config import load_settings

_ENV_VARS = (
    "LOG_LEVEL",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "NOTIFY_RETRY_ATTEMPTS",
    "NOTIFY_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch also undoes values written by load_dotenv().
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_without_any_env(tmp_path) -> None:
    settings = load_settings(dotenv_path=str(tmp_path / "missing.env"))
    assert settings.log_level == logging.WARNING
    assert settings.notifications_enabled is False
    assert settings.telegram_chat_ids == ()
    assert settings.notify_retry_attempts == 2
    assert settings.notify_timeout_seconds == 5.0


def test_log_level_is_case_insensitive(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert load_settings(dotenv_path=str(tmp_path / "missing.env")).log_level == logging.DEBUG


def test_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError, match=r"Invalid LOG_LEVEL"):
        load_settings(dotenv_path=str(tmp_path / "missing.env"))


def test_parses_multiple_telegram_chat_ids(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "t")
    # Spaces, duplicates and empty parts.
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "1, 2,2,, -1003, 1")

    settings = load_settings(dotenv_path=str(tmp_path / "missing.env"))
    assert settings.notifications_enabled is True
    assert settings.telegram_chat_ids == ("1", "2", "-1003")


def test_token_requires_chat_id(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "t")
    with pytest.raises(RuntimeError, match=r"TELEGRAM_CHAT_ID"):
        load_settings(dotenv_path=str(tmp_path / "missing.env"))


def test_chat_ids_are_ignored_without_token(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "abc")
    settings = load_settings(dotenv_path=str(tmp_path / "missing.env"))
    assert settings.telegram_chat_ids == ()


@pytest.mark.parametrize(
    "raw, match",
    [
        (" , ,", r"TELEGRAM_CHAT_ID is empty"),
        ("abc", r"Invalid TELEGRAM_CHAT_ID"),
        ("0", r"not a valid chat id"),
    ],
)
def test_rejects_bad_chat_ids(monkeypatch: pytest.MonkeyPatch, tmp_path, raw: str, match: str) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "t")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", raw)
    with pytest.raises(RuntimeError, match=match):
        load_settings(dotenv_path=str(tmp_path / "missing.env"))


@pytest.mark.parametrize(
    "name, raw, match",
    [
        ("NOTIFY_RETRY_ATTEMPTS", "0", r"NOTIFY_RETRY_ATTEMPTS must be >= 1"),
        ("NOTIFY_TIMEOUT_SECONDS", "0", r"NOTIFY_TIMEOUT_SECONDS must be > 0"),
    ],
)
def test_rejects_bad_notify_tuning(monkeypatch: pytest.MonkeyPatch, tmp_path, name: str, raw: str, match: str) -> None:
    monkeypatch.setenv(name, raw)
    with pytest.raises(RuntimeError, match=match):
        load_settings(dotenv_path=str(tmp_path / "missing.env"))


def test_reads_values_from_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("TELEGRAM_BOT_TOKEN=t\nTELEGRAM_CHAT_ID=42\nNOTIFY_RETRY_ATTEMPTS=3\n")

    settings = load_settings(dotenv_path=str(dotenv))
    assert settings.telegram_chat_ids == ("42",)
    assert settings.notify_retry_attempts == 3


def test_does_not_override_existing_env_with_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # load_dotenv(override=False) must not overwrite already-set env vars.
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "t")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "1")

    dotenv = tmp_path / ".env"
    dotenv.write_text("TELEGRAM_CHAT_ID=999\n")

    settings = load_settings(dotenv_path=str(dotenv))
    assert settings.telegram_chat_ids == ("1",)
