from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _parse_telegram_chat_ids(raw: str) -> tuple[str, ...]:
    # TELEGRAM_CHAT_ID supports a single value or a comma-separated list.
    # Examples:
    #   TELEGRAM_CHAT_ID=123456789
    #   TELEGRAM_CHAT_ID=123456789,-1001234567890
    parts = [p.strip() for p in raw.split(",")]
    parts = [p for p in parts if p]

    seen: set[str] = set()
    result: list[str] = []
    for p in parts:
        # Groups/supergroups have negative ids.
        try:
            int(p)
        except ValueError as e:
            raise RuntimeError(f"Invalid TELEGRAM_CHAT_ID value: {p!r}. Expected integer chat id.") from e

        if p == "0":
            raise RuntimeError("Invalid TELEGRAM_CHAT_ID value: '0' is not a valid chat id")

        if p in seen:
            continue
        seen.add(p)
        result.append(p)

    if not result:
        raise RuntimeError("TELEGRAM_CHAT_ID is empty. Provide at least one chat id.")

    return tuple(result)


def _parse_log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(f"Invalid LOG_LEVEL value: {raw!r}")
    return level


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.WARNING

    # Notifications are optional: without a bot token nothing is sent.
    telegram_bot_token: str | None = None
    telegram_chat_ids: tuple[str, ...] = ()

    # How many times a single Telegram send is attempted before giving up.
    notify_retry_attempts: int = 2
    notify_timeout_seconds: float = 5.0

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.telegram_bot_token)


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    log_level = _parse_log_level(os.getenv("LOG_LEVEL", "WARNING"))

    telegram_bot_token = os.getenv("TELEGRAM_BOT_TOKEN") or None
    telegram_chat_ids: tuple[str, ...] = ()
    if telegram_bot_token:
        raw_chat_ids = os.getenv("TELEGRAM_CHAT_ID")
        if raw_chat_ids is None:
            raise RuntimeError("Missing required environment variable: TELEGRAM_CHAT_ID (TELEGRAM_BOT_TOKEN is set)")
        telegram_chat_ids = _parse_telegram_chat_ids(raw_chat_ids)

    notify_retry_attempts = int(os.getenv("NOTIFY_RETRY_ATTEMPTS", "2"))
    if notify_retry_attempts < 1:
        raise RuntimeError("NOTIFY_RETRY_ATTEMPTS must be >= 1")

    notify_timeout_seconds = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))
    if notify_timeout_seconds <= 0:
        raise RuntimeError("NOTIFY_TIMEOUT_SECONDS must be > 0")

    return Settings(
        log_level=log_level,
        telegram_bot_token=telegram_bot_token,
        telegram_chat_ids=telegram_chat_ids,
        notify_retry_attempts=notify_retry_attempts,
        notify_timeout_seconds=notify_timeout_seconds,
    )
