from __future__ import annotations

import logging

import httpx
from tenacity import RetryCallState, retry, stop_after_attempt, wait_exponential

from schedbot.config import Settings

logger = logging.getLogger(__name__)


def send_telegram_message(*, bot_token: str, chat_id: str, text: str, timeout_seconds: float = 5.0) -> None:
    url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
    payload = {
        "chat_id": chat_id,
        "text": text,
        "disable_web_page_preview": True,
    }

    with httpx.Client(timeout=timeout_seconds) as client:
        r = client.post(url, json=payload)
        r.raise_for_status()
        data = r.json()
        if not data.get("ok", False):
            raise RuntimeError(f"Telegram API error: {data}")


def _short_exc(retry_state: RetryCallState) -> str | None:
    if retry_state.outcome is None or not retry_state.outcome.failed:
        return None
    exc = retry_state.outcome.exception()
    if exc is None:
        return None
    # Type and message only, no traceback between attempts.
    msg = str(exc).strip()
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__


def _log_before_attempt(retry_state: RetryCallState) -> None:
    logger.debug("Telegram send attempt %s: start", retry_state.attempt_number)


def _log_after_attempt(retry_state: RetryCallState) -> None:
    if retry_state.outcome is not None and retry_state.outcome.failed:
        logger.warning("Telegram send attempt %s failed (%s)", retry_state.attempt_number, _short_exc(retry_state))


def _log_before_sleep(retry_state: RetryCallState) -> None:
    sleep_seconds = getattr(retry_state.next_action, "sleep", None)
    if sleep_seconds is None:
        logger.info("Retrying Telegram send (attempt %s)", retry_state.attempt_number + 1)
        return
    logger.info("Retrying Telegram send in %.0f sec. (attempt %s)", sleep_seconds, retry_state.attempt_number + 1)


def _send_with_retry(settings: Settings, chat_id: str, text: str) -> None:
    decorated = retry(
        stop=stop_after_attempt(settings.notify_retry_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        before=_log_before_attempt,
        after=_log_after_attempt,
        before_sleep=_log_before_sleep,
        reraise=True,
    )(send_telegram_message)

    decorated(
        bot_token=settings.telegram_bot_token,
        chat_id=chat_id,
        text=text,
        timeout_seconds=settings.notify_timeout_seconds,
    )


def broadcast(settings: Settings, text: str) -> None:
    """Send ``text`` to every configured chat.

    Does nothing when notifications are disabled. A failed chat does not stop
    delivery to the others; a RuntimeError listing the failed chats is raised
    at the end.
    """

    if not settings.notifications_enabled:
        return

    errors: list[tuple[str, Exception]] = []
    for chat_id in settings.telegram_chat_ids:
        try:
            _send_with_retry(settings, chat_id, text)
        except Exception as e:
            logger.warning("Failed to send telegram message to chat_id=%s (%s: %s)", chat_id, type(e).__name__, e)
            errors.append((chat_id, e))

    if errors:
        failed = ", ".join([cid for cid, _ in errors])
        raise RuntimeError(f"Failed to send telegram message to some recipients: {failed}")
