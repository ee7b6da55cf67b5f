"""
Notification sinks for user-visible cart failures.

A sink is anything with ``notify_error(message)``; it may be sync or async.
The cart calls it at most once per failed operation and never looks at the
result.
"""

import asyncio
from typing import Awaitable, Optional, Protocol, Union

import httpx

from storecart import config
from storecart.logging import get_logger

logger = get_logger(__name__)

PERMANENT_ERROR_CODES = {400, 403, 404}


class NotificationSink(Protocol):
    def notify_error(self, message: str) -> Union[None, Awaitable[None]]:
        ...


class LoggingNotifier:
    """Writes notifications to the log. Default sink for headless use."""

    def notify_error(self, message: str) -> None:
        logger.warning(f"Cart notification: {message}")


class CollectingNotifier:
    """Keeps notifications in memory, newest last."""

    def __init__(self):
        self.messages: list[str] = []

    def notify_error(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay."""
    return float(0.5 * (2 ** attempt))


class TelegramNotifier:
    """
    Sends notifications to a Telegram chat via the Bot API.

    Transport retries live here, not in the cart: the cart fires one
    notification and moves on.
    """

    def __init__(
        self,
        chat_id: int = config.TELEGRAM_CHAT_ID,
        bot_token: Optional[str] = None,
        retries: int = 2,
        timeout: float = 10.0,
    ):
        self.chat_id = chat_id
        self.bot_token = bot_token or config.TELEGRAM_TOKEN
        self.retries = retries
        self.timeout = timeout

    async def notify_error(self, message: str) -> None:
        await self.send(message)

    async def send(self, text: str) -> bool:
        """
        Send a message with retry logic.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram notifier is not configured; dropping notification")
            return False

        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text}
        last_error = None

        for attempt in range(self.retries + 1):
            try:
                async with httpx.AsyncClient() as client:
                    response = await client.post(url, json=payload, timeout=self.timeout)

                if response.status_code == 200:
                    logger.debug(f"Notification sent to {self.chat_id}")
                    return True

                logger.warning(f"Telegram API error for {self.chat_id}: status={response.status_code}")
                if response.status_code in PERMANENT_ERROR_CODES:
                    return False
                last_error = f"HTTP {response.status_code}"

            except httpx.TimeoutException:
                last_error = "Timeout"
                logger.warning(f"Timeout sending notification (attempt {attempt + 1}/{self.retries + 1})")
            except httpx.HTTPError as e:
                last_error = f"Connection error: {e}"
                logger.warning(f"Connection error sending notification: {e}")

            if attempt < self.retries:
                await asyncio.sleep(_calculate_backoff_delay(attempt))

        logger.error(f"Failed to send notification after {self.retries + 1} attempts: {last_error}")
        return False
