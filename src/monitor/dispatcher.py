"""NotificationDispatcher — fans SMS alerts out to the recipient list."""

from __future__ import annotations

import structlog

from src.core.types import AlertEvent, SendResult
from src.modem.driver import ModemDriver
from src.monitor.messages import format_alert

# Dedicated structured logger for every alert decision.
decision_logger = structlog.get_logger("decision_log")

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Sends one SMS per recipient, sequentially, in configured order.

    - Every event is logged via *decision_logger* with its rendered text.
    - A recipient whose send could not be written is logged and skipped;
      the remaining recipients are still attempted. There is no retry.
    """

    def __init__(
        self,
        driver: ModemDriver,
        recipients: list[str] | None = None,
        locale: str = "de",
        tier_count: int = 3,
    ) -> None:
        self._driver = driver
        self._recipients: tuple[str, ...] = tuple(recipients or ())
        self._locale = locale
        self._tier_count = tier_count

    @property
    def recipients(self) -> tuple[str, ...]:
        return self._recipients

    def render(self, event: AlertEvent) -> str:
        return format_alert(event, self._locale, self._tier_count)

    async def notify(self, event: AlertEvent) -> list[SendResult]:
        """Send *event* to every recipient; returns one result per recipient."""
        return await self._send(event, self._recipients)

    async def notify_primary(self, event: AlertEvent) -> list[SendResult]:
        """Send *event* to the first recipient only."""
        return await self._send(event, self._recipients[:1])

    # ── Internal ────────────────────────────────────────────────

    async def _send(
        self, event: AlertEvent, recipients: tuple[str, ...],
    ) -> list[SendResult]:
        text = self.render(event)
        self._log_decision(event, text, len(recipients))

        if not recipients:
            logger.warning("no_recipients_configured", code=event.code)
            return []

        results: list[SendResult] = []
        for address in recipients:
            result = await self._driver.send_text(address, text)
            if result != SendResult.SENT:
                logger.warning(
                    "recipient_send_failed",
                    address=address,
                    code=event.code,
                    result=result.value,
                )
            results.append(result)
        return results

    def _log_decision(self, event: AlertEvent, text: str, recipient_count: int) -> None:
        decision_logger.info(
            "decision",
            code=event.code,
            water_level=event.level,
            text=text,
            recipients=recipient_count,
        )
