"""ReportScheduler — minute-of-hour debounced telemetry trigger."""

from __future__ import annotations

import structlog
from pydantic import BaseModel

from src.core.config import ReportConfig

logger = structlog.get_logger(__name__)


class ReportWindowState(BaseModel):
    """Debounce flag for the periodic push, owned by the control loop."""

    period_minutes: int
    sent_this_window: bool = False
    last_sent_at: float | None = None


class ReportScheduler:
    """Fires once per eligible minute (``minute % period == 0``).

    The flag re-arms on the first tick whose minute is not eligible, so any
    number of ticks inside one eligible minute push only once. A clock that
    is corrected backwards onto an eligible minute can fire a second time
    in the same hour; ``min_gap_secs`` adds a monotonic guard against that
    when configured.
    """

    def __init__(self, config: ReportConfig | None = None) -> None:
        self._config = config or ReportConfig()

    def new_state(self) -> ReportWindowState:
        return ReportWindowState(period_minutes=self._config.period_minutes)

    def is_eligible(self, state: ReportWindowState, minute: int) -> bool:
        return minute % state.period_minutes == 0

    def tick(self, state: ReportWindowState, minute: int, now: float) -> bool:
        """Advance the window; returns True when a push is due now.

        Args:
            state: Window state to update.
            minute: Wall-clock minute of hour.
            now: Monotonic seconds, only used by the gap guard.
        """
        if not self.is_eligible(state, minute):
            state.sent_this_window = False
            return False

        if state.sent_this_window:
            return False

        gap = self._config.min_gap_secs
        if gap > 0 and state.last_sent_at is not None and now - state.last_sent_at < gap:
            logger.warning(
                "report_suppressed_by_gap",
                minute=minute,
                since_last_secs=round(now - state.last_sent_at, 1),
            )
            state.sent_this_window = True
            return False

        state.sent_this_window = True
        state.last_sent_at = now
        logger.debug("report_due", minute=minute)
        return True
