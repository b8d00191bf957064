"""ThresholdLadder — tiered level alerts with raise/clear hysteresis."""

from __future__ import annotations

import structlog
from pydantic import BaseModel

from src.core.config import LadderConfig
from src.core.types import AlertEvent, AlertKind, Polarity, Tier

logger = structlog.get_logger(__name__)


class LadderState(BaseModel):
    """Armed flags for every tier, owned by the control loop."""

    tiers: list[Tier]

    @property
    def armed(self) -> list[bool]:
        return [t.armed for t in self.tiers]


class ThresholdLadder:
    """Evaluates a level against ordered tiers, least severe first.

    At most one event is emitted per evaluation:

    1. the most severe tier the level has reached that is not yet armed
       is raised;
    2. otherwise the most severe armed tier the level has left is cleared;
    3. otherwise nothing happens.

    A level that jumps past several tiers in one evaluation therefore only
    raises the most severe one. A tier re-raises only after it has been
    cleared, which keeps a level sitting on a threshold from flapping.
    """

    def __init__(self, config: LadderConfig | None = None) -> None:
        self._config = config or LadderConfig()

    @property
    def polarity(self) -> Polarity:
        return self._config.polarity

    def new_state(self) -> LadderState:
        return LadderState(
            tiers=[
                Tier(index=i, threshold=t)
                for i, t in enumerate(self._config.thresholds)
            ],
        )

    def in_range(self, tier: Tier, level: int) -> bool:
        """Whether *level* lies inside *tier*'s alert range."""
        if self._config.polarity == Polarity.RISING:
            return level >= tier.threshold
        return level <= tier.threshold

    def evaluate(self, state: LadderState, level: int) -> AlertEvent | None:
        """Apply one level to *state*, returning the event it caused, if any."""
        by_severity = list(reversed(state.tiers))

        for tier in by_severity:
            if self.in_range(tier, level) and not tier.armed:
                tier.armed = True
                logger.info(
                    "tier_raised",
                    tier=tier.stage,
                    threshold=tier.threshold,
                    water_level=level,
                )
                return AlertEvent(kind=AlertKind.RAISE, tier=tier.index, level=level)

        for tier in by_severity:
            if not self.in_range(tier, level) and tier.armed:
                tier.armed = False
                logger.info(
                    "tier_cleared",
                    tier=tier.stage,
                    threshold=tier.threshold,
                    water_level=level,
                )
                return AlertEvent(kind=AlertKind.CLEAR, tier=tier.index, level=level)

        return None
