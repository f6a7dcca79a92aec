"""Constants and chart canvas configuration for the finance calculator.

Everything here is static; the engine never reads the environment. The
command-line front end may build its own ``ChartCanvas`` from options.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

# Hard cap on the payoff projection (100 years).
MAX_MONTHS = 1200

# A filtered series with fewer points than this falls back to the tail of
# the full series.
MIN_RANGE_POINTS = 4
FALLBACK_POINTS = 8

RANGE_WINDOW_DAYS: Dict[str, int] = {
    "1m": 30,
    "3m": 90,
    "6m": 180,
    "1y": 365,
}


@dataclass(frozen=True)
class ChartCanvas:
    """Logical drawing area used to map valuations to chart coordinates."""

    width: float = 340.0
    height: float = 128.0
    pad_x: float = 12.0
    pad_y: float = 14.0

    @property
    def baseline(self) -> float:
        return self.height - self.pad_y


DEFAULT_CANVAS = ChartCanvas()
