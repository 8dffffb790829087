"""
Simulation clock: the single owner of simulated time.

The clock stores a Julian Date and advances it numerically every tick; it only
formats back to a calendar string when an observer asks for one. It is not
thread-safe and must be advanced by exactly one scheduler, once per tick.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from orrery.constants import DAYS_PER_SECOND, MAX_DAYS_PER_TICK
from orrery.time_base import check_julian_date, date_to_julian, format_date, julian_to_date, now

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClockConfig:
    days_per_second: float = DAYS_PER_SECOND
    max_days_per_tick: float = MAX_DAYS_PER_TICK

    def __post_init__(self):
        if not (math.isfinite(self.days_per_second) and self.days_per_second >= 0.0):
            raise ValueError(f"days_per_second must be finite and non-negative, got {self.days_per_second}")
        if not (math.isfinite(self.max_days_per_tick) and self.max_days_per_tick >= 0.0):
            raise ValueError(f"max_days_per_tick must be finite and non-negative, got {self.max_days_per_tick}")


class SimulationClock:
    """
    Continuous simulated time driven by a time-acceleration factor.

    Args:
        julian_date: Starting Julian Date; defaults to the start of today (UTC).
        acceleration: Simulated time multiplier. 0 freezes time; negative
            values are clamped to 0.
        config: Conversion rate and per-tick cap.
    """

    def __init__(self, julian_date: Optional[float] = None, acceleration: float = 1.0,
                 config: Optional[ClockConfig] = None):
        self.config = ClockConfig() if config is None else config
        self._julian_date = 0.0
        self._acceleration = 0.0
        self.set_julian_date(date_to_julian(now()) if julian_date is None else julian_date)
        self.acceleration = acceleration

    @property
    def julian_date(self) -> float:
        return self._julian_date

    @property
    def acceleration(self) -> float:
        return self._acceleration

    @acceleration.setter
    def acceleration(self, value: float):
        value = float(value)
        if math.isnan(value) or value < 0.0:
            logger.warning("Time acceleration %r is not supported; clamping to 0", value)
            value = 0.0
        self._acceleration = value

    @property
    def frozen(self) -> bool:
        return self._acceleration == 0.0

    def days_for(self, real_seconds: float) -> float:
        """
        Simulated days one tick of ``real_seconds`` would advance, after the per-tick cap.
        """
        days = float(real_seconds) * self._acceleration * self.config.days_per_second
        if math.isnan(days) or days <= 0.0:
            return 0.0
        return min(days, self.config.max_days_per_tick)

    def advance(self, real_seconds: float) -> float:
        """
        Advance simulated time by one tick.

        Args:
            real_seconds: Wall-clock time elapsed since the previous tick.

        Returns:
            The new Julian Date.
        """
        self._julian_date += self.days_for(real_seconds)
        return self._julian_date

    def set_date(self, calendar_date) -> float:
        """
        Jump to the start of a calendar date (``date`` or ``YYYY-MM-DD``).

        This is a discontinuous jump and is not subject to the per-tick cap.
        """
        return self.set_julian_date(date_to_julian(calendar_date))

    def set_julian_date(self, julian_date: float) -> float:
        julian_date = check_julian_date(julian_date)
        logger.debug("Simulation clock jumps from JD %.5f to JD %.5f", self._julian_date, julian_date)
        self._julian_date = julian_date
        return self._julian_date

    @property
    def date(self):
        return julian_to_date(self._julian_date)

    @property
    def date_string(self) -> str:
        return format_date(self._julian_date)

    def __repr__(self) -> str:
        return f"SimulationClock(julian_date={self._julian_date!r}, acceleration={self._acceleration!r})"
