"""
Function-call API consumed by the rendering collaborator.

The engine owns the body registry and one `SimulationClock`. Every position it
hands out is a pure function of (elements, Julian Date); the clock is the only
mutable state.
"""
from typing import Mapping, Optional

import numpy as np
import jax.numpy as jnp

from orrery.astrodynamics import elements_to_position, orbit_path, positions_vec, sunward_direction
from orrery.bodies import SUN_KEY, Body, bodies_data
from orrery.clock import SimulationClock
from orrery.comets import Comet, comets_data
from orrery.constants import COMET_ACTIVITY_RADIUS
from orrery.errors import DegenerateDirection, UnknownBody
from orrery.heliocentric_position import HeliocentricPosition
from orrery.orbital_elements import OrbitalElements, stack_elements
from orrery.time_base import check_julian_date, format_date
from orrery.visibility import active_comets


class OrbitalEngine:
    """
    Resolves heliocentric positions for every tracked body and advances simulated time.

    Args:
        bodies: Full-element bodies keyed by name; defaults to the packaged registry.
        comets: Simplified-orbit comets keyed by name; defaults to the packaged comets.
        clock: Simulation clock; defaults to a clock starting today at 1x.

    Examples:
        >>> engine = OrbitalEngine()
        >>> engine.set_simulated_date('2024-03-20')
        >>> earth = engine.resolve_position('earth')
        >>> jd = engine.advance_clock(1.0 / 60.0)
        >>> label = engine.format_date()
    """

    def __init__(self, bodies: Optional[Mapping[str, Body]] = None,
                 comets: Optional[Mapping[str, Comet]] = None,
                 clock: Optional[SimulationClock] = None):
        self.bodies = dict(bodies_data if bodies is None else bodies)
        self.comets = dict(comets_data if comets is None else comets)
        self.clock = SimulationClock() if clock is None else clock

        shared = set(self.bodies) & set(self.comets)
        if shared:
            raise ValueError(f"Keys used by both a body and a comet: {sorted(shared)}")
        if SUN_KEY in self.bodies or SUN_KEY in self.comets:
            raise ValueError(f"'{SUN_KEY}' is reserved for the primary at the origin")

        self._elements = {key: body.elements for key, body in self.bodies.items()}
        self._elements.update({key: comet.to_elements() for key, comet in self.comets.items()})
        self._orbiting_keys = tuple(self._elements)
        self._stacked = stack_elements(list(self._elements.values())) if self._elements else None

    @property
    def keys(self) -> tuple[str, ...]:
        """Every tracked key, the sun first."""
        return (SUN_KEY,) + self._orbiting_keys

    def __contains__(self, key) -> bool:
        return key == SUN_KEY or key in self._elements

    def elements(self, key: str) -> OrbitalElements:
        if key == SUN_KEY:
            raise UnknownBody(f"'{SUN_KEY}' sits at the origin and has no orbital elements")
        try:
            return self._elements[key]
        except KeyError:
            raise UnknownBody(f"Unknown body '{key}'") from None

    def _julian_date(self, julian_date: Optional[float]) -> float:
        if julian_date is None:
            return self.clock.julian_date
        return check_julian_date(julian_date)

    def resolve(self, key: str, julian_date: Optional[float] = None) -> HeliocentricPosition:
        """Heliocentric position and radius of one body; defaults to the clock's date."""
        jd = self._julian_date(julian_date)
        if key == SUN_KEY:
            return HeliocentricPosition(position=jnp.zeros(3), r=jnp.asarray(0.0), nu=jnp.asarray(0.0))
        return elements_to_position(self.elements(key), jd)

    def resolve_position(self, key: str, julian_date: Optional[float] = None) -> np.ndarray:
        return np.asarray(self.resolve(key, julian_date).position)

    def resolve_all(self, julian_date: Optional[float] = None) -> dict[str, np.ndarray]:
        """Positions of every tracked body, resolved in a single vectorized call."""
        jd = self._julian_date(julian_date)
        result = {SUN_KEY: np.zeros(3)}
        if self._stacked is None:
            return result
        positions = np.asarray(positions_vec(self._stacked, jd).position)
        for idx, key in enumerate(self._orbiting_keys):
            result[key] = positions[idx]
        return result

    def advance_clock(self, real_seconds: float) -> float:
        return self.clock.advance(real_seconds)

    def set_simulated_date(self, calendar_date) -> float:
        return self.clock.set_date(calendar_date)

    def format_date(self, julian_date: Optional[float] = None) -> str:
        return format_date(self._julian_date(julian_date))

    def sunward_direction(self, key: str, julian_date: Optional[float] = None) -> np.ndarray:
        """
        Unit vector from a body toward the sun.

        Raises:
            DegenerateDirection: for the sun itself.
        """
        if key == SUN_KEY:
            raise DegenerateDirection(f"'{SUN_KEY}' is at the origin and has no sunward direction")
        return sunward_direction(self.resolve_position(key, julian_date))

    def comet_activity(self, julian_date: Optional[float] = None,
                       threshold: float = COMET_ACTIVITY_RADIUS) -> dict[str, bool]:
        """Whether each comet is within the activity radius at the given date."""
        radii = {key: float(self.resolve(key, julian_date).r) for key in self.comets}
        return active_comets(radii, threshold)

    def orbit_path(self, key: str, n_points: int = 256) -> np.ndarray:
        return orbit_path(self.elements(key), n_points)
