"""
Visibility policy for bodies whose drawing depends on their distance from the sun.

These predicates only interpret radii already produced by the resolver; the
engine computes every position regardless of whether it will be drawn.
"""
from typing import Mapping

from orrery.constants import COMET_ACTIVITY_RADIUS


def is_comet_active(radius: float, threshold: float = COMET_ACTIVITY_RADIUS) -> bool:
    """True while a comet is strictly closer to the sun than ``threshold`` (scene units)."""
    return bool(radius < threshold)


def active_comets(radii: Mapping[str, float], threshold: float = COMET_ACTIVITY_RADIUS) -> dict[str, bool]:
    return {key: is_comet_active(r, threshold) for key, r in radii.items()}
