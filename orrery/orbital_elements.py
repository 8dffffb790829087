"""
Orbital elements representation for tracked bodies.
"""
import math
from typing import NamedTuple, Optional, Sequence

import numpy as np
import jax.numpy as jnp

from orrery.constants import J2000, TWO_PI
from orrery.errors import InvalidElements


class OrbitalElements(NamedTuple):
    """
    Keplerian orbital elements for a body orbiting the sun.

    All angular quantities are in radians. Element sets are built once from
    static reference data and never mutated. Being a NamedTuple, an element
    set is a JAX pytree and can be passed through jax.jit and jax.vmap; a
    "stacked" element set (see `stack_elements`) holds one array per field.

    Attributes:
        a: Semi-major axis (scene distance units)
        e: Eccentricity (dimensionless, 0 <= e < 1)
        i: Inclination relative to the ecliptic (radians)
        Omega: Longitude of the ascending node (radians)
        omega: Argument of periapsis (radians)
        M0: Mean anomaly at epoch (radians)
        n: Mean motion (radians per day)
        epoch: Julian Date at which the body has mean anomaly M0
    """
    a: float  # semi-major axis (scene units)
    e: float  # eccentricity
    i: float  # inclination (rad)
    Omega: float  # longitude of ascending node (rad)
    omega: float  # argument of periapsis (rad)
    M0: float  # mean anomaly at epoch (rad)
    n: float  # mean motion (rad/day)
    epoch: float = J2000  # JD

    @classmethod
    def from_degrees(cls, a: float, e: float, i: float, Omega: float, omega: float, M0: float,
                     period: Optional[float] = None, mean_motion: Optional[float] = None,
                     epoch: float = J2000) -> 'OrbitalElements':
        """
        Build an element set from angles in degrees.

        Exactly one of ``period`` (days) or ``mean_motion`` (radians per day)
        must be given; the other follows from ``n = 2π / T``.
        """
        if (period is None) == (mean_motion is None):
            raise InvalidElements("Exactly one of period or mean_motion must be given")
        if period is not None:
            if not period > 0.0:
                raise InvalidElements(f"Orbital period must be positive, got {period}")
            mean_motion = TWO_PI / period
        return cls(
            a=float(a),
            e=float(e),
            i=math.radians(i),
            Omega=math.radians(Omega),
            omega=math.radians(omega),
            M0=math.radians(M0),
            n=float(mean_motion),
            epoch=float(epoch),
        )

    @property
    def period(self) -> float:
        """Orbital period in days."""
        return TWO_PI / self.n

    @property
    def periapsis(self) -> float:
        return self.a * (1.0 - self.e)

    @property
    def apoapsis(self) -> float:
        return self.a * (1.0 + self.e)


def validate_elements(elements: OrbitalElements) -> OrbitalElements:
    """
    Check that an element set describes a bound ellipse.

    Raises:
        InvalidElements: if any field is not finite, or a <= 0, e outside
            [0, 1), or n <= 0.
    """
    values = np.asarray(elements, dtype=np.float64)
    if not np.all(np.isfinite(values)):
        raise InvalidElements(f"Element set has non-finite fields: {elements}")
    if np.any(np.asarray(elements.a) <= 0.0):
        raise InvalidElements(f"Semi-major axis must be positive, got a={elements.a}")
    e = np.asarray(elements.e)
    if np.any(e < 0.0) or np.any(e >= 1.0):
        raise InvalidElements(f"Eccentricity must satisfy 0 <= e < 1, got e={elements.e}")
    if np.any(np.asarray(elements.n) <= 0.0):
        raise InvalidElements(f"Mean motion must be positive, got n={elements.n}")
    return elements


def stack_elements(elements: Sequence[OrbitalElements]) -> OrbitalElements:
    """
    Stack a sequence of element sets into a single element set of arrays.

    The result can be given to `orrery.astrodynamics.positions_vec` to resolve
    every body in one vectorized call.
    """
    if len(elements) == 0:
        raise ValueError("Cannot stack an empty sequence of element sets")
    columns = zip(*elements)
    return OrbitalElements(*(jnp.asarray(np.array(col, dtype=np.float64)) for col in columns))
