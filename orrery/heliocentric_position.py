"""
Heliocentric position of a tracked body at one instant.
"""
from typing import NamedTuple
import jax.numpy as jnp


class HeliocentricPosition(NamedTuple):
    """
    Position of a body relative to the sun, as resolved for one Julian Date.

    Positions are a pure function of (elements, Julian Date); they are
    recomputed every query and never cached beyond one simulation tick.

    Attributes:
        position: Position vector [x, y, z] in scene units
        r: Orbital radius |position| in scene units
        nu: True anomaly (radians)

    Note:
        - The frame is Y-up and aligned to the ecliptic: an orbit with zero
          inclination, node and argument of periapsis lies in the X/Z plane
          with periapsis on +X, and y is the height above the ecliptic.
        - For batched resolution every field gains a leading body axis.

    Examples:
        >>> import jax.numpy as jnp
        >>> pos = HeliocentricPosition(
        ...     position=jnp.array([36.0, 0.0, 0.0]),  # 1 AU from the sun
        ...     r=jnp.asarray(36.0),
        ...     nu=jnp.asarray(0.0),
        ... )
    """
    position: jnp.ndarray  # [x, y, z] (scene units)
    r: jnp.ndarray  # orbital radius (scene units)
    nu: jnp.ndarray  # true anomaly (rad)
