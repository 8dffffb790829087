import logging
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import jit, lax
import numpy as np

from .orbital_elements import OrbitalElements
from .heliocentric_position import HeliocentricPosition
from .constants import TWO_PI, KEPLER_TOL, KEPLER_MAX_ITER, DANBY_K
from .errors import DegenerateDirection, NonConvergence

logger = logging.getLogger(__name__)


class KeplerSolution(NamedTuple):
    """
    Result of an iterative solve of Kepler's equation.

    Attributes:
        E: Eccentric anomaly (radians), on the same revolution as M
        residual: |E - e sin E - M| evaluated on the reduced anomaly
        iterations: Number of Newton-Raphson steps taken
    """
    E: jnp.ndarray
    residual: jnp.ndarray
    iterations: jnp.ndarray


def kepler_iterate(M: float, e: float, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> KeplerSolution:
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration with an explicit residual check.

    M may be any real value. It is shifted by whole revolutions into [-pi, pi]
    before iterating and the shift is added back to E afterwards, which leaves
    E - e*sin(E) = M unchanged. Iteration stops as soon as the residual on the
    reduced anomaly drops to ``tol`` or after ``max_iter`` steps, whichever
    comes first; in the latter case the last iterate is returned.

    Scalar M and e only; use `solve_kepler_vec` for arrays.
    """
    M = jnp.asarray(M, dtype=jnp.float64)
    e = jnp.asarray(e, dtype=jnp.float64)

    revolutions = jnp.round(M / TWO_PI)
    M_red = M - revolutions * TWO_PI

    # Danby's starting guess converges for every e in [0, 1) on the reduced range
    E0 = M_red + DANBY_K * e * jnp.sign(jnp.sin(M_red))
    f0 = E0 - e * jnp.sin(E0) - M_red

    def cond_fn(carry):
        _, f, k = carry
        return (k < max_iter) & (jnp.abs(f) > tol)

    def body_fn(carry):
        E, f, k = carry
        E_new = E - f / (1.0 - e * jnp.cos(E))
        f_new = E_new - e * jnp.sin(E_new) - M_red
        return E_new, f_new, k + 1

    E, f, k = lax.while_loop(cond_fn, body_fn, (E0, f0, jnp.asarray(0, dtype=jnp.int32)))
    return KeplerSolution(E=E + revolutions * TWO_PI, residual=jnp.abs(f), iterations=k)


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Eccentric anomaly for mean anomaly M and eccentricity e.

    Never fails: when the iteration budget runs out the best available
    estimate is returned. See `kepler_iterate`.
    """
    return kepler_iterate(M, e, tol, max_iter).E


def solve_kepler_vec(M, e, tol=KEPLER_TOL, max_iter=KEPLER_MAX_ITER):
    """
    Vectorized version of solve_kepler that handles arrays of M and e.

    Parameters
    ----------
    M : array_like
        Mean anomalies (radians), any shape
    e : array_like
        Eccentricities, broadcastable against M
    tol : float, optional
        Residual tolerance
    max_iter : int, optional
        Maximum number of Newton-Raphson steps

    Returns
    -------
    E : jnp.ndarray
        Eccentric anomalies with the broadcast shape of M and e
    """
    M, e = jnp.broadcast_arrays(jnp.asarray(M, dtype=jnp.float64), jnp.asarray(e, dtype=jnp.float64))
    solve = jax.vmap(lambda m, ecc: solve_kepler(m, ecc, tol, max_iter))
    return solve(M.ravel(), e.ravel()).reshape(M.shape)


def solve_kepler_checked(M: float, e: float, strict: bool = False,
                         tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Host-side Kepler solve that reports non-convergence.

    Returns the eccentric anomaly as a Python float. If the residual is still
    above ``tol`` after ``max_iter`` steps a warning is logged and the best
    estimate returned, or `NonConvergence` is raised when ``strict`` is set.
    """
    solution = kepler_iterate(M, e, tol, max_iter)
    residual = float(solution.residual)
    if not residual <= tol:
        iterations = int(solution.iterations)
        if strict:
            raise NonConvergence(float(M), float(e), residual, iterations)
        logger.warning("Kepler solve for M=%g, e=%g stopped at residual %.3e after %d iterations",
                       float(M), float(e), residual, iterations)
    return float(solution.E)


def kepler_residual(E, e, M):
    """Residual E - e*sin(E) - M of Kepler's equation."""
    return E - e * jnp.sin(E) - M


def true_anomaly(E, e):
    """True anomaly from eccentric anomaly."""
    return 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0),
        jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )


def orbit_radius(a, e, nu):
    """Distance from the focus at true anomaly nu."""
    return a * (1.0 - e**2) / (1.0 + e * jnp.cos(nu))


def _orbit_to_scene(r_mag, nu, i, Omega, omega):
    # Ecliptic frame (x toward the reference direction, z toward ecliptic north)
    cos_nu_omega = jnp.cos(nu + omega)
    sin_nu_omega = jnp.sin(nu + omega)
    cos_Omega = jnp.cos(Omega)
    sin_Omega = jnp.sin(Omega)
    cos_i = jnp.cos(i)
    sin_i = jnp.sin(i)

    x = r_mag * (cos_nu_omega * cos_Omega - sin_nu_omega * cos_i * sin_Omega)
    y = r_mag * (cos_nu_omega * sin_Omega + sin_nu_omega * cos_i * cos_Omega)
    z = r_mag * sin_nu_omega * sin_i

    # Scene frame is Y-up: ecliptic north becomes +y, ecliptic y becomes +z.
    # With Omega = omega = 0 this is the plain tilt y = r sin(nu) sin(i), z = r sin(nu) cos(i).
    return jnp.stack([x, z, y], axis=-1)


@jit
def elements_to_position(elements: OrbitalElements, julian_date: float) -> HeliocentricPosition:
    """
    Heliocentric position of a body at a Julian Date.

    The mean anomaly M = M0 + n*(jd - epoch) is not wrapped; the Kepler
    solver accepts any real value. Must not be called for the sun, which has
    no orbit.
    """
    a, e, i, Omega, omega, M0, n, epoch = elements

    # Mean anomaly at the requested date
    M = M0 + n * (julian_date - epoch)

    # Solve for eccentric anomaly
    E = solve_kepler(M, e)

    # True anomaly and distance
    nu = true_anomaly(E, e)
    r_mag = orbit_radius(a, e, nu)

    position = _orbit_to_scene(r_mag, nu, i, Omega, omega)
    return HeliocentricPosition(position=position, r=r_mag, nu=nu)


# Vectorized over a stacked element set (see orbital_elements.stack_elements)
positions_vec = jit(jax.vmap(elements_to_position, in_axes=(0, None)))


def orbit_path(elements: OrbitalElements, n_points: int = 256) -> np.ndarray:
    """
    Compute points along an orbit using uniformly spaced true anomaly.

    The path is closed: the last point repeats the first. Returns an array
    of shape (n_points, 3) in scene units.
    """
    if n_points < 2:
        raise ValueError(f"An orbit path needs at least 2 points, got {n_points}")
    nu = np.linspace(0.0, TWO_PI, n_points)
    r_mag = orbit_radius(elements.a, elements.e, nu)
    points = _orbit_to_scene(r_mag, nu, elements.i, elements.Omega, elements.omega)
    return np.asarray(points)


def sunward_direction(position) -> np.ndarray:
    """
    Unit vector pointing from a body toward the sun.

    Raises:
        DegenerateDirection: if the position is the origin (the sun itself)
            or is not finite, rather than returning a NaN-bearing vector.
    """
    p = np.asarray(position, dtype=np.float64)
    distance = np.linalg.norm(p)
    if not np.isfinite(distance) or distance <= np.finfo(np.float64).tiny:
        raise DegenerateDirection(f"No sunward direction for a body at {p.tolist()}")
    return -p / distance
