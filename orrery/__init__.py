# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements, validate_elements, stack_elements
from .heliocentric_position import HeliocentricPosition

from .constants import (
    # Constants
    DAY,
    YEAR,
    J2000,
    SCENE_UNITS_PER_AU,
    DAYS_PER_SECOND,
    MAX_DAYS_PER_TICK,
    COMET_ACTIVITY_RADIUS,
    KEPLER_TOL,
    KEPLER_MAX_ITER,
)

from .errors import (
    OrreryError,
    InvalidDate,
    InvalidElements,
    UnknownBody,
    DegenerateDirection,
    NonConvergence,
)

from .time_base import (
    parse_date,
    date_to_julian,
    datetime_to_julian,
    julian_to_date,
    julian_to_datetime,
    check_julian_date,
    format_date,
    now,
)

from .astrodynamics import (
    # Functions
    KeplerSolution,
    kepler_iterate,
    solve_kepler,
    solve_kepler_vec,
    solve_kepler_checked,
    kepler_residual,
    true_anomaly,
    orbit_radius,
    elements_to_position,
    positions_vec,
    orbit_path,
    sunward_direction,
)

from .bodies import (
    # Body class
    Body,
    SUN_KEY,
    load_bodies_data,
    bodies_data
)

from .comets import Comet, load_comets_data, comets_data
from .visibility import is_comet_active, active_comets
from .clock import ClockConfig, SimulationClock
from .engine import OrbitalEngine

# Alias for the scene scale
AU = SCENE_UNITS_PER_AU

__all__ = [
    # Constants
    "AU",
    "DAY",
    "YEAR",
    "J2000",
    "SCENE_UNITS_PER_AU",
    "DAYS_PER_SECOND",
    "MAX_DAYS_PER_TICK",
    "COMET_ACTIVITY_RADIUS",
    "KEPLER_TOL",
    "KEPLER_MAX_ITER",

    # Errors
    "OrreryError",
    "InvalidDate",
    "InvalidElements",
    "UnknownBody",
    "DegenerateDirection",
    "NonConvergence",

    # Named tuples
    "OrbitalElements",
    "HeliocentricPosition",
    "KeplerSolution",
    "validate_elements",
    "stack_elements",

    # Time base
    "parse_date",
    "date_to_julian",
    "datetime_to_julian",
    "julian_to_date",
    "julian_to_datetime",
    "check_julian_date",
    "format_date",
    "now",

    # Functions
    "kepler_iterate",
    "solve_kepler",
    "solve_kepler_vec",
    "solve_kepler_checked",
    "kepler_residual",
    "true_anomaly",
    "orbit_radius",
    "elements_to_position",
    "positions_vec",
    "orbit_path",
    "sunward_direction",

    # Bodies
    "Body",
    "SUN_KEY",
    "load_bodies_data",
    "bodies_data",
    "Comet",
    "load_comets_data",
    "comets_data",
    "is_comet_active",
    "active_comets",

    # Clock and engine
    "ClockConfig",
    "SimulationClock",
    "OrbitalEngine",
]
