"""
Physical, calendar and simulation constants for the orrery engine.

This module contains all constants used throughout the Kepler propagation engine.
"""
import numpy as np

# Basic astronomical and time constants
DAY = 86400.0  # seconds per day
YEAR = 365.25  # days per Julian year
J2000 = 2451545.0  # JD of 2000-01-01 12:00 (reference epoch of the element sets)
JD_GREGORIAN_ORDINAL_OFFSET = 1721424.5  # JD of midnight at proleptic Gregorian ordinal 0

# Scene scale
SCENE_UNITS_PER_AU = 36.0  # scene distance units per AU

# Simulation clock
DAYS_PER_SECOND = 1.0  # simulated days per real second at 1x acceleration
MAX_DAYS_PER_TICK = 30.0  # hard cap on simulated days per clock tick

# Comets are only drawn within 3 AU of the sun
COMET_ACTIVITY_RADIUS = 3.0 * SCENE_UNITS_PER_AU

# Kepler solver
TWO_PI = 2.0 * np.pi
KEPLER_TOL = 1.0e-12  # residual |E - e sin E - M| on the reduced anomaly
KEPLER_MAX_ITER = 50
DANBY_K = 0.85  # starting guess E0 = M + k e sign(sin M)
