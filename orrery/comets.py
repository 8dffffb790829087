"""
Simplified orbits for the synthetic comets.

A comet is described by its periapsis and apoapsis distances, period,
inclination and a single starting angle instead of a full element set. It is
resolved through the same Kepler solver as every other body by adapting it to
an `OrbitalElements` with zero node and argument of periapsis.
"""
import csv
import math
import logging
from pathlib import Path
from typing import Optional

import pydantic
from pydantic import BaseModel, Field, model_validator

from orrery.constants import J2000, TWO_PI
from orrery.errors import InvalidElements
from orrery.heliocentric_position import HeliocentricPosition
from orrery.orbital_elements import OrbitalElements, validate_elements

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'


class Comet(BaseModel):
    """
    A comet on a simplified periapsis/apoapsis orbit.
    """
    model_config = pydantic.ConfigDict(frozen=True, allow_inf_nan=False)

    key: str = Field(..., description="Registry key of the comet")
    name: str = Field(..., description="Display name")
    periapsis: float = Field(..., gt=0.0, description="Closest distance to the sun (scene units)")
    apoapsis: float = Field(..., gt=0.0, description="Farthest distance from the sun (scene units)")
    period: float = Field(..., gt=0.0, description="Orbital period (days)")
    inclination: float = Field(0.0, description="Inclination to the ecliptic (degrees)")
    start_angle: float = Field(0.0, description="Mean anomaly at epoch (radians)")
    epoch: float = Field(J2000, description="Julian Date at which the mean anomaly equals start_angle")

    @model_validator(mode='after')
    def validate_distances(self):
        if self.apoapsis < self.periapsis:
            raise ValueError("apoapsis must not be smaller than periapsis")
        # InvalidElements is a ValueError, so pydantic reports it as a ValidationError
        validate_elements(self.to_elements())
        return self

    @property
    def a(self) -> float:
        """Semi-major axis (scene units)."""
        return (self.periapsis + self.apoapsis) / 2.0

    @property
    def e(self) -> float:
        """Eccentricity."""
        return (self.apoapsis - self.periapsis) / (self.apoapsis + self.periapsis)

    @property
    def mean_motion(self) -> float:
        """Mean motion (radians per day)."""
        return TWO_PI / self.period

    def to_elements(self) -> OrbitalElements:
        return OrbitalElements(
            a=self.a,
            e=self.e,
            i=math.radians(self.inclination),
            Omega=0.0,
            omega=0.0,
            M0=float(self.start_angle),
            n=self.mean_motion,
            epoch=float(self.epoch),
        )

    def get_position(self, julian_date: float) -> HeliocentricPosition:
        """Heliocentric position of the comet at a Julian Date (scene units)."""
        from orrery.astrodynamics import elements_to_position

        return elements_to_position(self.to_elements(), julian_date)


def load_comets_data(data_dir: Optional[Path] = None) -> dict[str, Comet]:
    """
    Load the synthetic comets from ``comets.csv``.

    Distances in the file are already in scene units.

    Returns:
        Dictionary mapping comet key to Comet object
    """
    data_dir = DATA_DIR if data_dir is None else Path(data_dir)
    filepath = data_dir / 'comets.csv'
    comets = {}

    if not filepath.exists():
        return comets

    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                comet = Comet(
                    key=row['Key'],
                    name=row['Name'],
                    periapsis=float(row['Periapsis (scene)']),
                    apoapsis=float(row['Apoapsis (scene)']),
                    period=float(row['Period (days)']),
                    inclination=float(row['Inclination (deg)']),
                    start_angle=float(row['Start Angle (rad)']),
                )
            except (KeyError, ValueError) as exc:
                raise InvalidElements(f"Malformed comet row '{row.get('Key')}' in comets.csv: {exc}") from exc
            if comet.key in comets:
                raise InvalidElements(f"Duplicate comet key '{comet.key}' in comets.csv")
            comets[comet.key] = comet

    logger.debug("Loaded %d comets from %s", len(comets), filepath)
    return comets


comets_data = load_comets_data()
