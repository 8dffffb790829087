import csv
import logging
from pathlib import Path
from typing import Literal, Optional

import pydantic
from pydantic import ConfigDict

from orrery.constants import SCENE_UNITS_PER_AU, YEAR
from orrery.errors import InvalidElements
from orrery.heliocentric_position import HeliocentricPosition
from orrery.orbital_elements import OrbitalElements, validate_elements

logger = logging.getLogger(__name__)

# The primary sits at the origin and has no orbit; it is never handed to the resolver
SUN_KEY = 'sun'

DATA_DIR = Path(__file__).parent / 'data'


class Body(pydantic.BaseModel):
    """
    Represents a tracked body on a full Keplerian orbit about the sun.

    Attributes:
        key: Registry key of the body (e.g., "earth", "ceres")
        name: Display name of the body
        kind: "planet", "dwarf_planet" or "asteroid"
        elements: Orbital elements of the body (scene units, radians)
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # Allow OrbitalElements (NamedTuple)

    key: str
    name: str
    kind: Literal['planet', 'dwarf_planet', 'asteroid']
    elements: OrbitalElements

    @pydantic.field_validator('elements')
    @classmethod
    def check_elements(cls, v):
        return validate_elements(v)

    def get_position(self, julian_date: float, distance_units: str = 'scene') -> HeliocentricPosition:
        """
        Get the heliocentric position of the body at a Julian Date.

        Args:
            julian_date: Julian Date of the requested instant
            distance_units: Units of the returned position and radius. Options:
                - 'scene': scene distance units (default)
                - 'AU': astronomical units

        Returns:
            HeliocentricPosition with the position vector, radius and true anomaly

        Examples:
            >>> from orrery.bodies import bodies_data
            >>> pos = bodies_data['earth'].get_position(2451545.0)
            >>> pos_au = bodies_data['earth'].get_position(2451545.0, distance_units='AU')
        """
        from orrery.astrodynamics import elements_to_position

        pos = elements_to_position(self.elements, julian_date)

        if distance_units == 'scene':
            return pos
        elif distance_units == 'AU':
            return pos._replace(position=pos.position / SCENE_UNITS_PER_AU, r=pos.r / SCENE_UNITS_PER_AU)
        else:
            raise ValueError(f"Invalid distance_units '{distance_units}'. Must be one of: 'scene', 'AU'")

    def get_period(self, units: str = 'day') -> float:
        """
        Orbital period of the body.

        Args:
            units: 'day'/'days' (default) or 'year'/'years' (Julian years)
        """
        period_days = self.elements.period

        units_lower = units.lower()
        if units_lower in ('day', 'days'):
            return period_days
        elif units_lower in ('year', 'years'):
            return period_days / YEAR
        else:
            raise ValueError(f"Invalid units '{units}'. Must be one of: 'day', 'year'")

    def __repr__(self) -> str:
        return f"Body(key='{self.key}', name='{self.name}', kind='{self.kind}')"

    def __str__(self) -> str:
        return self.name


def _row_to_elements(row: dict, filename: str) -> OrbitalElements:
    try:
        elements = OrbitalElements.from_degrees(
            a=float(row['Semi-Major Axis (AU)']) * SCENE_UNITS_PER_AU,
            e=float(row['Eccentricity ()']),
            i=float(row['Inclination (deg)']),
            Omega=float(row['Longitude of the Ascending Node (deg)']),
            omega=float(row['Argument of Periapsis (deg)']),
            M0=float(row['Mean Anomaly at Epoch (deg)']),
            period=float(row['Period (days)']),
            epoch=float(row['Epoch (JD)']),
        )
    except (KeyError, TypeError, ValueError) as exc:
        if isinstance(exc, InvalidElements):
            raise
        raise InvalidElements(f"Malformed row for '{row.get('Key')}' in {filename}: {exc}") from exc
    return elements


def load_bodies_data(data_dir: Optional[Path] = None) -> dict[str, Body]:
    """
    Load all tracked bodies (planets, dwarf planets, asteroids) from CSV files.

    Semi-major axes are converted from AU to scene units and angles from
    degrees to radians once, here.

    Returns:
        Dictionary mapping body key to Body object, in file order

    Raises:
        InvalidElements: if a row is malformed or describes an unbound orbit
    """
    data_dir = DATA_DIR if data_dir is None else Path(data_dir)
    bodies = {}

    body_files = [
        ('planets.csv', 'planet'),
        ('dwarf_planets.csv', 'dwarf_planet'),
        ('asteroids.csv', 'asteroid'),
    ]

    for filename, kind in body_files:
        filepath = data_dir / filename

        # Only the planets file is required
        if not filepath.exists():
            if kind == 'planet':
                raise FileNotFoundError(f"Planet data not found at {filepath}")
            continue

        with open(filepath, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for row in reader:
                elements = _row_to_elements(row, filename)
                try:
                    body = Body(key=row['Key'], name=row['Name'], kind=kind, elements=elements)
                except pydantic.ValidationError as exc:
                    raise InvalidElements(f"Invalid body '{row['Key']}' in {filename}: {exc}") from exc
                if body.key in bodies or body.key == SUN_KEY:
                    raise InvalidElements(f"Duplicate body key '{body.key}' in {filename}")
                bodies[body.key] = body

    logger.debug("Loaded %d bodies from %s", len(bodies), data_dir)
    return bodies


bodies_data = load_bodies_data()
