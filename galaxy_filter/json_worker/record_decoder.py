"""Project loosely typed galaxy dump elements into compact Body records."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from galaxy_filter.json_worker.accessors import (
    get_array,
    get_float,
    get_int64,
    get_object,
    get_str,
)

logger = logging.getLogger(__name__)

STAR_TYPE = "Star"


@dataclass
class Coords:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"X": self.x, "Y": self.y, "Z": self.z}


@dataclass
class Star:
    id64: int = 0
    body_id: int = 0
    name: str = ""
    sub_type: str = ""
    distance_to_arrival: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ID64": self.id64,
            "BodyID": self.body_id,
            "Name": self.name,
            "SubType": self.sub_type,
            "DistanceToArrival": self.distance_to_arrival,
        }


@dataclass
class Body:
    id64: int = 0
    name: str = ""
    coords: Coords = field(default_factory=Coords)
    stars: List[Star] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Key order and names are the output contract consumers rely on."""
        return {
            "ID64": self.id64,
            "Name": self.name,
            "Coords": self.coords.to_dict(),
            "Stars": [s.to_dict() for s in self.stars],
        }


def _int_or_zero(obj, key):
    value = get_int64(obj, key)
    return 0 if value is None else value


def _float_or_zero(obj, key):
    value = get_float(obj, key)
    return 0.0 if value is None else value


def _str_or_empty(obj, key):
    value = get_str(obj, key)
    return "" if value is None else value


def decode_coords(value: Dict[str, Any]) -> Coords:
    c = get_object(value, "coords")
    if c is None:
        return Coords()
    return Coords(
        x=_float_or_zero(c, "x"),
        y=_float_or_zero(c, "y"),
        z=_float_or_zero(c, "z"),
    )


def decode_star(value: Dict[str, Any]) -> Star:
    return Star(
        id64=_int_or_zero(value, "id64"),
        body_id=_int_or_zero(value, "bodyId"),
        name=_str_or_empty(value, "name"),
        sub_type=_str_or_empty(value, "subType"),
        distance_to_arrival=_float_or_zero(value, "distanceToArrival"),
    )


def decode_stars(value: Dict[str, Any]) -> List[Star]:
    """Collect star-typed children of ``bodies``, at most ``bodyCount`` of them."""
    body_count = get_int64(value, "bodyCount")
    if not body_count or body_count < 0:
        return []

    bodies = get_array(value, "bodies")
    if bodies is None:
        logger.debug("bodyCount is %d but no bodies array present", body_count)
        return []

    stars: List[Star] = []
    for child in bodies:
        if len(stars) >= body_count:
            break
        if not isinstance(child, dict):
            continue
        if get_str(child, "type") != STAR_TYPE:
            continue
        stars.append(decode_star(child))
    return stars


def decode_body(value: Dict[str, Any]) -> Body:
    """Project one decoded array element into a Body.

    Absent or mistyped fields resolve to zero values; this never raises for
    a dict input.
    """
    return Body(
        id64=_int_or_zero(value, "id64"),
        name=_str_or_empty(value, "name"),
        coords=decode_coords(value),
        stars=decode_stars(value),
    )
