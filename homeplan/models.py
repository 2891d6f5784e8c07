"""
Plan data model.

This module contains:
- Point: a 2D coordinate in world or viewport space.
- WallFeature: a door or window mounted on one wall of a room.
- Room: an axis-aligned rectangle in world space with its wall features.
- RoomEdit / FeatureEdit: explicit partial updates applied by the inspector.

All records are frozen. Edits produce new instances through ``replace`` so a
snapshot already stored in the history is never mutated.
"""

# Standard library imports
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

# Constants
FEATURE_TYPES   = ("door", "window")
WALLS           = ("top", "bottom", "left", "right")
ROOM_KEYS       = ("id", "name", "x", "y", "width", "height", "color", "zIndex")


def new_id() -> str:
    """Return a fresh opaque identifier for a room or feature."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class WallFeature:
    """
    A door or window attached to one of a room's four walls.

    Attributes:
        id (str): Unique within the owning room.
        type (str): ``door`` or ``window``.
        wall (str): ``top``, ``bottom``, ``left`` or ``right``.
        position (float): Fraction along the wall, 0 at the wall's start corner.
        width (int): Footprint along the wall in world units.
    """

    id:         str
    type:       str
    wall:       str
    position:   float
    width:      int

    def __post_init__(self):
        if self.type not in FEATURE_TYPES:
            raise ValueError(f"Unknown feature type '{self.type}', expected one of {FEATURE_TYPES}")
        if self.wall not in WALLS:
            raise ValueError(f"Unknown wall '{self.wall}', expected one of {WALLS}")

    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "type":     self.type,
            "wall":     self.wall,
            "position": self.position,
            "width":    self.width,
        }


@dataclass(frozen=True)
class Room:
    """
    A rectangular room in world coordinates.

    Attributes:
        id (str): Immutable for the room's lifetime.
        x, y (int): Top-left corner.
        width, height (int): Size, at least one grid unit after any draw or resize.
        name (str): Free-form label.
        color (str): Fill colour, normally from ``config.ROOM_COLORS``.
        z_index (int): Draw order, higher draws on top.
        locked (bool): Blocks pointer-driven geometry and feature edits.
        features (tuple): Wall features in display order.
    """

    id:         str
    x:          int
    y:          int
    width:      int
    height:     int
    name:       str                         = ""
    color:      str                         = ""
    z_index:    int                         = 0
    locked:     bool                        = False
    features:   Tuple[WallFeature, ...]     = field(default_factory=tuple)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    def with_rect(self, x: int, y: int, width: int, height: int) -> "Room":
        return replace(self, x=x, y=y, width=width, height=height)

    def find_feature(self, feature_id: str) -> Optional[WallFeature]:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None

    def to_dict(self) -> dict:
        """Serialise to the persisted plan record (camelCase keys)."""
        return {
            "id":       self.id,
            "name":     self.name,
            "x":        self.x,
            "y":        self.y,
            "width":    self.width,
            "height":   self.height,
            "color":    self.color,
            "zIndex":   self.z_index,
            "locked":   self.locked,
            "features": [f.to_dict() for f in self.features],
        }


@dataclass(frozen=True)
class RoomEdit:
    """Inspector update for a room. Fields left as None are not touched.

    Numeric fields accept raw form input (str, int or float); the editor
    coerces them before applying.
    """

    name:       Optional[str]   = None
    color:      Optional[str]   = None
    locked:     Optional[bool]  = None
    x:          Optional[object] = None
    y:          Optional[object] = None
    width:      Optional[object] = None
    height:     Optional[object] = None
    z_index:    Optional[object] = None

    @property
    def touches_geometry(self) -> bool:
        return any(v is not None for v in (self.x, self.y, self.width, self.height, self.z_index))


@dataclass(frozen=True)
class FeatureEdit:
    """Inspector update for a wall feature. Fields left as None are not touched."""

    type:       Optional[str]    = None
    wall:       Optional[str]    = None
    position:   Optional[object] = None
    width:      Optional[object] = None


# Snapshot type stored in the history: the full room list
Plan = Tuple[Room, ...]


def replace_room(rooms: Plan, room: Room) -> Plan:
    """Return a new plan with the room sharing ``room.id`` swapped for ``room``."""
    return tuple(room if r.id == room.id else r for r in rooms)


def find_room(rooms: Plan, room_id: Optional[str]) -> Optional[Room]:
    if room_id is None:
        return None
    for room in rooms:
        if room.id == room_id:
            return room
    return None
