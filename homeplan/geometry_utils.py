# Homeplan imports
from homeplan import config

# Standard library imports
import math
from typing import Iterable, Optional, Tuple

# Third-party imports
import numpy as np

Rect = Tuple[int, int, int, int]

RESIZE_HANDLES = ("top-left", "top-right", "bottom-left", "bottom-right")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, exact halves towards +infinity."""
    return int(math.floor(value + 0.5))


def snap_to_grid(value: float, grid: int = config.GRID_SIZE) -> int:
    """
    Snap a world coordinate to the nearest grid line.

    Args:
        value (float): Raw world coordinate.
        grid (int): Grid unit in world units.

    Returns:
        int: ``round(value / grid) * grid``.
    """
    return round_half_up(value / grid) * grid


def to_int(value, default: int = 0, minimum: Optional[int] = None) -> int:
    """
    Coerce a raw form value to an integer without raising.

    Non-numeric, NaN and infinite input becomes ``default``. The result is
    clamped to ``minimum`` when one is given.

    Args:
        value: str, int, float or None as typed into an inspector field.
        default (int): Fallback for values that cannot be read as a number.
        minimum (int, optional): Lower bound applied after rounding.

    Returns:
        int: The coerced value.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float(default)
    if not math.isfinite(number):
        number = float(default)
    result = round_half_up(number)
    if minimum is not None and result < minimum:
        result = minimum
    return result


def to_fraction(value) -> float:
    """Coerce a raw value to a float clamped to [0, 1]; unreadable input becomes 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return max(0.0, min(1.0, number))


def normalize_rect(start: Tuple[float, float], end: Tuple[float, float]) -> Rect:
    """Return (x, y, width, height) of the rectangle spanned by two corners."""
    x0, y0 = start
    x1, y1 = end
    return (
        round_half_up(min(x0, x1)),
        round_half_up(min(y0, y1)),
        round_half_up(abs(x1 - x0)),
        round_half_up(abs(y1 - y0)),
    )


def resize_rect(rect: Rect, handle: str, point: Tuple[float, float], grid: int = config.GRID_SIZE) -> Rect:
    """
    Resize a rectangle by dragging one corner while the opposite corner stays fixed.

    The pointer is snapped to the grid first. Width and height never drop
    below one grid unit, so the anchored edges never move.

    Args:
        rect (tuple): Current (x, y, width, height).
        handle (str): One of ``RESIZE_HANDLES``.
        point (tuple): Pointer position in world units (unsnapped).
        grid (int): Grid unit.

    Returns:
        tuple: New (x, y, width, height) as integers.
    """
    if handle not in RESIZE_HANDLES:
        raise ValueError(f"Unknown resize handle '{handle}', expected one of {RESIZE_HANDLES}")

    x, y, width, height = rect
    right  = x + width
    bottom = y + height
    px     = snap_to_grid(point[0], grid)
    py     = snap_to_grid(point[1], grid)

    if handle == "top-left":
        x      = min(px, right - grid)
        y      = min(py, bottom - grid)
        width  = right - x
        height = bottom - y
    elif handle == "top-right":
        y      = min(py, bottom - grid)
        width  = max(grid, px - x)
        height = bottom - y
    elif handle == "bottom-left":
        x      = min(px, right - grid)
        height = max(grid, py - y)
        width  = right - x
    else:
        width  = max(grid, px - x)
        height = max(grid, py - y)

    return round_half_up(x), round_half_up(y), round_half_up(width), round_half_up(height)


def feature_span(room, feature) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    World-space segment occupied by a wall feature.

    The feature is centred at ``position`` along its wall, measured from the
    wall's start corner (left end for top/bottom, top end for left/right).

    Returns:
        tuple: ((x0, y0), (x1, y1)) endpoints of the feature on the wall.
    """
    half = feature.width / 2
    if feature.wall in ("top", "bottom"):
        wall_y = room.y if feature.wall == "top" else room.y + room.height
        centre = room.x + room.width * feature.position
        return (centre - half, wall_y), (centre + half, wall_y)
    wall_x = room.x if feature.wall == "left" else room.x + room.width
    centre = room.y + room.height * feature.position
    return (wall_x, centre - half), (wall_x, centre + half)


def rooms_bounds(rooms: Iterable) -> Optional[Tuple[float, float, float, float]]:
    """Return (min_x, min_y, max_x, max_y) over all rooms, or None for an empty plan."""
    rects = np.array([(r.x, r.y, r.x + r.width, r.y + r.height) for r in rooms], dtype=float)
    if rects.size == 0:
        return None
    return (
        float(rects[:, 0].min()),
        float(rects[:, 1].min()),
        float(rects[:, 2].max()),
        float(rects[:, 3].max()),
    )


def darken_color(color: str, amount: int = 40) -> str:
    """Darken a ``#RRGGBB`` colour by ``amount`` per channel; other values pass through."""
    if not (isinstance(color, str) and color.startswith('#') and len(color) >= 7):
        return color
    try:
        channels = [int(color[i:i + 2], 16) for i in (1, 3, 5)]
    except ValueError:
        return color
    return '#' + ''.join(f"{max(0, c - amount):02x}" for c in channels)
