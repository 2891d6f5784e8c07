"""View transform between viewport pixels and world units.

A viewport point ``v`` maps to world point ``w`` as ``w = (v - t) / scale``
where ``t`` is the translation of the world origin in viewport pixels.
"""

# Homeplan imports
from homeplan import config

# Standard library imports
from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class ViewTransform:
    """
    Pan offset and zoom scale of the editing surface.

    Attributes:
        scale (float): Zoom factor, viewport pixels per world unit.
        x (float): Viewport x of the world origin.
        y (float): Viewport y of the world origin.
    """

    scale:  float = 1.0
    x:      float = 0.0
    y:      float = 0.0

    def to_world(self, point: Tuple[float, float]) -> Tuple[float, float]:
        vx, vy = point
        return (vx - self.x) / self.scale, (vy - self.y) / self.scale

    def to_viewport(self, point: Tuple[float, float]) -> Tuple[float, float]:
        wx, wy = point
        return wx * self.scale + self.x, wy * self.scale + self.y

    def zoom_at(self, point: Tuple[float, float], direction: float) -> "ViewTransform":
        """
        Zoom one wheel tick around a viewport point.

        The world point under ``point`` stays under it after the scale change.

        Args:
            point (tuple): Cursor position in viewport pixels.
            direction (float): Positive zooms in, zero or negative zooms out.

        Returns:
            ViewTransform: The new transform.
        """
        if direction > 0:
            scale = self.scale * config.ZOOM_FACTOR
        else:
            scale = self.scale / config.ZOOM_FACTOR
        scale = max(config.MIN_SCALE, min(scale, config.MAX_SCALE))

        wx, wy = self.to_world(point)
        vx, vy = point
        return ViewTransform(scale=scale, x=vx - wx * scale, y=vy - wy * scale)

    def pan(self, dx: float, dy: float) -> "ViewTransform":
        """Shift the world origin by a viewport pixel delta."""
        return replace(self, x=self.x + dx, y=self.y + dy)

    @staticmethod
    def reset() -> "ViewTransform":
        return ViewTransform()

    @staticmethod
    def fit_to(
        bounds: Tuple[float, float, float, float],
        viewport_size: Tuple[float, float],
        margin: float = 40.0,
    ) -> "ViewTransform":
        """Transform that centres a world bounding box in the viewport.

        ``bounds`` is (min_x, min_y, max_x, max_y) in world units and
        ``margin`` is kept free on every side, in viewport pixels.
        """
        min_x, min_y, max_x, max_y = bounds
        view_w, view_h = viewport_size
        world_w = max(max_x - min_x, 1e-9)
        world_h = max(max_y - min_y, 1e-9)
        avail_w = max(view_w - 2 * margin, 1.0)
        avail_h = max(view_h - 2 * margin, 1.0)

        scale = min(avail_w / world_w, avail_h / world_h)
        scale = max(config.MIN_SCALE, min(scale, config.MAX_SCALE))

        centre_x = (min_x + max_x) / 2
        centre_y = (min_y + max_y) / 2
        return ViewTransform(
            scale=scale,
            x=view_w / 2 - centre_x * scale,
            y=view_h / 2 - centre_y * scale,
        )
