# Homeplan imports
from homeplan.geometry_utils import (
    darken_color,
    feature_span,
    normalize_rect,
    resize_rect,
    rooms_bounds,
    snap_to_grid,
    to_fraction,
    to_int,
)
from homeplan.models import Room, WallFeature

# Third-party imports
import pytest


@pytest.fixture
def room():
    """100 x 50 room at the origin"""
    return Room(id="r1", x=0, y=0, width=100, height=50, name="Test")


class TestSnapToGrid:
    """Tests for snap_to_grid"""

    def test_rounds_to_nearest_grid_line(self):
        """Values snap to the closest multiple of the grid unit"""
        assert snap_to_grid(73) == 70
        assert snap_to_grid(67) == 70
        assert snap_to_grid(0.4) == 0

    def test_exact_half_rounds_up(self):
        """Exact halves round towards +infinity"""
        assert snap_to_grid(75) == 80
        assert snap_to_grid(-15) == -10

    def test_negative_values(self):
        """Negative coordinates snap to the nearest grid line"""
        assert snap_to_grid(-14) == -10
        assert snap_to_grid(-16) == -20

    def test_custom_grid(self):
        """Grid unit can be overridden"""
        assert snap_to_grid(26, grid=25) == 25
        assert snap_to_grid(38, grid=25) == 50

    def test_returns_int(self):
        """Snapped values are integers"""
        assert isinstance(snap_to_grid(12.3), int)


class TestNumericCoercion:
    """Tests for to_int and to_fraction"""

    def test_numeric_string_rounds(self):
        """Numeric strings are parsed and rounded to the nearest integer"""
        assert to_int("12.7") == 13
        assert to_int("40") == 40

    def test_unreadable_values_use_default(self):
        """Non-numeric, NaN and infinite values fall back to the default"""
        assert to_int("abc") == 0
        assert to_int(None) == 0
        assert to_int("") == 0
        assert to_int(float("nan")) == 0
        assert to_int("inf", default=5) == 5

    def test_minimum_clamps(self):
        """Values below the minimum are clamped to it"""
        assert to_int(-5, minimum=0) == 0
        assert to_int("abc", minimum=10) == 10
        assert to_int(25, minimum=10) == 25

    def test_fraction_clamped(self):
        """Fractions are clamped to [0, 1]"""
        assert to_fraction(1.7) == 1.0
        assert to_fraction(-0.2) == 0.0
        assert to_fraction("0.25") == 0.25

    def test_fraction_unreadable_is_zero(self):
        """Unreadable fractions become 0"""
        assert to_fraction("half") == 0.0
        assert to_fraction(float("nan")) == 0.0


class TestNormalizeRect:
    """Tests for normalize_rect"""

    def test_any_corner_order(self):
        """Rectangle is the same whichever corner the gesture started from"""
        assert normalize_rect((10, 10), (110, 110)) == (10, 10, 100, 100)
        assert normalize_rect((110, 110), (10, 10)) == (10, 10, 100, 100)
        assert normalize_rect((110, 10), (10, 60)) == (10, 10, 100, 50)

    def test_degenerate(self):
        """Identical corners give a zero-size rectangle"""
        assert normalize_rect((10, 10), (10, 10)) == (10, 10, 0, 0)


class TestResizeRect:
    """Tests for resize_rect (opposite corner stays fixed)"""

    RECT = (50, 50, 300, 200)

    def test_bottom_right_keeps_top_left(self):
        """Dragging bottom-right never moves x or y"""
        assert resize_rect(self.RECT, "bottom-right", (401, 299)) == (50, 50, 350, 250)
        assert resize_rect(self.RECT, "bottom-right", (0, 0)) == (50, 50, 10, 10)

    def test_top_left_keeps_bottom_right(self):
        """Dragging top-left keeps the right and bottom edges"""
        x, y, w, h = resize_rect(self.RECT, "top-left", (21, 38))
        assert (x, y) == (20, 40)
        assert (x + w, y + h) == (350, 250)

    def test_top_left_past_anchor_clamps_to_one_unit(self):
        """Dragging past the opposite corner leaves a one-unit room"""
        assert resize_rect(self.RECT, "top-left", (500, 400)) == (340, 240, 10, 10)

    def test_top_right(self):
        """Top-right keeps the left and bottom edges"""
        x, y, w, h = resize_rect(self.RECT, "top-right", (402, 18))
        assert x == 50
        assert (y, w) == (20, 350)
        assert y + h == 250

    def test_bottom_left(self):
        """Bottom-left keeps the right and top edges"""
        x, y, w, h = resize_rect(self.RECT, "bottom-left", (0, 300))
        assert (x, y) == (0, 50)
        assert x + w == 350
        assert h == 250

    def test_unknown_handle(self):
        """Unknown handles are rejected"""
        with pytest.raises(ValueError):
            resize_rect(self.RECT, "middle", (0, 0))


class TestFeatureSpan:
    """Tests for feature_span"""

    def test_top_wall_centred(self, room):
        """A door centred on the top wall spans width/2 either side"""
        door = WallFeature(id="f1", type="door", wall="top", position=0.5, width=40)
        assert feature_span(room, door) == ((30, 0), (70, 0))

    def test_bottom_wall(self, room):
        """Bottom wall features sit on y + height"""
        window = WallFeature(id="f2", type="window", wall="bottom", position=0.0, width=20)
        assert feature_span(room, window) == ((-10, 50), (10, 50))

    def test_right_wall(self, room):
        """Side wall positions are measured down from the top corner"""
        window = WallFeature(id="f3", type="window", wall="right", position=0.2, width=10)
        assert feature_span(room, window) == ((100, 5), (100, 15))


class TestMisc:
    """Tests for rooms_bounds and darken_color"""

    def test_bounds(self):
        """Bounds cover every room"""
        rooms = [
            Room(id="a", x=50, y=50, width=300, height=200),
            Room(id="b", x=350, y=50, width=150, height=150),
        ]
        assert rooms_bounds(rooms) == (50.0, 50.0, 500.0, 250.0)

    def test_bounds_empty(self):
        """An empty plan has no bounds"""
        assert rooms_bounds([]) is None

    def test_darken_hex(self):
        """Each channel is reduced and floored at zero"""
        assert darken_color("#DBEAFE") == "#b3c2d6"
        assert darken_color("#101010") == "#000000"

    def test_darken_passthrough(self):
        """Non-hex colours are returned unchanged"""
        assert darken_color("red") == "red"
        assert darken_color("#zzzzzz") == "#zzzzzz"
