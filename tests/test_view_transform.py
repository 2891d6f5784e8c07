# Homeplan imports
from homeplan import config
from homeplan.view_transform import ViewTransform

# Third-party imports
import pytest


class TestViewTransform:
    """Test suite for ViewTransform"""

    @pytest.fixture
    def zoomed(self):
        """Transform with a non-trivial scale and offset"""
        return ViewTransform(scale=1.7, x=-35.5, y=120.25)

    def test_identity(self):
        """Default transform maps viewport onto world unchanged"""
        view = ViewTransform()
        assert view.to_world((12.0, 34.0)) == (12.0, 34.0)
        assert view.to_viewport((12.0, 34.0)) == (12.0, 34.0)

    def test_to_world_formula(self, zoomed):
        """world = (viewport - translation) / scale"""
        wx, wy = zoomed.to_world((100.0, 200.0))
        assert wx == pytest.approx((100.0 + 35.5) / 1.7)
        assert wy == pytest.approx((200.0 - 120.25) / 1.7)

    @pytest.mark.parametrize("point", [(0.0, 0.0), (123.4, -56.7), (-1e4, 3e3)])
    def test_round_trip(self, zoomed, point):
        """to_world(to_viewport(p)) == p within tolerance"""
        assert zoomed.to_world(zoomed.to_viewport(point)) == pytest.approx(point)

    def test_zoom_in_keeps_cursor_point(self):
        """One wheel-in tick at (100, 100) keeps world (100, 100) under the cursor"""
        view = ViewTransform().zoom_at((100.0, 100.0), 1)
        assert view.scale == pytest.approx(1.1)
        assert view.to_world((100.0, 100.0)) == pytest.approx((100.0, 100.0))

    def test_zoom_out_divides(self, zoomed):
        """Wheel-out divides the scale and keeps the cursor point fixed"""
        before = zoomed.to_world((250.0, 80.0))
        view = zoomed.zoom_at((250.0, 80.0), -1)
        assert view.scale == pytest.approx(1.7 / config.ZOOM_FACTOR)
        assert view.to_world((250.0, 80.0)) == pytest.approx(before)

    def test_zoom_clamped(self):
        """Scale never leaves [MIN_SCALE, MAX_SCALE]"""
        view = ViewTransform()
        for _ in range(60):
            view = view.zoom_at((10.0, 10.0), 1)
        assert view.scale == config.MAX_SCALE
        for _ in range(120):
            view = view.zoom_at((10.0, 10.0), -1)
        assert view.scale == config.MIN_SCALE

    def test_pan_is_pure(self):
        """pan returns a new transform and leaves the original untouched"""
        view = ViewTransform(scale=2.0)
        panned = view.pan(30, -10)
        assert (panned.x, panned.y, panned.scale) == (30, -10, 2.0)
        assert (view.x, view.y) == (0.0, 0.0)

    def test_fit_to_centres_bounds(self):
        """fit_to centres the bounding box and fills the viewport minus margin"""
        view = ViewTransform.fit_to((0, 0, 100, 100), (300, 300), margin=50)
        assert view.scale == pytest.approx(2.0)
        assert view.to_world((150.0, 150.0)) == pytest.approx((50.0, 50.0))

    def test_reset(self, zoomed):
        """reset returns the identity transform"""
        assert zoomed.reset() == ViewTransform()
