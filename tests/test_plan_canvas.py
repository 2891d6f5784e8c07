# Standard library imports
from types import SimpleNamespace

# Third-party imports
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

# Homeplan imports
from homeplan.interaction import DRAW, IDLE
from homeplan.plan_canvas import PlanCanvas
from homeplan.plan_editor import PlanEditor


@pytest.fixture
def canvas():
    """Built (but not shown) canvas over the default plan"""
    canvas = PlanCanvas(PlanEditor())
    canvas.build(figsize=(10, 6))
    yield canvas
    plt.close(canvas.fig)


def mouse(canvas, vx, vy, button=1, in_axes=True):
    """Fake matplotlib mouse event at a surface (viewport) position"""
    bbox = canvas.ax.bbox
    return SimpleNamespace(
        x=bbox.x0 + vx,
        y=bbox.y1 - vy,
        button=button,
        inaxes=canvas.ax if in_axes else None,
    )


class TestCoordinates:
    """Display to surface coordinate mapping"""

    def test_axes_top_left_is_origin(self, canvas):
        """The top-left corner of the plot area is surface (0, 0)"""
        bbox = canvas.ax.bbox
        assert canvas.to_viewport(bbox.x0, bbox.y1) == pytest.approx((0.0, 0.0))

    def test_y_axis_points_down(self, canvas):
        """Surface y grows downwards"""
        bbox = canvas.ax.bbox
        assert canvas.to_viewport(bbox.x0 + 5, bbox.y1 - 20) == pytest.approx((5.0, 20.0))


class TestHitTest:
    """Rendering-layer hit-testing"""

    def test_room_body(self, canvas):
        """Points inside a room hit that room"""
        assert canvas.hit_test(100, 100).room_id == "living-room-1"
        assert canvas.hit_test(400, 100).room_id == "kitchen-1"

    def test_empty_canvas(self, canvas):
        """Points outside every room hit nothing"""
        assert canvas.hit_test(10, 10).room_id is None

    def test_overlap_prefers_higher_z(self, canvas):
        """On a shared edge the room drawn on top wins"""
        assert canvas.hit_test(350, 100).room_id == "kitchen-1"

    def test_handle_of_selected_room(self, canvas):
        """Corner handles are reported only for the selected room"""
        assert canvas.hit_test(350, 250).handle is None
        canvas.editor.select("living-room-1")
        hit = canvas.hit_test(352, 248)
        assert (hit.room_id, hit.handle) == ("living-room-1", "bottom-right")

    def test_hit_test_follows_view(self, canvas):
        """Hit-testing uses the current pan and zoom"""
        canvas.controller.view = canvas.controller.view.pan(100, 0)
        assert canvas.hit_test(100, 100).room_id is None
        assert canvas.hit_test(200, 100).room_id == "living-room-1"


class TestEvents:
    """Matplotlib events routed through the controller"""

    def test_drag_room(self, canvas):
        """Press, move and release move the room by a snapped delta"""
        canvas._on_press(mouse(canvas, 100, 100))
        canvas._on_motion(mouse(canvas, 123, 117))
        canvas._on_release(mouse(canvas, 123, 117))
        room = canvas.editor.rooms[0]
        assert (room.x, room.y) == (70, 70)
        assert len(canvas.editor.history) == 2

    def test_press_outside_axes_ignored(self, canvas):
        """Presses on the side panel do not start interactions"""
        canvas._on_press(mouse(canvas, 100, 100, in_axes=False))
        assert canvas.controller.state == IDLE

    def test_leave_releases_drag(self, canvas):
        """Leaving the plot area ends the drag"""
        canvas._on_press(mouse(canvas, 100, 100))
        canvas._on_motion(mouse(canvas, 160, 100))
        canvas._on_leave(None)
        assert canvas.controller.state == IDLE
        assert len(canvas.editor.history) == 2

    def test_draw_with_keyboard_tool(self, canvas):
        """'n' selects the draw tool and a drag creates a room"""
        canvas._on_key_press(SimpleNamespace(key='n'))
        assert canvas.editor.tool.mode == DRAW
        canvas._on_press(mouse(canvas, 20, 300))
        canvas._on_motion(mouse(canvas, 90, 380))
        canvas._on_release(mouse(canvas, 90, 380))
        assert canvas.editor.rooms[-1].rect == (20, 300, 70, 80)

    def test_scroll_zooms_around_cursor(self, canvas):
        """Scrolling up zooms in around the pointer"""
        event = mouse(canvas, 100, 100)
        event.button = 'up'
        canvas._on_scroll(event)
        view = canvas.controller.view
        assert view.scale == pytest.approx(1.1)
        assert view.to_world((100.0, 100.0)) == pytest.approx((100.0, 100.0))

    def test_undo_key(self, canvas):
        """ctrl+z undoes the last step"""
        canvas.editor.delete_room("kitchen-1")
        canvas._on_key_press(SimpleNamespace(key='ctrl+z'))
        assert len(canvas.editor.rooms) == 2
