"""
Interactive floor plan editor window.

Draws rooms, doors and windows on a pannable, zoomable grid and forwards
matplotlib mouse events into the interaction controller. Hit-testing of
rooms and resize handles happens here, against what is drawn.

Controls:
    Left-drag room      Move room (select tool)
    Left-drag corner    Resize selected room
    Left-drag empty     Pan (select tool) / draw room (draw tool)
    Middle-drag         Pan (any tool)
    Scroll              Zoom centred on cursor
    v / n               Select tool / draw (new room) tool
    ctrl+z / ctrl+y     Undo / redo
    delete              Delete selected room
    k                   Toggle lock on selected room
    d / w               Add door / window to selected room
    ctrl+s / ctrl+o     Save / load plan
    e                   Export room schedule CSV
    f / 0               Fit plan to window / reset zoom
"""

# fmt: off
# autopep8: off

# Standard library imports
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party imports
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from matplotlib.widgets import Button, TextBox
import numpy as np

# Homeplan imports
from homeplan import config
from homeplan.geometry_utils import RESIZE_HANDLES, darken_color, feature_span, rooms_bounds
from homeplan.interaction import DRAW, SELECT, Effects, Hit, PointerEvent
from homeplan.models import RoomEdit
from homeplan.plan_editor import PlanEditor
from homeplan.plan_io import PlanFormatError
from homeplan.view_transform import ViewTransform

logger = logging.getLogger(__name__)

# Default matplotlib shortcuts that collide with the editor's own
_CLEARED_KEYMAPS = ('keymap.save', 'keymap.fullscreen', 'keymap.home', 'keymap.back',
                    'keymap.forward', 'keymap.pan', 'keymap.zoom', 'keymap.yscale',
                    'keymap.xscale', 'keymap.quit')


class PlanCanvas:
    """Matplotlib window around a ``PlanEditor``.

    Args:
        editor: Editing session to display. A new one with the default rooms is
            created when omitted.
        plan_path: File used by save/load shortcuts.
    """

    _WINDOW_TITLE = "Home Plan Modeler"

    def __init__(
        self,
        editor:     Optional[PlanEditor]        = None,
        plan_path:  Optional[Union[Path, str]]  = None,
    ):
        self.editor                                 = editor if editor is not None else PlanEditor()
        self.plan_path                              = Path(plan_path) if plan_path else config.PLAN_PATH
        self.fig                                    = None
        self.ax                                     = None
        self.status_text                            = None
        self.name_box:          Optional[TextBox]   = None
        self._syncing_name:     bool                = False

    @property
    def controller(self):
        return self.editor.controller

    # -------------------------------------------------------------------------
    # Window setup
    # -------------------------------------------------------------------------

    def build(self, figsize: Tuple[float, float] = (14, 8)):
        """Create the figure, axes, side panel and event connections without showing them."""
        for key in _CLEARED_KEYMAPS:
            if key in plt.rcParams:
                plt.rcParams[key] = []

        self.fig = plt.figure(figsize=figsize, facecolor='#F5F5F0')
        try:
            self.fig.canvas.manager.set_window_title(self._WINDOW_TITLE)
        except AttributeError:
            pass

        self.ax = self.fig.add_axes((0.02, 0.05, 0.74, 0.90))
        self.ax.set_facecolor('white')
        self._setup_side_panel()

        self.fig.canvas.mpl_connect('button_press_event',   self._on_press)
        self.fig.canvas.mpl_connect('motion_notify_event',  self._on_motion)
        self.fig.canvas.mpl_connect('button_release_event', self._on_release)
        self.fig.canvas.mpl_connect('scroll_event',         self._on_scroll)
        self.fig.canvas.mpl_connect('axes_leave_event',     self._on_leave)
        self.fig.canvas.mpl_connect('figure_leave_event',   self._on_leave)
        self.fig.canvas.mpl_connect('close_event',          self._on_close)
        self.fig.canvas.mpl_connect('key_press_event',      self._on_key_press)

        self._render()
        return self.fig

    def launch(self):
        """Open the interactive editor window."""
        self.build()
        print("\n=== Home Plan Modeler ===")
        print(f"{len(self.editor.rooms)} room(s) loaded, plan file: {self.plan_path}")
        print("Drag: move/pan | n: draw room | v: select | Scroll: zoom | ctrl+z/ctrl+y: undo/redo")
        print("=========================\n")
        plt.show()

    def _setup_side_panel(self):
        pl, pw = 0.79, 0.19

        ax_title = self.fig.add_axes((pl, 0.90, pw, 0.05))
        ax_title.axis('off')
        ax_title.text(0, 0.5, "Properties", fontsize=12, fontweight='bold')

        ax_name = self.fig.add_axes((pl + 0.05, 0.83, pw - 0.05, 0.04))
        self.name_box = TextBox(ax_name, 'Name ', initial='')
        self.name_box.on_submit(self._on_name_submit)

        buttons = [
            ('Select (v)',   0.76, lambda e: self._set_tool(SELECT)),
            ('Draw (n)',     0.70, lambda e: self._set_tool(DRAW)),
            ('Undo',         0.64, lambda e: self._undo()),
            ('Redo',         0.58, lambda e: self._redo()),
            ('Lock / Unlock', 0.52, lambda e: self._toggle_lock()),
            ('Add Door',     0.46, lambda e: self._add_feature('door')),
            ('Add Window',   0.40, lambda e: self._add_feature('window')),
            ('Delete Room',  0.34, lambda e: self._delete_selected()),
            ('Save',         0.28, lambda e: self._save()),
            ('Load',         0.22, lambda e: self._load()),
            ('Export CSV',   0.16, lambda e: self._export()),
        ]
        self._buttons = []
        for label, y, callback in buttons:
            btn = Button(self.fig.add_axes((pl, y, pw, 0.05)), label)
            btn.on_clicked(callback)
            self._buttons.append(btn)

        ax_status = self.fig.add_axes((pl, 0.06, pw, 0.06))
        ax_status.axis('off')
        self.status_text = ax_status.text(0, 0.5, "Status: ready", fontsize=9, color='blue', wrap=True)

    # -------------------------------------------------------------------------
    # Coordinates and hit-testing
    # -------------------------------------------------------------------------

    def viewport_size(self) -> Tuple[float, float]:
        bbox = self.ax.bbox
        return float(bbox.width), float(bbox.height)

    def to_viewport(self, display_x: float, display_y: float) -> Tuple[float, float]:
        """Matplotlib display pixels (origin bottom-left) to surface pixels (origin top-left)."""
        bbox = self.ax.bbox
        return display_x - bbox.x0, bbox.y1 - display_y

    def hit_test(self, vx: float, vy: float) -> Hit:
        """
        Find what is under a viewport point.

        Resize handles of the selected unlocked room are checked first, then
        room bodies from the top of the draw order down.
        """
        view  = self.controller.view
        rooms = self.editor.rooms

        selected = self.editor.selected_room
        if selected is not None and not selected.locked:
            corners = np.array([
                view.to_viewport((selected.x,     selected.y)),
                view.to_viewport((selected.right, selected.y)),
                view.to_viewport((selected.x,     selected.bottom)),
                view.to_viewport((selected.right, selected.bottom)),
            ])
            half = config.HANDLE_SIZE_PX / 2
            inside = (np.abs(corners[:, 0] - vx) <= half) & (np.abs(corners[:, 1] - vy) <= half)
            if inside.any():
                handle = RESIZE_HANDLES[int(np.argmax(inside))]
                return Hit(room_id=selected.id, handle=handle)

        if not rooms:
            return Hit()
        wx, wy = view.to_world((vx, vy))
        rects  = np.array([r.rect for r in rooms], dtype=float)
        inside = ((rects[:, 0] <= wx) & (wx <= rects[:, 0] + rects[:, 2]) &
                  (rects[:, 1] <= wy) & (wy <= rects[:, 1] + rects[:, 3]))
        if not inside.any():
            return Hit()
        # Topmost: highest z, later in list wins ties
        order = sorted(np.flatnonzero(inside), key=lambda i: (rooms[i].z_index, i))
        return Hit(room_id=rooms[order[-1]].id)

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def _pointer(self, event) -> Optional[PointerEvent]:
        if event.x is None or event.y is None:
            return None
        vx, vy = self.to_viewport(event.x, event.y)
        return PointerEvent(vx, vy, int(event.button) if event.button is not None else 0)

    def _on_press(self, event):
        if event.inaxes != self.ax:
            return
        pointer = self._pointer(event)
        if pointer is None:
            return
        self._apply(self.controller.pointer_down(pointer, self.hit_test(pointer.x, pointer.y)))

    def _on_motion(self, event):
        pointer = self._pointer(event)
        if pointer is None:
            return
        self._apply(self.controller.pointer_move(pointer))

    def _on_release(self, event):
        pointer = self._pointer(event)
        if pointer is None:
            return
        self._apply(self.controller.pointer_up(pointer))

    def _on_leave(self, event):
        self._apply(self.controller.pointer_leave())

    def _on_close(self, event):
        self.controller.cancel()

    def _on_scroll(self, event):
        if event.inaxes != self.ax:
            return
        vx, vy = self.to_viewport(event.x, event.y)
        direction = 1 if event.button == 'up' else -1
        self._apply(self.controller.wheel((vx, vy), direction))

    def _on_key_press(self, event):
        """Handle keyboard shortcuts."""
        if self.name_box is not None and self.name_box.capturekeystrokes:
            return
        key = event.key
        if key == 'v':
            self._set_tool(SELECT)
        elif key == 'n':
            self._set_tool(DRAW)
        elif key == 'ctrl+z':
            self._undo()
        elif key in ('ctrl+y', 'ctrl+Z', 'ctrl+shift+z'):
            self._redo()
        elif key in ('delete', 'backspace'):
            self._delete_selected()
        elif key == 'k':
            self._toggle_lock()
        elif key == 'd':
            self._add_feature('door')
        elif key == 'w':
            self._add_feature('window')
        elif key == 'ctrl+s':
            self._save()
        elif key == 'ctrl+o':
            self._load()
        elif key == 'e':
            self._export()
        elif key == 'f':
            self._fit_view()
        elif key == '0':
            self.controller.view = ViewTransform.reset()
            self._render()
        elif key == 'escape':
            self.controller.cancel()
            self.editor.select(None)
            self._render()

    # -------------------------------------------------------------------------
    # Toolbar / inspector actions
    # -------------------------------------------------------------------------

    def _set_tool(self, mode: str):
        self.editor.set_tool(mode)
        self._update_status(f"Tool: {mode}", 'blue')
        self._render()

    def _undo(self):
        if self.editor.undo():
            self._update_status("Undo", 'blue')
        else:
            self._update_status("Nothing to undo", 'orange')
        self._render()

    def _redo(self):
        if self.editor.redo():
            self._update_status("Redo", 'blue')
        else:
            self._update_status("Nothing to redo", 'orange')
        self._render()

    def _require_selection(self):
        room = self.editor.selected_room
        if room is None:
            self._update_status("Select a room first", 'orange')
        return room

    def _toggle_lock(self):
        room = self._require_selection()
        if room is None:
            return
        self.editor.apply_room_edit(room.id, RoomEdit(locked=not room.locked))
        self._update_status(f"{'Unlocked' if room.locked else 'Locked'} '{room.name}'", 'green')
        self._render()

    def _add_feature(self, feature_type: str):
        room = self._require_selection()
        if room is None:
            return
        if self.editor.add_feature(room.id, feature_type) is None:
            self._update_status(f"'{room.name}' is locked", 'red')
        else:
            self._update_status(f"Added {feature_type} to '{room.name}'", 'green')
        self._render()

    def _delete_selected(self):
        room = self._require_selection()
        if room is None:
            return
        self.editor.delete_room(room.id)
        self._update_status(f"Deleted '{room.name}'", 'green')
        self._render()

    def _on_name_submit(self, text):
        if self._syncing_name:
            return
        room = self.editor.selected_room
        if room is None or text == room.name:
            return
        self.editor.apply_room_edit(room.id, RoomEdit(name=text))
        self._update_status(f"Renamed to '{text}'", 'green')
        self._render()

    def _save(self):
        path = self.editor.save(self.plan_path)
        self._update_status(f"Saved to {path.name}", 'green')
        print(f"Plan saved to {path}")

    def _load(self):
        if not self.plan_path.exists():
            self._update_status(f"No plan file at {self.plan_path.name}", 'orange')
            return
        try:
            rooms = self.editor.load(self.plan_path)
        except (PlanFormatError, OSError) as exc:
            logger.error("Failed to load %s: %s", self.plan_path, exc)
            self._update_status(PlanFormatError.USER_MESSAGE, 'red')
            return
        self._update_status(f"Loaded {len(rooms)} rooms", 'green')
        self._fit_view()

    def _export(self):
        path = self.editor.export_schedule()
        self._update_status(f"Exported {path.name}", 'green')
        print(f"Room schedule exported to {path}")

    def _fit_view(self):
        bounds = rooms_bounds(self.editor.rooms)
        self.controller.view = ViewTransform.fit_to(bounds, self.viewport_size()) if bounds else ViewTransform.reset()
        self._render()

    def _update_status(self, message: str, color: str = 'blue'):
        if self.status_text is not None:
            self.status_text.set_text(f"Status: {message}")
            self.status_text.set_color(color)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _apply(self, effects: Effects):
        if effects.any:
            self._render()

    def _render(self):
        """Redraw the grid, rooms, features, handles and drawing preview."""
        if self.ax is None:
            return
        view = self.controller.view
        width, height = self.viewport_size()
        left, top     = view.to_world((0.0, 0.0))
        right, bottom = view.to_world((width, height))

        self.ax.clear()
        self.ax.set_xlim(left, right)
        self.ax.set_ylim(bottom, top)
        self.ax.set_aspect('auto')
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        self._draw_grid(left, top, right, bottom)
        for room in sorted(self.editor.rooms, key=lambda r: r.z_index):
            self._draw_room(room)
        self._draw_handles()

        preview = self.controller.preview
        if preview is not None:
            x, y, w, h = preview
            self.ax.add_patch(Rectangle((x, y), w, h, fill=True, facecolor='#3B82F6', alpha=0.2,
                                        edgecolor='#3B82F6', linestyle='--', linewidth=2, zorder=10000))

        self._sync_name_box()
        tool = self.editor.tool.mode
        self.ax.set_title(f"Tool: {tool}  |  zoom {view.scale:.2f}x  |  "
                          f"undo {'on' if self.editor.can_undo else 'off'} / redo {'on' if self.editor.can_redo else 'off'}",
                          fontsize=10)
        self.fig.canvas.draw_idle()

    def _draw_grid(self, left, top, right, bottom):
        grid = self.editor.grid
        if grid * self.controller.view.scale < 6:
            return
        xs = np.arange(np.floor(left / grid) * grid, right + grid, grid)
        ys = np.arange(np.floor(top / grid) * grid, bottom + grid, grid)
        self.ax.vlines(xs, top, bottom, colors='#EEEEEE', linewidth=0.5, zorder=0)
        self.ax.hlines(ys, left, right, colors='#EEEEEE', linewidth=0.5, zorder=0)

    def _draw_room(self, room):
        selected = room.id == self.editor.selection.room_id
        edge = '#3B82F6' if selected else darken_color(room.color)
        z = 1 + room.z_index
        self.ax.add_patch(Rectangle((room.x, room.y), room.width, room.height,
                                    facecolor=room.color, edgecolor=edge,
                                    linewidth=2.5 if selected else 1.5, zorder=z))
        for feature in room.features:
            (x0, y0), (x1, y1) = feature_span(room, feature)
            self.ax.plot([x0, x1], [y0, y1], color=config.FEATURE_COLORS[feature.type],
                         linewidth=max(2.0, 6 * self.controller.view.scale), solid_capstyle='butt', zorder=z + 0.5)
        label = f"{room.name}\n{room.width} x {room.height}"
        if room.locked:
            label = f"[locked] {label}"
        self.ax.text(room.x + room.width / 2, room.y + room.height / 2, label,
                     ha='center', va='center', fontsize=8, clip_on=True, zorder=z + 0.6)

    def _draw_handles(self):
        room = self.editor.selected_room
        if room is None or room.locked:
            return
        size = config.HANDLE_SIZE_PX / self.controller.view.scale
        for cx, cy in ((room.x, room.y), (room.right, room.y), (room.x, room.bottom), (room.right, room.bottom)):
            self.ax.add_patch(Rectangle((cx - size / 2, cy - size / 2), size, size,
                                        facecolor='#3B82F6', edgecolor='white', zorder=room.z_index + 2))

    def _sync_name_box(self):
        if self.name_box is None:
            return
        room = self.editor.selected_room
        text = room.name if room is not None else ''
        if self.name_box.text != text:
            self._syncing_name = True
            try:
                self.name_box.set_val(text)
            finally:
                self._syncing_name = False
