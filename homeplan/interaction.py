"""
Pointer interaction state machine.

Turns a stream of pointer-down/move/up and wheel events into grid-aligned
room edits. The controller reads and replaces a small set of explicit state
containers:

    ToolState     current tool mode (select / draw), set by the toolbar
    Selection     id of the selected room, ephemeral UI state
    ActionState   the active interaction and its gesture data
    ViewTransform pan and zoom of the surface
    History       committed room-list snapshots

Interaction states:
    idle          nothing in progress
    panning       middle button, or primary button on empty canvas in select mode
    drawing       draw tool, live preview rectangle, committed on release
    moving        dragging an unlocked room by its body
    resizing      dragging a corner handle of the selected unlocked room

While a move or resize is in progress every pointer sample overwrites the
current history slot. Release restores the pre-drag snapshot into that slot
and appends the final state, so each drag is exactly one undo step.

Hit-testing is not done here: the rendering layer reports which room and
handle a pointer-down landed on as a ``Hit``.
"""

# Homeplan imports
from homeplan import config
from homeplan.geometry_utils import RESIZE_HANDLES, normalize_rect, resize_rect, snap_to_grid
from homeplan.history import History
from homeplan.models import Plan, Point, Room, find_room, new_id, replace_room
from homeplan.view_transform import ViewTransform

# Standard library imports
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Interaction states
IDLE        = "idle"
PANNING     = "panning"
DRAWING     = "drawing"
MOVING      = "moving"
RESIZING    = "resizing"

# Tool modes
SELECT      = "select"
DRAW        = "draw"
TOOL_MODES  = (SELECT, DRAW)

# Pointer buttons (same numbering as matplotlib's MouseButton)
PRIMARY     = 1
MIDDLE      = 2
SECONDARY   = 3


@dataclass(frozen=True)
class PointerEvent:
    """Pointer sample in viewport pixels."""

    x:      float
    y:      float
    button: int = PRIMARY

    @property
    def point(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class Hit:
    """What a pointer-down landed on, as reported by the rendering layer."""

    room_id:    Optional[str] = None
    handle:     Optional[str] = None

    def __post_init__(self):
        if self.handle is not None and self.handle not in RESIZE_HANDLES:
            raise ValueError(f"Unknown resize handle '{self.handle}'")


EMPTY_HIT = Hit()


@dataclass
class ToolState:
    mode: str = SELECT

    def set(self, mode: str) -> None:
        if mode not in TOOL_MODES:
            raise ValueError(f"Unknown tool mode '{mode}', expected one of {TOOL_MODES}")
        self.mode = mode


@dataclass
class Selection:
    room_id: Optional[str] = None

    def clear(self) -> None:
        self.room_id = None


@dataclass(frozen=True)
class ActionState:
    """
    The active interaction and the gesture data it needs.

    Attributes:
        kind (str): One of the interaction states.
        start (Point): Snapped draw start (drawing).
        end (Point): Snapped draw end, updated on every move (drawing).
        move_offset (Point): Pointer minus room top-left at pointer-down (moving).
        target_id (str): Room being moved or resized.
        handle (str): Dragged corner (resizing).
        dragging (bool): True once at least one move has been seen.
        origin (tuple): History snapshot current when the drag started.
        last_pointer (tuple): Last viewport position (panning).
        button (int): Button that started the interaction and must end it.
        preempted (ActionState): Interaction suspended by a middle-button pan.
    """

    kind:           str                             = IDLE
    start:          Optional[Point]                 = None
    end:            Optional[Point]                 = None
    move_offset:    Optional[Point]                 = None
    target_id:      Optional[str]                   = None
    handle:         Optional[str]                   = None
    dragging:       bool                            = False
    origin:         Optional[Plan]                  = None
    last_pointer:   Optional[Tuple[float, float]]   = None
    button:         int                             = PRIMARY
    preempted:      Optional["ActionState"]         = None


IDLE_ACTION = ActionState()


@dataclass
class Effects:
    """What changed while handling one event; the front end redraws accordingly."""

    history_written:    bool = False
    view_changed:       bool = False
    preview_changed:    bool = False
    selection_changed:  bool = False
    tool_changed:       bool = False

    @property
    def any(self) -> bool:
        return (self.history_written or self.view_changed or self.preview_changed
                or self.selection_changed or self.tool_changed)

    def merge(self, other: "Effects") -> "Effects":
        return Effects(
            history_written   = self.history_written or other.history_written,
            view_changed      = self.view_changed or other.view_changed,
            preview_changed   = self.preview_changed or other.preview_changed,
            selection_changed = self.selection_changed or other.selection_changed,
            tool_changed      = self.tool_changed or other.tool_changed,
        )


class InteractionController:
    """
    Event handler for the editing surface.

    Args:
        history: Committed room-list snapshots.
        tool: Tool mode container, shared with the toolbar.
        selection: Selection container, shared with the inspector.
        view: Initial view transform.
        grid: Grid unit in world units.
    """

    def __init__(
        self,
        history:    History,
        tool:       Optional[ToolState]     = None,
        selection:  Optional[Selection]     = None,
        view:       Optional[ViewTransform] = None,
        grid:       int                     = config.GRID_SIZE,
    ):
        self.history                        = history
        self.tool:          ToolState       = tool if tool is not None else ToolState()
        self.selection:     Selection       = selection if selection is not None else Selection()
        self.view:          ViewTransform   = view if view is not None else ViewTransform()
        self.grid:          int             = grid
        self.action:        ActionState     = IDLE_ACTION
        self._last_pointer: Optional[Tuple[float, float]] = None

    # -------------------------------------------------------------------------
    # State queries
    # -------------------------------------------------------------------------

    @property
    def state(self) -> str:
        return self.action.kind

    @property
    def rooms(self) -> Plan:
        return self.history.present

    @property
    def preview(self) -> Optional[Tuple[int, int, int, int]]:
        """Live drawing rectangle (x, y, width, height) in world units, or None."""
        action = self.action.preempted if self.action.kind == PANNING else self.action
        if action is None or action.kind != DRAWING:
            return None
        return normalize_rect((action.start.x, action.start.y), (action.end.x, action.end.y))

    def _world(self, event: PointerEvent) -> Point:
        wx, wy = self.view.to_world(event.point)
        return Point(wx, wy)

    def _snapped_world(self, event: PointerEvent) -> Point:
        world = self._world(event)
        return Point(snap_to_grid(world.x, self.grid), snap_to_grid(world.y, self.grid))

    # -------------------------------------------------------------------------
    # Pointer down
    # -------------------------------------------------------------------------

    def pointer_down(self, event: PointerEvent, hit: Hit = EMPTY_HIT) -> Effects:
        """Start an interaction. ``hit`` is what the rendering layer found under the pointer."""
        self._last_pointer = event.point

        if event.button == MIDDLE:
            if self.action.kind == PANNING:
                return Effects()
            preempted = self.action if self.action.kind != IDLE else None
            self.action = ActionState(kind=PANNING, last_pointer=event.point, button=MIDDLE, preempted=preempted)
            return Effects()

        if event.button != PRIMARY or self.action.kind != IDLE:
            return Effects()

        if self.tool.mode == DRAW:
            start = self._snapped_world(event)
            self.action = ActionState(kind=DRAWING, start=start, end=start)
            changed = self.selection.room_id is not None
            self.selection.clear()
            return Effects(preview_changed=True, selection_changed=changed)

        room = find_room(self.rooms, hit.room_id)
        if room is None:
            changed = self.selection.room_id is not None
            self.selection.clear()
            self.action = ActionState(kind=PANNING, last_pointer=event.point)
            return Effects(selection_changed=changed)

        if room.locked:
            logger.debug("Ignoring pointer-down on locked room '%s'", room.name)
            changed = self.selection.room_id != room.id
            self.selection.room_id = room.id
            return Effects(selection_changed=changed)

        if hit.handle is not None and self.selection.room_id == room.id:
            self.action = ActionState(kind=RESIZING, target_id=room.id, handle=hit.handle)
            return Effects()

        world = self._world(event)
        changed = self.selection.room_id != room.id
        self.selection.room_id = room.id
        self.action = ActionState(
            kind=MOVING,
            target_id=room.id,
            move_offset=world - Point(room.x, room.y),
        )
        return Effects(selection_changed=changed)

    # -------------------------------------------------------------------------
    # Pointer move
    # -------------------------------------------------------------------------

    def pointer_move(self, event: PointerEvent) -> Effects:
        self._last_pointer = event.point
        kind = self.action.kind

        if kind == PANNING:
            last_x, last_y = self.action.last_pointer
            self.view = self.view.pan(event.x - last_x, event.y - last_y)
            self.action = replace(self.action, last_pointer=event.point)
            return Effects(view_changed=True)

        if kind == DRAWING:
            end = self._snapped_world(event)
            if end == self.action.end:
                return Effects()
            self.action = replace(self.action, end=end)
            return Effects(preview_changed=True)

        if kind in (MOVING, RESIZING):
            return self._drag(event)

        return Effects()

    def _drag(self, event: PointerEvent) -> Effects:
        room = find_room(self.rooms, self.action.target_id)
        if room is None:
            logger.warning("Drag target %s no longer exists, abandoning drag", self.action.target_id)
            restored = self.action.dragging
            if restored:
                self.history.write(self.action.origin, overwrite=True)
            self.action = IDLE_ACTION
            return Effects(history_written=restored)

        if not self.action.dragging:
            self.action = replace(self.action, dragging=True, origin=self.rooms)

        world = self._world(event)
        if self.action.kind == MOVING:
            offset = self.action.move_offset
            x = snap_to_grid(world.x - offset.x, self.grid)
            y = snap_to_grid(world.y - offset.y, self.grid)
            updated = room.with_rect(x, y, room.width, room.height)
        else:
            updated = room.with_rect(*resize_rect(room.rect, self.action.handle, (world.x, world.y), self.grid))

        self.history.write(replace_room(self.rooms, updated), overwrite=True)
        return Effects(history_written=True)

    # -------------------------------------------------------------------------
    # Pointer up / leave / cancel
    # -------------------------------------------------------------------------

    def pointer_up(self, event: PointerEvent) -> Effects:
        """Finish the active interaction."""
        self._last_pointer = event.point
        action = self.action

        if action.kind == PANNING:
            if event.button == action.button:
                self.action = action.preempted or IDLE_ACTION
                return Effects()
            if event.button == PRIMARY and action.preempted is not None:
                # Primary released while its gesture was suspended by a pan
                self.action = action.preempted
                return self.pointer_up(event)
            return Effects()

        if event.button != PRIMARY:
            return Effects()

        if action.kind == DRAWING:
            return self._finish_draw(event)

        if action.kind in (MOVING, RESIZING):
            self.action = IDLE_ACTION
            if not action.dragging:
                return Effects()
            final = self.rooms
            self.history.write(action.origin, overwrite=True)
            self.history.write(final)
            logger.info("%s room %s", "Moved" if action.kind == MOVING else "Resized", action.target_id)
            return Effects(history_written=True)

        return Effects()

    def pointer_leave(self) -> Effects:
        """Pointer left the surface: treated as a release at the last known position."""
        return self.cancel()

    def cancel(self) -> Effects:
        """Release everything in progress, e.g. when the window loses focus."""
        if self.action.kind == IDLE:
            return Effects()
        x, y = self._last_pointer if self._last_pointer is not None else (0.0, 0.0)
        effects = Effects()
        while self.action.kind != IDLE:
            effects = effects.merge(self.pointer_up(PointerEvent(x, y, self.action.button)))
        return effects

    def _finish_draw(self, event: PointerEvent) -> Effects:
        start = self.action.start
        end = self._snapped_world(event)
        self.action = IDLE_ACTION
        self.tool.set(SELECT)

        x, y, width, height = normalize_rect((start.x, start.y), (end.x, end.y))
        if width < self.grid or height < self.grid:
            logger.debug("Discarded undersized room %dx%d", width, height)
            return Effects(preview_changed=True, tool_changed=True)

        rooms = self.rooms
        max_z = max((r.z_index for r in rooms), default=-1)
        room = Room(
            id=new_id(),
            x=x,
            y=y,
            width=width,
            height=height,
            name=f"Room {len(rooms) + 1}",
            color=config.ROOM_COLORS[len(rooms) % len(config.ROOM_COLORS)],
            z_index=max_z + 1,
        )
        self.history.write(rooms + (room,))
        self.selection.room_id = room.id
        logger.info("Created %s at (%d, %d) size %dx%d", room.name, x, y, width, height)
        return Effects(history_written=True, preview_changed=True, selection_changed=True, tool_changed=True)

    # -------------------------------------------------------------------------
    # Wheel
    # -------------------------------------------------------------------------

    def wheel(self, point: Tuple[float, float], direction: float) -> Effects:
        """Zoom one tick around ``point``; positive ``direction`` zooms in."""
        view = self.view.zoom_at(point, direction)
        changed = view != self.view
        self.view = view
        return Effects(view_changed=changed)
