"""
Plan editor facade.

Owns the history, the interaction controller and its state containers, and
exposes the operations the inspector panel and toolbar call. Every
successful inspector operation appends exactly one history step.

Lock rules: a locked room ignores geometry and stacking fields and refuses
feature edits, while name, colour and the lock flag itself can always be
changed.
"""

# Homeplan imports
from homeplan import config
from homeplan.geometry_utils import to_fraction, to_int
from homeplan.history import History
from homeplan.interaction import InteractionController, Selection, ToolState
from homeplan.models import (
    FEATURE_TYPES,
    WALLS,
    FeatureEdit,
    Plan,
    Room,
    RoomEdit,
    WallFeature,
    find_room,
    new_id,
    replace_room,
)
from homeplan import plan_io

# Standard library imports
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)


class PlanEditor:
    """
    Editing session over a room list.

    Args:
        rooms: Starting plan. Defaults to ``config.DEFAULT_ROOMS``.
        grid: Grid unit in world units.
        history_limit: Optional cap on stored undo steps.
    """

    def __init__(
        self,
        rooms:          Optional[Iterable[Room]]    = None,
        grid:           int                         = config.GRID_SIZE,
        history_limit:  Optional[int]               = None,
    ):
        initial = tuple(rooms) if rooms is not None else plan_io.plan_from_records(config.DEFAULT_ROOMS)
        self.grid                                   = grid
        self.history:       History                 = History(initial, limit=history_limit)
        self.tool:          ToolState               = ToolState()
        self.selection:     Selection               = Selection()
        self.controller:    InteractionController   = InteractionController(
            self.history, tool=self.tool, selection=self.selection, grid=grid,
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def rooms(self) -> Plan:
        return self.history.present

    @property
    def selected_room(self) -> Optional[Room]:
        return find_room(self.rooms, self.selection.room_id)

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def set_tool(self, mode: str) -> None:
        self.tool.set(mode)

    def select(self, room_id: Optional[str]) -> None:
        if room_id is not None and find_room(self.rooms, room_id) is None:
            logger.warning("Cannot select unknown room %s", room_id)
            return
        self.selection.room_id = room_id

    def undo(self) -> bool:
        self.controller.cancel()
        done = self.history.undo()
        self._drop_stale_selection()
        return done

    def redo(self) -> bool:
        self.controller.cancel()
        done = self.history.redo()
        self._drop_stale_selection()
        return done

    def _drop_stale_selection(self) -> None:
        if self.selection.room_id is not None and self.selected_room is None:
            self.selection.clear()

    def _commit(self, rooms: Plan) -> None:
        self.history.write(rooms)

    def _room_or_warn(self, room_id: str) -> Optional[Room]:
        room = find_room(self.rooms, room_id)
        if room is None:
            logger.warning("Unknown room %s", room_id)
        return room

    # -------------------------------------------------------------------------
    # Room edits
    # -------------------------------------------------------------------------

    def apply_room_edit(self, room_id: str, edit: RoomEdit) -> Optional[Room]:
        """
        Apply an inspector edit to one room as a single undo step.

        Numeric fields are coerced from raw form input: unreadable or negative
        values become 0, and width/height never go below one grid unit.
        On a locked room the position, size and stacking fields are dropped
        and only name, colour and the lock flag are applied.

        Returns:
            Room or None: The updated room, or None if the room is unknown,
            the edit was refused, or nothing changed.
        """
        self.controller.cancel()
        room = self._room_or_warn(room_id)
        if room is None:
            return None
        if room.locked and edit.touches_geometry:
            logger.warning("Room '%s' is locked; geometry and stacking edits ignored", room.name)
            edit = replace(edit, x=None, y=None, width=None, height=None, z_index=None)

        updated = room
        if edit.name is not None:
            updated = replace(updated, name=str(edit.name))
        if edit.color is not None:
            updated = replace(updated, color=str(edit.color))
        if edit.locked is not None:
            updated = replace(updated, locked=bool(edit.locked))
        if edit.x is not None:
            updated = replace(updated, x=to_int(edit.x, minimum=0))
        if edit.y is not None:
            updated = replace(updated, y=to_int(edit.y, minimum=0))
        if edit.width is not None:
            updated = replace(updated, width=to_int(edit.width, minimum=self.grid))
        if edit.height is not None:
            updated = replace(updated, height=to_int(edit.height, minimum=self.grid))
        if edit.z_index is not None:
            updated = replace(updated, z_index=to_int(edit.z_index, minimum=0))

        if updated == room:
            return None
        self._commit(replace_room(self.rooms, updated))
        return updated

    def delete_room(self, room_id: str) -> bool:
        self.controller.cancel()
        room = self._room_or_warn(room_id)
        if room is None:
            return False
        self._commit(tuple(r for r in self.rooms if r.id != room_id))
        if self.selection.room_id == room_id:
            self.selection.clear()
        logger.info("Deleted room '%s'", room.name)
        return True

    # -------------------------------------------------------------------------
    # Wall features
    # -------------------------------------------------------------------------

    def _editable_room(self, room_id: str) -> Optional[Room]:
        room = self._room_or_warn(room_id)
        if room is not None and room.locked:
            logger.warning("Room '%s' is locked; feature edits refused", room.name)
            return None
        return room

    def add_feature(self, room_id: str, feature_type: str) -> Optional[WallFeature]:
        """Add a door or window centred on the top wall with its default width."""
        if feature_type not in FEATURE_TYPES:
            raise ValueError(f"Unknown feature type '{feature_type}', expected one of {FEATURE_TYPES}")
        self.controller.cancel()
        room = self._editable_room(room_id)
        if room is None:
            return None
        feature = WallFeature(
            id=new_id(),
            type=feature_type,
            wall=config.DEFAULT_FEATURE_WALL,
            position=config.DEFAULT_FEATURE_POSITION,
            width=config.FEATURE_WIDTHS[feature_type],
        )
        self._commit(replace_room(self.rooms, replace(room, features=room.features + (feature,))))
        return feature

    def update_feature(self, room_id: str, feature_id: str, edit: FeatureEdit) -> Optional[WallFeature]:
        """Apply an explicit-field edit to one feature; position is clamped to [0, 1]."""
        if edit.type is not None and edit.type not in FEATURE_TYPES:
            raise ValueError(f"Unknown feature type '{edit.type}', expected one of {FEATURE_TYPES}")
        if edit.wall is not None and edit.wall not in WALLS:
            raise ValueError(f"Unknown wall '{edit.wall}', expected one of {WALLS}")

        self.controller.cancel()
        room = self._editable_room(room_id)
        if room is None:
            return None
        feature = room.find_feature(feature_id)
        if feature is None:
            logger.warning("Unknown feature %s in room '%s'", feature_id, room.name)
            return None

        updated = feature
        if edit.type is not None:
            updated = replace(updated, type=edit.type)
        if edit.wall is not None:
            updated = replace(updated, wall=edit.wall)
        if edit.position is not None:
            updated = replace(updated, position=to_fraction(edit.position))
        if edit.width is not None:
            updated = replace(updated, width=to_int(edit.width, minimum=1))

        if updated == feature:
            return None
        features = tuple(updated if f.id == feature_id else f for f in room.features)
        self._commit(replace_room(self.rooms, replace(room, features=features)))
        return updated

    def delete_feature(self, room_id: str, feature_id: str) -> bool:
        self.controller.cancel()
        room = self._editable_room(room_id)
        if room is None:
            return False
        if room.find_feature(feature_id) is None:
            logger.warning("Unknown feature %s in room '%s'", feature_id, room.name)
            return False
        features = tuple(f for f in room.features if f.id != feature_id)
        self._commit(replace_room(self.rooms, replace(room, features=features)))
        return True

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def load(self, path: Union[Path, str]) -> Plan:
        """
        Replace the plan with the contents of a file as one undo step.

        Raises:
            PlanFormatError: The file is malformed; the editor is left unchanged.
        """
        rooms = plan_io.load_plan(path)
        self.controller.cancel()
        self._commit(rooms)
        self.selection.clear()
        return rooms

    def save(self, path: Optional[Union[Path, str]] = None) -> Path:
        return plan_io.save_plan(self.rooms, path)

    def export_schedule(self, path: Optional[Union[Path, str]] = None) -> Path:
        return plan_io.export_room_schedule(self.rooms, path)
