"""
Linear undo/redo history over immutable snapshots.

Two write modes are supported. An append write discards any redoable future
and pushes a new snapshot. An overwrite write replaces the current snapshot
in place; it is used while a drag is in progress so that a whole drag
collapses into a single undo step.
"""

# Standard library imports
import logging
from typing import Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class History(Generic[T]):
    """
    Ordered sequence of snapshots with a current index.

    Args:
        initial: The first snapshot.
        limit: Optional maximum number of stored snapshots. When exceeded the
            oldest entries are dropped. None keeps everything.
    """

    def __init__(self, initial: T, limit: Optional[int] = None):
        if limit is not None and limit < 1:
            raise ValueError("History limit must be at least 1")
        self._entries:  List[T]         = [initial]
        self._index:    int             = 0
        self._limit:    Optional[int]   = limit

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def present(self) -> T:
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def write(self, snapshot: T, overwrite: bool = False) -> None:
        """Append ``snapshot`` as a new step, or replace the current one when ``overwrite``."""
        if overwrite:
            self._entries[self._index] = snapshot
            return

        del self._entries[self._index + 1:]
        self._entries.append(snapshot)
        if self._limit is not None and len(self._entries) > self._limit:
            dropped = len(self._entries) - self._limit
            del self._entries[:dropped]
            logger.debug("History limit %d reached, dropped %d oldest step(s)", self._limit, dropped)
        self._index = len(self._entries) - 1

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when already at the oldest."""
        if not self.can_undo:
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when already at the newest."""
        if not self.can_redo:
            return False
        self._index += 1
        return True
