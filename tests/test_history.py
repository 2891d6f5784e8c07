# Homeplan imports
from homeplan.history import History

# Third-party imports
import pytest


class TestHistory:
    """Test suite for the undo/redo History store"""

    @pytest.fixture
    def history(self):
        """History with three appended snapshots: 0 -> 1 -> 2"""
        h = History(0)
        h.write(1)
        h.write(2)
        return h

    def test_initial_state(self):
        """A new history holds one snapshot and cannot undo or redo"""
        h = History("start")
        assert h.present == "start"
        assert len(h) == 1
        assert not h.can_undo
        assert not h.can_redo

    def test_append_advances(self, history):
        """Appending moves the index to the new last slot"""
        assert history.present == 2
        assert history.index == 2
        assert len(history) == 3

    def test_undo_redo(self, history):
        """undo and redo walk the index within bounds"""
        assert history.undo()
        assert history.present == 1
        assert history.can_redo
        assert history.redo()
        assert history.present == 2
        assert not history.redo()

    def test_undo_at_start_is_noop(self):
        """undo at index 0 does nothing"""
        h = History("only")
        assert not h.undo()
        assert h.present == "only"

    def test_append_after_undo_discards_future(self, history):
        """A new branch drops the redoable future"""
        history.undo()
        history.undo()
        history.write(9)
        assert len(history) == 2
        assert history.present == 9
        assert not history.can_redo

    def test_overwrite_replaces_in_place(self, history):
        """Overwrite keeps length and index and leaves other entries alone"""
        history.undo()
        history.write(7, overwrite=True)
        assert len(history) == 3
        assert history.index == 1
        assert history.present == 7
        history.undo()
        assert history.present == 0
        history.redo()
        history.redo()
        assert history.present == 2

    def test_undo_redo_reproduces_state_at_any_depth(self):
        """undo followed by redo restores the state prior to the undo"""
        h = History(0)
        for value in range(1, 8):
            h.write(value)
        for _ in range(7):
            before = h.present
            h.undo()
            h.redo()
            assert h.present == before
            h.undo()

    def test_limit_drops_oldest(self):
        """With a limit, the oldest snapshots are dropped"""
        h = History(0, limit=3)
        for value in (1, 2, 3):
            h.write(value)
        assert len(h) == 3
        assert h.present == 3
        h.undo()
        h.undo()
        assert h.present == 1
        assert not h.can_undo

    def test_invalid_limit(self):
        """A limit below one is rejected"""
        with pytest.raises(ValueError):
            History(0, limit=0)

