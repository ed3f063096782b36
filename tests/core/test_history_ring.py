"""Tests for the statement history ring."""

from __future__ import annotations

import pytest

from neorepl.core.history import HistoryRing


class TestHistoryRing:
    """Tests for HistoryRing."""

    def test_len_counts_entries(self):
        """len() is the number of appended entries up to capacity."""
        hist = HistoryRing(size=3)
        for i in range(3):
            hist.append([str(i)])
        assert len(hist) == 3

    def test_eviction_past_capacity(self):
        """Appending beyond capacity evicts the oldest entry."""
        hist = HistoryRing(size=2)
        for line in ("a", "b", "c"):
            hist.append([line])
        assert len(hist) == 2
        assert hist.entries() == [["b"], ["c"]]

    def test_back_and_forth_restores_live_edit(self):
        """One step back and one forward returns the draft."""
        hist = HistoryRing()
        hist.append(["x = 1"])
        assert hist.move(True, ["draft", "\\more"]) == ["x = 1"]
        assert hist.move(False, ["x = 1"]) == ["draft", "\\more"]

    def test_walk_full_history(self):
        """Backward moves walk from newest to oldest and stop there."""
        hist = HistoryRing()
        hist.append(["a"])
        hist.append(["b"])

        assert hist.move(True, ["draft"]) == ["b"]
        assert hist.move(True, ["b"]) == ["a"]
        assert hist.move(True, ["a"]) == ["a"]
        assert hist.pos == 2

        assert hist.move(False, ["a"]) == ["b"]
        assert hist.move(False, ["b"]) == ["draft"]
        assert hist.pos == 0

    def test_forward_at_live_edit_is_noop(self):
        """Moving forward without history navigation returns the input."""
        hist = HistoryRing()
        hist.append(["a"])
        assert hist.move(False, ["typing"]) == ["typing"]

    def test_backward_on_empty_ring(self):
        """An empty ring hands the current lines back."""
        hist = HistoryRing()
        assert hist.move(True, ["x"]) == ["x"]
        assert hist.pos == 0

    def test_append_resets_position(self):
        """Submitting a statement returns to the live edit."""
        hist = HistoryRing()
        hist.append(["a"])
        hist.move(True, [""])
        hist.append(["b"])
        assert hist.pos == 0

    def test_entries_are_copies(self):
        """Mutating a returned entry does not touch the ring."""
        hist = HistoryRing()
        hist.append(["a"])
        hist.move(True, [""]).append("changed")
        assert hist.entries() == [["a"]]

    def test_invalid_size(self):
        """A ring needs room for at least one entry."""
        with pytest.raises(ValueError):
            HistoryRing(size=0)
