"""
Tests for current/previous pointer tracking.
"""

import os
import pytest

from nimswitch.toolchain.store import VersionEntry, VersionStore
from nimswitch.toolchain.tracker import PointerState, VersionTracker

pytestmark = pytest.mark.posix


@pytest.fixture
def store(populated_store):
    return VersionStore(populated_store)


@pytest.fixture
def tracker(store):
    return VersionTracker(store)


class TestActivate:
    def test_first_activation(self, store, tracker):
        changed = tracker.activate(store.get("2.0.8"))

        assert changed is True
        assert tracker.state() == PointerState(current="nim-2.0.8", previous=None)
        assert not (store.root / "prev").is_symlink()

    def test_pointers_are_relative(self, store, tracker):
        tracker.activate(store.get("2.0.8"))

        assert os.readlink(store.root / "current") == "nim-2.0.8"
        assert (store.root / "current" / "bin" / "nim").exists()

    def test_switch_records_previous(self, store, tracker):
        tracker.activate(store.get("2.0.8"))
        tracker.activate(store.get("2.2.0"))

        assert tracker.current().name == "nim-2.2.0"
        assert tracker.previous().name == "nim-2.0.8"

    def test_reactivating_keeps_previous(self, store, tracker):
        tracker.activate(store.get("2.0.8"))
        tracker.activate(store.get("2.2.0"))

        changed = tracker.activate(store.get("2.2.0"))

        assert changed is False
        assert tracker.state() == PointerState("nim-2.2.0", "nim-2.0.8")

    def test_toggle_back_and_forth(self, store, tracker):
        tracker.activate(store.get("2.0.8"))
        tracker.activate(store.get("2.2.0"))

        tracker.activate(tracker.previous())

        assert tracker.state() == PointerState("nim-2.0.8", "nim-2.2.0")

    def test_dangling_current_keeps_previous(self, store, tracker):
        tracker.activate(store.get("2.0.0"))
        tracker.activate(store.get("2.0.8"))
        (store.root / "current").unlink()
        os.symlink("nim-9.9.9", store.root / "current")

        tracker.activate(store.get("2.2.0"))

        assert tracker.state() == PointerState("nim-2.2.0", "nim-2.0.0")
        assert tracker.previous().name == "nim-2.0.0"

    def test_dangling_current_without_previous(self, store, tracker):
        os.symlink("nim-9.9.9", store.root / "current")

        tracker.activate(store.get("2.2.0"))

        assert tracker.state() == PointerState(current="nim-2.2.0", previous=None)

    def test_rejects_unavailable_entry(self, store, tracker, tmp_path):
        os.symlink(tmp_path / "gone", store.root / "nim-local")

        with pytest.raises(ValueError):
            tracker.activate(store.get("local"))
        assert tracker.state() == PointerState()

    def test_rejects_foreign_entry(self, tracker, tmp_path):
        foreign = tmp_path / "elsewhere" / "nim-2.2.0"
        foreign.mkdir(parents=True)

        with pytest.raises(ValueError):
            tracker.activate(VersionEntry("2.2.0", foreign))


class TestReadPointers:
    def test_empty(self, tracker):
        assert tracker.current() is None
        assert tracker.previous() is None

    def test_dangling_pointer_is_unset(self, store, tracker):
        os.symlink("nim-9.9.9", store.root / "current")

        assert tracker.state().current == "nim-9.9.9"
        assert tracker.current() is None

    def test_absolute_pointer_target(self, store, tracker):
        os.symlink(store.root / "nim-2.0.0", store.root / "current")

        assert tracker.current().name == "nim-2.0.0"


class TestClearReferences:
    def test_clears_matching_pointers(self, store, tracker):
        tracker.activate(store.get("2.0.8"))
        tracker.activate(store.get("2.2.0"))

        tracker.clear_references(store.get("2.2.0"))

        assert tracker.state() == PointerState(current=None, previous="nim-2.0.8")

    def test_leaves_other_pointers(self, store, tracker):
        tracker.activate(store.get("2.2.0"))

        tracker.clear_references(store.get("2.0.0"))

        assert tracker.state().current == "nim-2.2.0"
