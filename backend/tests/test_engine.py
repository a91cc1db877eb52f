"""
Tests for the path selection engine.
"""

import random

import pytest

from core.catalog import SegmentCatalog
from core.models.path import PathState
from core.path import (
    PathSelectionEngine,
    NotConnected,
    SegmentLimitReached,
    PathBroken,
    IndexOutOfRange,
    UnknownSegment,
)
from tests.conftest import make_collection, make_feature


class TestSelect:
    """Tests for select()."""

    def test_first_select_sets_candidates(self, abc_catalog):
        """The first segment becomes the path and its extensions are candidates."""
        engine = PathSelectionEngine(abc_catalog)
        assert engine.select(1) is True

        snapshot = engine.snapshot()
        assert snapshot.segment_ids == (1,)
        assert snapshot.connected is True
        assert snapshot.candidates == frozenset({2})
        assert snapshot.total_km == 5
        assert snapshot.state == PathState.BUILDING

    def test_connected_append(self, abc_catalog):
        """A segment starting at the path's end is appended."""
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.select(2)

        snapshot = engine.snapshot()
        assert snapshot.segment_ids == (1, 2)
        assert snapshot.connected is True
        assert snapshot.total_km == 8
        assert snapshot.candidates == frozenset()

    def test_unconnected_segment_rejected(self, abc_catalog):
        """A segment that does not connect raises NotConnected and changes nothing."""
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.select(2)
        before = engine.snapshot()

        with pytest.raises(NotConnected) as exc_info:
            engine.select(3)

        assert exc_info.value.last_id == 2
        assert exc_info.value.segment_id == 3
        assert engine.snapshot() == before

    def test_reverse_direction_not_connected(self, abc_catalog):
        """Connectivity is directional: B then A is rejected."""
        engine = PathSelectionEngine(abc_catalog)
        engine.select(2)
        with pytest.raises(NotConnected):
            engine.select(1)
        assert engine.snapshot().segment_ids == (2,)

    def test_select_is_idempotent(self, abc_catalog):
        """Selecting an already selected segment is a no-op."""
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.select(2)
        before = engine.snapshot()

        assert engine.select(1) is False
        assert engine.select(2) is False
        assert engine.snapshot() == before

    def test_unknown_segment(self, abc_catalog):
        """Identifiers outside the catalog raise UnknownSegment."""
        engine = PathSelectionEngine(abc_catalog)
        with pytest.raises(UnknownSegment):
            engine.select(999)
        assert engine.snapshot().state == PathState.EMPTY

    def test_candidates_exclude_selected(self):
        """A loop back to the first segment is not offered as a candidate."""
        catalog = SegmentCatalog.load(make_collection(
            make_feature(1, (0, 0), (1, 0), 1),
            make_feature(2, (1, 0), (0, 0), 1),
        ))
        engine = PathSelectionEngine(catalog)
        engine.select(1)
        engine.select(2)
        assert engine.candidates == frozenset()

    def test_empty_geometry_segment(self):
        """A segment with empty geometry can be picked first but has no extensions."""
        catalog = SegmentCatalog.load(make_collection(
            {
                "type": "Feature",
                "properties": {"OBJECTID": 1, "YARDNAME": "Empty", "KM": 1},
                "geometry": {"type": "LineString", "coordinates": []},
            },
            make_feature(2, (0, 0), (1, 0), 1),
        ))
        engine = PathSelectionEngine(catalog)
        engine.select(1)
        assert engine.candidates == frozenset()
        with pytest.raises(NotConnected):
            engine.select(2)


class TestSegmentLimit:
    """Tests for the segment cap."""

    def test_twenty_first_segment_rejected(self, chain_catalog):
        """After 20 connected picks, the 21st connected segment is rejected."""
        engine = PathSelectionEngine(chain_catalog)
        for i in range(20):
            engine.select(i)

        assert engine.state == PathState.FULL
        before = engine.snapshot()

        with pytest.raises(SegmentLimitReached) as exc_info:
            engine.select(20)

        assert exc_info.value.limit == 20
        assert len(engine.selection) == 20
        assert engine.snapshot() == before

    def test_not_connected_checked_before_limit(self, chain_catalog):
        """At the cap, an unconnected segment still reports NotConnected."""
        engine = PathSelectionEngine(chain_catalog, max_segments=3)
        for i in range(3):
            engine.select(i)
        with pytest.raises(NotConnected):
            engine.select(10)

    def test_custom_limit(self, chain_catalog):
        engine = PathSelectionEngine(chain_catalog, max_segments=2)
        engine.select(0)
        engine.select(1)
        with pytest.raises(SegmentLimitReached):
            engine.select(2)

    def test_invalid_limit(self, chain_catalog):
        with pytest.raises(ValueError):
            PathSelectionEngine(chain_catalog, max_segments=0)


class TestRemove:
    """Tests for remove()."""

    def test_remove_interior_breaks_path(self, abcd_catalog):
        """Removing the bridge segment leaves a reported gap."""
        engine = PathSelectionEngine(abcd_catalog)
        for segment_id in (1, 2, 4):
            engine.select(segment_id)

        removed = engine.remove(1)

        snapshot = engine.snapshot()
        assert removed.id == 2
        assert snapshot.segment_ids == (1, 4)
        assert snapshot.connected is False
        assert snapshot.state == PathState.BROKEN
        assert snapshot.break_index == 0
        assert snapshot.total_km == 9

    def test_remove_last_keeps_path_connected(self, abcd_catalog):
        engine = PathSelectionEngine(abcd_catalog)
        for segment_id in (1, 2, 4):
            engine.select(segment_id)

        engine.remove(2)

        assert engine.connected is True
        assert engine.candidates == frozenset({4})

    def test_remove_only_segment_equals_clear(self, abc_catalog):
        """remove(0) on a single segment yields the same state as clear()."""
        removed_engine = PathSelectionEngine(abc_catalog)
        removed_engine.select(1)
        removed_engine.remove(0)

        cleared_engine = PathSelectionEngine(abc_catalog)
        cleared_engine.select(1)
        cleared_engine.clear()

        assert removed_engine.snapshot() == cleared_engine.snapshot()

    @pytest.mark.parametrize("index", [-1, 2, 10, "0", 1.0, True])
    def test_invalid_index(self, abc_catalog, index):
        """Out-of-range and non-integer indices raise IndexOutOfRange."""
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.select(2)
        before = engine.snapshot()

        with pytest.raises(IndexOutOfRange):
            engine.remove(index)
        assert engine.snapshot() == before

    def test_index_out_of_range_is_index_error(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        with pytest.raises(IndexError):
            engine.remove(0)

    def test_remove_first_recomputes_candidates(self, abcd_catalog):
        """Candidates follow the last segment, not the removed first one."""
        engine = PathSelectionEngine(abcd_catalog)
        engine.select(1)
        engine.select(2)
        engine.remove(0)
        assert engine.snapshot().segment_ids == (2,)
        assert engine.candidates == frozenset({4})


class TestBrokenPath:
    """Tests for the BROKEN state."""

    @pytest.fixture
    def broken_engine(self, chain_catalog):
        engine = PathSelectionEngine(chain_catalog)
        for i in range(4):
            engine.select(i)
        engine.remove(1)
        assert engine.state == PathState.BROKEN
        return engine

    def test_select_rejected_when_broken(self, broken_engine):
        """Even a segment connected to the tail is rejected while broken."""
        before = broken_engine.snapshot()
        with pytest.raises(PathBroken) as exc_info:
            broken_engine.select(4)
        assert exc_info.value.break_index == 0
        assert broken_engine.snapshot() == before

    def test_idempotent_select_when_broken(self, broken_engine):
        assert broken_engine.select(0) is False

    def test_remove_can_repair(self, broken_engine):
        """Removing the segment before the gap restores connectivity."""
        broken_engine.remove(0)
        assert broken_engine.connected is True
        assert broken_engine.state == PathState.BUILDING
        broken_engine.select(4)
        assert broken_engine.snapshot().segment_ids == (2, 3, 4)

    def test_clear_recovers(self, broken_engine):
        broken_engine.clear()
        assert broken_engine.state == PathState.EMPTY
        broken_engine.select(7)
        assert broken_engine.connected is True


class TestClearAndHover:
    """Tests for clear() and hover tracking."""

    def test_clear_resets_everything(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.select(2)
        engine.clear()

        snapshot = engine.snapshot()
        assert snapshot.selection == ()
        assert snapshot.connected is True
        assert snapshot.candidates == frozenset()
        assert snapshot.total_km == 0
        assert snapshot.state == PathState.EMPTY

    def test_clear_on_empty(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        engine.clear()
        assert engine.state == PathState.EMPTY

    def test_hover_does_not_change_selection(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        engine.select(1)
        engine.hover(3)

        snapshot = engine.snapshot()
        assert snapshot.hovered.name == "C"
        assert snapshot.segment_ids == (1,)
        assert snapshot.candidates == frozenset({2})

        engine.unhover()
        assert engine.snapshot().hovered is None

    def test_hover_unknown_segment(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        with pytest.raises(UnknownSegment):
            engine.hover(42)


class TestEmptyCandidatePolicy:
    """Tests for the empty-selection candidate policy."""

    def test_default_policy_has_no_candidates(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog)
        assert engine.candidates == frozenset()

    def test_all_policy_offers_every_segment(self, abc_catalog):
        engine = PathSelectionEngine(abc_catalog, empty_candidates="all")
        assert engine.candidates == frozenset({1, 2, 3})

        engine.select(1)
        assert engine.candidates == frozenset({2})

        engine.clear()
        assert engine.candidates == frozenset({1, 2, 3})

    def test_invalid_policy(self, abc_catalog):
        with pytest.raises(ValueError):
            PathSelectionEngine(abc_catalog, empty_candidates="some")


class TestInvariants:
    """Randomised operation sequences must keep the engine's invariants."""

    def test_random_operations(self, chain_catalog):
        rng = random.Random(1234)
        engine = PathSelectionEngine(chain_catalog)
        ids = [segment.id for segment in chain_catalog]

        for _ in range(500):
            action = rng.random()
            before = engine.snapshot()
            try:
                if action < 0.7:
                    # Mostly extend from the tail to reach the cap
                    tail = before.segment_ids[-1] if before.segment_ids else rng.choice(ids)
                    target = tail + 1 if before.segment_ids and rng.random() < 0.8 else rng.choice(ids)
                    if target in chain_catalog:
                        accepted = engine.select(target)
                        if accepted:
                            assert engine.connected is True
                elif action < 0.95:
                    engine.remove(rng.randrange(-1, len(before.selection) + 1))
                else:
                    engine.clear()
            except (NotConnected, SegmentLimitReached, PathBroken, IndexOutOfRange):
                assert engine.snapshot() == before

            snapshot = engine.snapshot()
            assert len(snapshot.selection) <= 20
            assert len(set(snapshot.segment_ids)) == len(snapshot.segment_ids)
            assert snapshot.total_km == pytest.approx(sum(s.length_km for s in snapshot.selection))
            assert not (snapshot.candidates & set(snapshot.segment_ids))
