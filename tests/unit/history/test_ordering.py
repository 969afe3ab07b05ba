"""Tests for the pinned-first ordering helpers."""

import pytest

from clipdeck.history.ordering import (
    insert_new,
    is_well_ordered,
    partition,
    pinned_count,
    pinned_only,
    reinsert,
)
from clipdeck.history.types import ClipboardEntry


@pytest.fixture
def make(wire_entry):
    def _make(entry_id, minutes=0, pinned=False):
        return ClipboardEntry.from_wire(wire_entry(entry_id, minutes=minutes, pinned=pinned))

    return _make


def ids(entries):
    return [e.id for e in entries]


class TestPartition:
    def test_stable(self, make):
        entries = [make("u1"), make("p1", pinned=True), make("u2"), make("p2", pinned=True)]
        result = partition(entries)

        assert ids(result) == ["p1", "p2", "u1", "u2"]
        assert is_well_ordered(result)

    def test_is_well_ordered_detects_violation(self, make):
        assert not is_well_ordered([make("u1"), make("p1", pinned=True)])
        assert is_well_ordered([])

    def test_pinned_count_and_pinned_only(self, make):
        entries = [make("p1", pinned=True), make("u1"), make("u2")]
        assert pinned_count(entries) == 1
        assert ids(pinned_only(entries)) == ["p1"]


class TestInsertNew:
    def test_unpinned_goes_after_pinned_block(self, make):
        entries = [make("p1", pinned=True), make("u1")]
        assert ids(insert_new(entries, make("u2"))) == ["p1", "u2", "u1"]

    def test_pinned_goes_first(self, make):
        entries = [make("p1", pinned=True), make("u1")]
        assert ids(insert_new(entries, make("p2", pinned=True))) == ["p2", "p1", "u1"]

    def test_does_not_mutate_input(self, make):
        entries = [make("u1")]
        insert_new(entries, make("u2"))
        assert ids(entries) == ["u1"]


class TestReinsert:
    def test_newly_pinned_to_head(self, make):
        entries = [make("p1", pinned=True), make("u3", 30), make("u2", 20), make("u1", 10)]
        result = reinsert(entries, make("u2", 20, pinned=True))

        assert ids(result) == ["u2", "p1", "u3", "u1"]

    def test_unpinned_returns_to_timestamp_position(self, make):
        entries = [make("u2", 20, pinned=True), make("p1", pinned=True), make("u3", 30), make("u1", 10)]
        result = reinsert(entries, make("u2", 20, pinned=False))

        assert ids(result) == ["p1", "u3", "u2", "u1"]
        assert is_well_ordered(result)

    def test_unknown_entry_is_inserted(self, make):
        result = reinsert([make("u1", 10)], make("u5", 50))
        assert ids(result) == ["u5", "u1"]
