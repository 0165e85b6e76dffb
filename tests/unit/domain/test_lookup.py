"""Tests for the Lookup result type."""

from __future__ import annotations

from streambridge.domain.entities.lookup import Lookup, LookupOutcome


class TestLookup:
    def test_found_with_items(self) -> None:
        result = Lookup.found(["a", "b"])
        assert result.outcome is LookupOutcome.FOUND
        assert result.items == ("a", "b")
        assert result.ok is True
        assert result.first == "a"

    def test_found_empty_becomes_not_found(self) -> None:
        result = Lookup.found([])
        assert result.outcome is LookupOutcome.NOT_FOUND
        assert result.ok is False
        assert result.first is None

    def test_failed(self) -> None:
        result = Lookup.failed()
        assert result.outcome is LookupOutcome.UPSTREAM_ERROR
        assert result.items == ()

    def test_skipped(self) -> None:
        assert Lookup.skipped().outcome is LookupOutcome.NOT_ATTEMPTED

    def test_not_found(self) -> None:
        assert Lookup.not_found().outcome is LookupOutcome.NOT_FOUND

    def test_equality(self) -> None:
        assert Lookup.found(["a"]) == Lookup.found(["a"])
        assert Lookup.failed() != Lookup.not_found()
