from datetime import datetime, timezone
from pathlib import Path

import pytest

from onelo.errors import IdentifierError, ReservedSeparator
from onelo.source import Source, SourceId, guard_against_char


class TestSourceId:
    def test_succeeds(self) -> None:
        assert SourceId.parse("a-b") == SourceId("a-b")
        assert str(SourceId.parse("a-b")) == "a-b"

    def test_fails(self) -> None:
        with pytest.raises(ReservedSeparator):
            SourceId.parse("a:b")

    def test_direct_construction_is_validated(self) -> None:
        with pytest.raises(IdentifierError):
            SourceId("broken:input")

    def test_empty_is_valid(self) -> None:
        assert SourceId.parse("").value == ""


class TestGuardAgainstChar:
    def test_succeeds(self) -> None:
        guard_against_char("foo", ":")

    def test_fails(self) -> None:
        with pytest.raises(ReservedSeparator, match="`:`"):
            guard_against_char("broken:input", ":")


class TestSource:
    def test_baseline(self) -> None:
        source_id = SourceId.parse("foo")
        source = Source(source_id, "/foo/bar")

        assert source.id == source_id
        assert source.route == Path("/foo/bar")
        assert source.checksum is None
        assert source.timestamp.tzinfo is not None

    def test_refresh(self) -> None:
        source = Source(SourceId("foo"), "/foo/bar")
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        refreshed = source.refresh(checksum=b"\x01\x02", timestamp=when)

        assert refreshed.checksum == b"\x01\x02"
        assert refreshed.timestamp == when
        assert refreshed.id == source.id
        assert refreshed.route == source.route
        assert source.checksum is None
