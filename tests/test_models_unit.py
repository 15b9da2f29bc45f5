"""Unit tests for the data models."""

from datetime import UTC, datetime

import pytest

from timeline_walker.models import Bound, BoundKind, Scope, Status, parse_timestamp

from .fakes import make_status


class TestStatusUnit:
    """Unit tests for Status field extraction."""

    def test_string_id_is_converted(self):
        assert Status({"id": "109876543210"}).id == 109876543210

    def test_missing_or_invalid_id(self):
        assert Status({}).id is None
        assert Status({"id": "abc"}).id is None

    def test_created_at_is_parsed(self):
        status = Status({"id": 1, "created_at": "2017-05-15T20:07:00.000Z"})

        assert status.created_at == datetime(2017, 5, 15, 20, 7, tzinfo=UTC)

    def test_created_at_may_be_missing(self):
        assert Status({"id": 1}).created_at is None
        assert Status({"id": 1, "created_at": "not a date"}).created_at is None

    def test_local_when_username_equals_acct(self):
        assert Status(make_status(1, local=True)).is_local
        assert not Status(make_status(1, local=False)).is_local

    def test_not_local_without_account(self):
        assert not Status({"id": 1}).is_local
        assert not Status({"id": 1, "account": None}).is_local

    def test_raw_fields_pass_through(self):
        raw = make_status(3, content="<p>hi</p>", visibility="public")

        assert Status(raw).raw is raw


class TestParseTimestampUnit:
    def test_naive_timestamp_is_utc(self):
        assert parse_timestamp("2017-05-15T20:07:00") == datetime(
            2017, 5, 15, 20, 7, tzinfo=UTC
        )

    def test_offset_is_kept(self):
        parsed = parse_timestamp("2017-05-15T22:07:00+02:00")

        assert parsed == datetime(2017, 5, 15, 20, 7, tzinfo=UTC)

    def test_none(self):
        assert parse_timestamp(None) is None


class TestBoundUnit:
    """Unit tests for Bound.parse."""

    def test_none(self):
        assert Bound.parse(None) == Bound.none()
        assert not Bound.parse(None).is_set

    def test_int_is_id(self):
        bound = Bound.parse(42)

        assert bound.kind is BoundKind.ID
        assert bound.status_id == 42

    def test_digit_string_is_id(self):
        assert Bound.parse("109876543210") == Bound.by_id(109876543210)

    def test_timestamp_string(self):
        bound = Bound.parse("2017-05-15T20:07:00.000Z")

        assert bound.kind is BoundKind.TIMESTAMP
        assert bound.timestamp == datetime(2017, 5, 15, 20, 7, tzinfo=UTC)

    def test_naive_datetime_gets_utc(self):
        bound = Bound.parse(datetime(2017, 5, 15, 20, 7))

        assert bound.timestamp.tzinfo is not None

    def test_bound_passes_through(self):
        bound = Bound.by_id(5)

        assert Bound.parse(bound) is bound

    @pytest.mark.parametrize("value", ["yesterday-ish", 1.5, True, ["1"]])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            Bound.parse(value)


class TestScopeUnit:
    def test_from_local(self):
        assert Scope.from_local(True) is Scope.LOCAL
        assert Scope.from_local(False) is Scope.FEDERATED
