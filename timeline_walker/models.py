"""Data models for Timeline Walker."""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from dateutil import parser as date_parser

_ID_PATTERN = re.compile(r"^\s*\d+\s*$")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Naive values are interpreted as UTC. Returns None for missing or
    unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.isoparse(str(value))
        except (ValueError, TypeError, OverflowError):
            try:
                parsed = date_parser.parse(str(value))
            except (ValueError, TypeError, OverflowError):
                return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class Status:
    """A single entry of the public timeline.

    Only ``id``, ``created_at`` and the account fields are interpreted,
    everything else stays in ``raw`` untouched.
    """

    raw: dict[str, Any]
    id: int | None = field(init=False)
    created_at: datetime | None = field(init=False)

    def __post_init__(self):
        raw_id = self.raw.get("id")
        try:
            self.id = int(raw_id) if raw_id is not None else None
        except (ValueError, TypeError):
            self.id = None
        self.created_at = parse_timestamp(self.raw.get("created_at"))

    @property
    def is_local(self) -> bool:
        """True when the author lives on the same server as the timeline."""
        account = self.raw.get("account")
        if not isinstance(account, dict):
            return False
        username = account.get("username")
        return username is not None and username == account.get("acct")


class Scope(Enum):
    """Visibility scope of a timeline request."""

    LOCAL = "local"
    FEDERATED = "federated"

    @classmethod
    def from_local(cls, local: bool) -> "Scope":
        return cls.LOCAL if local else cls.FEDERATED


class BoundKind(Enum):
    NONE = "none"
    ID = "id"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class Bound:
    """Newest or oldest limit of a timeline query."""

    kind: BoundKind = BoundKind.NONE
    status_id: int | None = None
    timestamp: datetime | None = None

    def __post_init__(self):
        # naive timestamps are UTC
        if self.timestamp is not None and self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=UTC))

    @classmethod
    def none(cls) -> "Bound":
        return cls()

    @classmethod
    def by_id(cls, status_id: int) -> "Bound":
        return cls(kind=BoundKind.ID, status_id=int(status_id))

    @classmethod
    def by_timestamp(cls, timestamp: datetime) -> "Bound":
        return cls(kind=BoundKind.TIMESTAMP, timestamp=timestamp)

    @classmethod
    def parse(cls, value: Any) -> "Bound":
        """Build a bound from user input.

        Accepts None, a Bound, an int, a datetime or a string. Strings of
        digits are ids, other strings must be timestamps.

        Raises:
            ValueError: If the value cannot be interpreted
        """
        if value is None:
            return cls.none()
        if isinstance(value, Bound):
            return value
        if isinstance(value, datetime):
            return cls.by_timestamp(value)
        if isinstance(value, bool):
            raise ValueError(f"Invalid bound: {value!r}")
        if isinstance(value, int):
            return cls.by_id(value)
        if isinstance(value, str):
            if _ID_PATTERN.match(value):
                return cls.by_id(int(value))
            timestamp = parse_timestamp(value)
            if timestamp is None:
                raise ValueError(f"Invalid bound: {value!r}")
            return cls.by_timestamp(timestamp)
        raise ValueError(f"Invalid bound: {value!r}")

    @property
    def is_set(self) -> bool:
        return self.kind is not BoundKind.NONE


class RecordKind(Enum):
    """What the cache knows about one id."""

    GAP_LOCAL = "gap_local"
    GAP_FEDERATED = "gap_federated"
    FETCH_ERROR = "fetch_error"
    STORED = "stored"


@dataclass(frozen=True)
class CacheRecord:
    """Cache entry for one status id."""

    kind: RecordKind
    status: Status | None = None

    @classmethod
    def stored(cls, status: Status) -> "CacheRecord":
        return cls(RecordKind.STORED, status)

    @classmethod
    def gap(cls, scope: Scope) -> "CacheRecord":
        if scope is Scope.LOCAL:
            return cls(RecordKind.GAP_LOCAL)
        return cls(RecordKind.GAP_FEDERATED)

    @classmethod
    def fetch_error(cls) -> "CacheRecord":
        return cls(RecordKind.FETCH_ERROR)
