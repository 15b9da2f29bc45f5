"""Bounded, lazy walk over a paginated timeline."""

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .logging_config import create_execution_logger
from .models import Bound, BoundKind, Scope, Status

if TYPE_CHECKING:
    from .source import FeedSource


def _not_newer_than(status: Status, target: datetime) -> bool:
    # statuses without a timestamp never count as too new
    return status.created_at is None or status.created_at <= target


def find_starting_id(source: "FeedSource", target: datetime) -> int | None:
    """Find the id to start a walk from so that nothing newer than target is seen.

    Binary searches the id space using the local timeline. The walk then
    requests everything below the returned id. Returns None when no status is
    old enough. A naive target is taken as UTC.
    """
    if target.tzinfo is None:
        target = target.replace(tzinfo=UTC)
    logger = create_execution_logger("timeline", source.execution_id)

    statuses = source.get_page(Scope.LOCAL)
    if not statuses:
        return None

    newest = statuses[0]
    if _not_newer_than(newest, target):
        return newest.id + 1

    newest_id = newest.id
    oldest: Status | None = None
    oldest_id = 1

    while not _not_newer_than(newest, target) and (
        oldest is None or _not_newer_than(oldest, target)
    ):
        middle_id = (newest_id + oldest_id) // 2
        if middle_id in (newest_id, oldest_id):
            logger.debug(
                "Binary search converged",
                status_id=newest.id,
                metrics={"newest_id": newest_id, "oldest_id": oldest_id},
            )
            return newest.id

        statuses = source.get_page(Scope.LOCAL, middle_id)
        if not statuses:
            oldest = None
            oldest_id = middle_id
        elif _not_newer_than(statuses[0], target):
            if statuses[0].id == oldest_id:
                return newest.id
            oldest = statuses[0]
            oldest_id = oldest.id
        else:
            if statuses[0].id == newest_id:
                return newest.id
            newest = statuses[0]
            newest_id = newest.id

    return None


class BoundedTimeline:
    """Single-pass iterator over statuses between a newest and an oldest bound.

    Statuses come newest first. Iterating again requires a new instance.
    """

    def __init__(
        self,
        source: "FeedSource",
        scope: Scope,
        newest: Bound | None = None,
        oldest: Bound | None = None,
    ):
        self.source = source
        self.scope = scope
        self.newest = newest or Bound.none()
        self.oldest = oldest or Bound.none()
        self.logger = create_execution_logger("timeline", source.execution_id)
        self._statuses = self._walk()

    def __iter__(self) -> Iterator[Status]:
        return self

    def __next__(self) -> Status:
        return next(self._statuses)

    def _start_cursor(self) -> tuple[bool, int | None]:
        if self.newest.kind is BoundKind.TIMESTAMP:
            starting_id = find_starting_id(self.source, self.newest.timestamp)
            return starting_id is not None, starting_id
        if self.newest.kind is BoundKind.ID:
            return True, self.newest.status_id + 1
        return True, None

    def _too_old(self, status: Status) -> bool:
        if self.oldest.kind is BoundKind.ID:
            return status.id < self.oldest.status_id
        if self.oldest.kind is BoundKind.TIMESTAMP:
            return (
                status.created_at is not None
                and status.created_at < self.oldest.timestamp
            )
        return False

    def _within_newest(self, status: Status) -> bool:
        if self.newest.kind is BoundKind.TIMESTAMP:
            return _not_newer_than(status, self.newest.timestamp)
        if self.newest.kind is BoundKind.ID:
            return status.id <= self.newest.status_id
        return True

    def _walk(self) -> Iterator[Status]:
        found, cursor = self._start_cursor()
        if not found:
            self.logger.debug("No status old enough for newest bound")
            return

        while True:
            statuses = self.source.get_page(
                self.scope, cursor - 1 if cursor is not None else None
            )
            previous_cursor = cursor
            for status in statuses:
                if status.id is None:
                    continue
                if self._too_old(status):
                    self.logger.debug("Reached oldest bound", status_id=status.id)
                    return
                if self._within_newest(status):
                    yield status
                cursor = status.id
            if cursor == previous_cursor:
                self.logger.debug("Reached end of timeline", status_id=cursor)
                return
