"""Cache-aware access to the public timeline of one host."""

from collections.abc import Callable, Iterable
from typing import Any

from .cache import PageCache
from .client import TimelineClient
from .config import ClientConfig
from .exceptions import TimelineError
from .logging_config import create_execution_logger
from .models import Bound, CacheRecord, RecordKind, Scope, Status
from .timeline import BoundedTimeline

# (local_only, max_id) -> raw statuses; max_id is exclusive
FetchPage = Callable[[bool, int | None], list[dict]]


class FeedSource:
    """Wraps one remote timeline and remembers what it has already seen.

    Statuses are immutable once an id is assigned, so everything learned from
    a page stays valid for the lifetime of the source. A FeedSource is not
    thread safe.
    """

    def __init__(
        self,
        host: str,
        fetch_page: FetchPage,
        execution_id: str | None = None,
        on_close: Callable[[], None] | None = None,
    ):
        self.host = host
        self.fetch_page = fetch_page
        self.on_close = on_close
        self.cache = PageCache()
        self.requests_made = 0
        self.execution_id = execution_id
        self.logger = create_execution_logger("source", execution_id)

    def get_page(self, scope: Scope, from_id: int | None = None) -> list[Status]:
        """Return up to one page of statuses with ids <= from_id, newest first.

        When the cache already holds a matching status at or just below
        from_id, that single status is returned without a request.

        Raises:
            TransportError: If the request fails
            MalformedResponse: If the server answers something unusable
        """
        if from_id is not None:
            from_id, cached = self._probe_cache(scope, from_id)
            if cached is not None:
                self.logger.debug(
                    "Cache hit", host=self.host, status_id=cached.id
                )
                return [cached]

        max_id = from_id + 1 if from_id is not None else None
        self.requests_made += 1
        try:
            raw_statuses = self.fetch_page(scope is Scope.LOCAL, max_id)
        except TimelineError:
            if from_id is not None:
                self.cache.put(from_id, CacheRecord.fetch_error())
            raise

        statuses = self.update_page(raw_statuses, scope, expected_max_id=from_id)
        self.logger.debug(
            f"Fetched {len(statuses)} statuses",
            host=self.host,
            status_id=from_id,
            metrics={"requests_made": self.requests_made},
        )
        return statuses

    def _probe_cache(self, scope: Scope, from_id: int) -> tuple[int, Status | None]:
        """Walk down from from_id through known ids.

        Returns the id the request should start from and, when the cache
        already answers the request, the status to return.
        """
        status_id = from_id
        record = self.cache.get(status_id)
        while record is not None:
            if record.kind is RecordKind.STORED:
                if scope is Scope.FEDERATED or record.status.is_local:
                    return status_id, record.status
            elif scope is Scope.FEDERATED or record.kind is RecordKind.FETCH_ERROR:
                # a local gap says nothing about federated statuses
                break
            else:
                # no local status anywhere in the gap
                status_id = self.cache.gap_start(status_id)
            status_id -= 1
            record = self.cache.get(status_id)
        return status_id, None

    def update_page(
        self,
        raw_statuses: Iterable[dict[str, Any] | Status],
        scope: Scope,
        expected_max_id: int | None = None,
    ) -> list[Status]:
        """Record a fetched page in the cache.

        Every id above each returned status and below the previous one (or
        up to and including expected_max_id for the first) is marked as a gap
        for the given scope.

        Returns:
            The page as Status objects sorted by id, newest first
        """
        statuses = [
            entry if isinstance(entry, Status) else Status(entry)
            for entry in raw_statuses
        ]
        # statuses without an id cannot be placed in the cache
        statuses = sorted(
            (status for status in statuses if status.id is not None),
            key=lambda status: status.id,
            reverse=True,
        )

        gap = CacheRecord.gap(scope)
        prev_id = expected_max_id + 1 if expected_max_id is not None else None
        gaps_marked = 0
        for status in statuses:
            if prev_id is not None and status.id + 1 < prev_id:
                self.cache.put_range(status.id + 1, prev_id, gap)
                gaps_marked += prev_id - status.id - 1
            self.cache.put(status.id, CacheRecord.stored(status))
            prev_id = status.id

        if gaps_marked:
            self.logger.debug(
                f"Marked {gaps_marked} ids as {gap.kind.value}", host=self.host
            )
        return statuses

    def iterate(
        self,
        *,
        local: bool,
        newest: Any = None,
        oldest: Any = None,
    ) -> BoundedTimeline:
        """Lazily walk the timeline from newest to oldest.

        Args:
            local: Only statuses from accounts of this host
            newest: Upper bound, an id, a timestamp or None
            oldest: Lower bound, an id, a timestamp or None

        Raises:
            ValueError: If a bound cannot be interpreted
        """
        return BoundedTimeline(
            self,
            scope=Scope.from_local(local),
            newest=Bound.parse(newest),
            oldest=Bound.parse(oldest),
        )

    def close(self) -> None:
        """Release the underlying transport. The cache stays readable."""
        if self.on_close is not None:
            self.on_close()
            self.on_close = None


def open_feed(
    host: str,
    config: ClientConfig | None = None,
    execution_id: str | None = None,
) -> FeedSource:
    """Create a FeedSource for a host using the default HTTP client."""
    client = TimelineClient(host, config=config, execution_id=execution_id)
    return FeedSource(
        host, client.fetch_page, execution_id=execution_id, on_close=client.close
    )

