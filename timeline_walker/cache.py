"""Id-indexed cache of what is known about the public timeline.

Stored statuses and fetch errors are kept per id. Gaps usually cover long
runs of ids (server ids are sparse), so they are kept as sorted, disjoint
half-open intervals and looked up with bisect.
"""

from bisect import bisect_left, bisect_right

from .models import CacheRecord, RecordKind

# Higher rank wins when two records meet at the same id. FETCH_ERROR is only
# informational, so any real knowledge replaces it.
_RANK = {
    RecordKind.FETCH_ERROR: 0,
    RecordKind.GAP_LOCAL: 1,
    RecordKind.GAP_FEDERATED: 2,
    RecordKind.STORED: 3,
}

_GAP_KINDS = (RecordKind.GAP_LOCAL, RecordKind.GAP_FEDERATED)


def merge_records(existing: CacheRecord | None, incoming: CacheRecord) -> CacheRecord:
    """Combine an existing record with a new one without losing knowledge.

    A stored status is never replaced by a gap and a federated gap is never
    weakened to a local one. A newer stored status replaces an older one.
    """
    if existing is None:
        return incoming
    if incoming.kind is RecordKind.STORED:
        return incoming
    if _RANK[incoming.kind] >= _RANK[existing.kind]:
        return incoming
    return existing


class PageCache:
    """Mapping from status id to CacheRecord, owned by one FeedSource."""

    def __init__(self):
        self._points: dict[int, CacheRecord] = {}
        # parallel lists describing gap intervals [start, stop)
        self._starts: list[int] = []
        self._stops: list[int] = []
        self._kinds: list[RecordKind] = []

    def get(self, status_id: int) -> CacheRecord | None:
        point = self._points.get(status_id)
        if point is not None and point.kind is RecordKind.STORED:
            return point
        gap = self._gap_at(status_id)
        if gap is None:
            return point
        return merge_records(point, gap)

    def put(self, status_id: int, record: CacheRecord) -> CacheRecord:
        """Store a record, applying merge_records. Returns the kept record."""
        if record.kind in _GAP_KINDS:
            self.put_range(status_id, status_id + 1, record)
        else:
            self._points[status_id] = merge_records(
                self._points.get(status_id), record
            )
        return self.get(status_id)

    def put_range(self, start: int, stop: int, record: CacheRecord) -> None:
        """Mark every id in [start, stop) with a gap record.

        Existing gaps inside the range are upgraded, never downgraded.

        Raises:
            ValueError: If record is not a gap
        """
        if record.kind not in _GAP_KINDS:
            raise ValueError(f"put_range only accepts gaps, got {record.kind}")
        if start >= stop:
            return

        incoming = record.kind
        first = bisect_right(self._stops, start)
        last = bisect_left(self._starts, stop)

        pieces: list[tuple[int, int, RecordKind]] = []
        cursor = start
        for index in range(first, last):
            s, e, kind = self._starts[index], self._stops[index], self._kinds[index]
            if s < start:
                pieces.append((s, start, kind))
            overlap_start = max(s, start)
            if cursor < overlap_start:
                pieces.append((cursor, overlap_start, incoming))
            overlap_stop = min(e, stop)
            stronger = kind if _RANK[kind] > _RANK[incoming] else incoming
            pieces.append((overlap_start, overlap_stop, stronger))
            cursor = overlap_stop
            if e > stop:
                pieces.append((stop, e, kind))
        if cursor < stop:
            pieces.append((cursor, stop, incoming))

        # pull in touching neighbours so equal kinds coalesce
        if first > 0 and self._stops[first - 1] == pieces[0][0]:
            first -= 1
            pieces.insert(0, (self._starts[first], self._stops[first], self._kinds[first]))
        if last < len(self._starts) and self._starts[last] == pieces[-1][1]:
            pieces.append((self._starts[last], self._stops[last], self._kinds[last]))
            last += 1

        merged: list[tuple[int, int, RecordKind]] = []
        for piece in pieces:
            if merged and merged[-1][1] == piece[0] and merged[-1][2] is piece[2]:
                merged[-1] = (merged[-1][0], piece[1], piece[2])
            else:
                merged.append(piece)

        self._starts[first:last] = [piece[0] for piece in merged]
        self._stops[first:last] = [piece[1] for piece in merged]
        self._kinds[first:last] = [piece[2] for piece in merged]

    def gap_intervals(self) -> list[tuple[int, int, RecordKind]]:
        """Known gaps as (start, stop, kind), stop exclusive, ascending."""
        return list(zip(self._starts, self._stops, self._kinds))

    def gap_start(self, status_id: int) -> int | None:
        """First id of the gap interval containing status_id, if any."""
        index = bisect_right(self._starts, status_id) - 1
        if index >= 0 and status_id < self._stops[index]:
            return self._starts[index]
        return None

    def _gap_at(self, status_id: int) -> CacheRecord | None:
        index = bisect_right(self._starts, status_id) - 1
        if index >= 0 and status_id < self._stops[index]:
            return CacheRecord(self._kinds[index])
        return None

    def __contains__(self, status_id: int) -> bool:
        return self.get(status_id) is not None
