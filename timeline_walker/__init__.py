"""Walk the public timeline of a Mastodon-compatible server as one bounded stream."""

from .exceptions import MalformedResponse, TimelineError, TransportError
from .models import Bound, Scope, Status
from .source import FeedSource, open_feed
from .timeline import BoundedTimeline, find_starting_id

__all__ = [
    "Bound",
    "BoundedTimeline",
    "FeedSource",
    "MalformedResponse",
    "Scope",
    "Status",
    "TimelineError",
    "TransportError",
    "find_starting_id",
    "open_feed",
]
