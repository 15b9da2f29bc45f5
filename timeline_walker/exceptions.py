"""Exception hierarchy for Timeline Walker."""


class TimelineError(Exception):
    """Base exception for all timeline errors."""

    pass


class TransportError(TimelineError):
    """The remote server could not be reached or answered with an error.

    The original exception is kept in ``inner_error`` and chained as
    ``__cause__`` by the client.
    """

    def __init__(self, message: str, inner_error: Exception | None = None):
        super().__init__(message)
        self.inner_error = inner_error


class MalformedResponse(TimelineError):
    """Payload cannot be interpreted as a page of statuses."""

    pass
