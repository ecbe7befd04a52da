"""Error taxonomy for timeline reconstruction."""


class TimelineError(Exception):
    """Base class for all timeline service errors."""


class ConfigurationError(TimelineError):
    """Required configuration is missing or invalid. Fatal at startup."""


class NotFoundError(TimelineError):
    """The upstream engine reports that the execution does not exist."""


class UpstreamError(TimelineError):
    """Any other failure talking to the upstream engine API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
