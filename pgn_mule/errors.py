"""Exception hierarchy shared across pgn-mule modules."""


class PgnMuleError(Exception):
    """Base exception for errors surfaced to administrative callers."""


class TransientFetchError(PgnMuleError):
    """Network failure or unexpected status while polling an upstream URL."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidURLError(PgnMuleError):
    """Raised when a source URL is not an absolute http(s) URL."""


class DelayLimitExceededError(PgnMuleError):
    """Raised when a requested delay exceeds the configured maximum."""


class InvalidReplacementError(PgnMuleError):
    """Raised when a replacement rule or index selector cannot be parsed."""


class MalformedRecordError(PgnMuleError):
    """Raised when a persisted record cannot be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Malformed record at {key}: {reason}")
        self.key = key
        self.reason = reason
