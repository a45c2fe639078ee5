"""Errors raised while relaying a completion stream."""


class RelayError(Exception):
    """Raised when the upstream provider or the relay transport fails."""

    pass


class RateLimitedError(RelayError):
    """Raised when the upstream provider reports a rate limit (HTTP 429)."""

    pass
