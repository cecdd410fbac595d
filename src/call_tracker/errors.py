"""Errors raised by the call tracker itself (never by wrapped work)."""


class InvalidArgumentError(ValueError):
    """Raised when a tracker is built or called with missing or blank arguments."""
