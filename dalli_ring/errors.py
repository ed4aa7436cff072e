"""
Errors raised by the server selector.

Construction errors (bad address, bad weight) abort the whole build.
Lookup errors surface as NoServersError; probe failures never escape.
"""


class RingError(Exception):
    """Base class for all selector errors."""
    pass


class NoServersError(RingError):
    """No server is configured, or none could be found alive."""

    def __init__(self, message: str = "memcache: no servers configured or available"):
        super().__init__(message)


class AddressResolutionError(RingError, ValueError):
    """A server label could not be turned into an address."""

    def __init__(self, label: str, reason: str):
        self.label = label
        self.reason = reason
        super().__init__(f"cannot resolve server address '{label}': {reason}")


class InvalidWeightError(RingError, ValueError):
    """A server weight is missing, malformed or not positive."""

    def __init__(self, label: str, weight):
        self.label = label
        self.weight = weight
        super().__init__(f"invalid weight {weight!r} for server '{label}'")
