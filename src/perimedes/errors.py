"""
Error types raised by a lock session.
"""


class LockError(Exception):
    """Base class for every failure that aborts a lock session."""


class DisplayConnectionError(LockError, ConnectionError):
    """The windowing server could not be reached; the session never started."""


class GrabError(LockError):
    """Keyboard and pointer could not both be seized."""


class RenderError(LockError):
    """A window, drawing or event primitive failed mid-session."""


class RemoteError(LockError):
    """The decision service failed or returned something unusable."""


class ChannelError(LockError):
    """The negotiation worker went away without delivering a decision."""
