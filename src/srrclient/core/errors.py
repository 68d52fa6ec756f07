"""
Exception hierarchy shared by the transport client, the SRR scanner and the
command handlers.
"""


class SrrClientError(Exception):
    """Base class for every error the client reports to the user."""


class TransportError(SrrClientError):
    """Network failure, unexpected HTTP status or unparseable response."""


class AuthenticationError(SrrClientError):
    """Login did not produce a session cookie, or an upload needs one."""


class InvalidContainer(SrrClientError):
    """The downloaded bytes do not start with the SRR signature."""


class MalformedContainer(SrrClientError):
    """A stored file block declares fields that run past the end of the buffer."""

    def __init__(self, message: str, offset: int = -1):
        super().__init__(message)
        self.offset = offset


class MemberNotFound(SrrClientError):
    """No stored file in the container ends with the requested extension."""
