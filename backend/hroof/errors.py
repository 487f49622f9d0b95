"""Error types shared by the engine, the store and the room clients."""


class HroofError(Exception):
    """Base class for game errors."""


class InvalidInput(HroofError, ValueError):
    """Malformed request data, rejected before any state changes."""


class StaleWrite(HroofError):
    """A conditional write found a newer version than the writer last read."""

    def __init__(self, message='Record changed since it was last read', current_version=None):
        super().__init__(message)
        self.current_version = current_version


class TransportError(HroofError):
    """The authoritative store could not be reached or answered with an error."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
