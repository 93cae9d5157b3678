"""Exception types for chytanka application."""


class ChytankaError(Exception):
    """Base class for all application errors."""


class ServiceError(ChytankaError):
    """A content request failed or returned unusable data."""


class InvalidTransition(ChytankaError):
    """A game action was requested in a state that does not allow it."""


class CaptureError(ChytankaError):
    """Recording could not be started or finalized."""


class PermissionDenied(CaptureError):
    """Microphone access was refused."""


class DeviceUnavailable(CaptureError):
    """No usable microphone was found."""


class CaptureInProgress(CaptureError):
    """A capture session is already open."""
