"""Typed errors raised by the reproduction tracking services.

Each error carries a machine-readable ``error_code`` and the HTTP status the
API layer renders it with, so every failure reaches the caller as one tagged
``{"detail", "error_code"}`` payload.
"""


class ReproTrackingError(Exception):
    """Base class for all domain errors."""

    error_code = "REPRO_TRACKING_ERROR"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ReproTrackingError):
    """A referenced mother, litter, offspring or report does not exist."""

    error_code = "NOT_FOUND"
    status_code = 404


class ConflictError(ReproTrackingError):
    """Duplicate id, name collision or a disallowed field change."""

    error_code = "CONFLICT"
    status_code = 409


class InvalidStateError(ReproTrackingError):
    """Lifecycle operation attempted on an offspring in the wrong state."""

    error_code = "INVALID_STATE"
    status_code = 409


class InvalidInputError(ReproTrackingError):
    """Malformed input such as an inverted date range or unknown sex."""

    error_code = "INVALID_INPUT"
    status_code = 400


class DependencyFailureError(ReproTrackingError):
    """The summarizer was unreachable or returned an unusable result."""

    error_code = "DEPENDENCY_FAILURE"
    status_code = 502
