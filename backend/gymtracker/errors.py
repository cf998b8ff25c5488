"""Domain errors. Each carries a message key resolved by :mod:`gymtracker.messages`."""
from __future__ import annotations


class TrackerError(Exception):
    status_code = 400
    key = "generic_error"

    def __init__(self, key: str | None = None, **params):
        self.key = key or self.key
        self.params = params
        super().__init__(self.key)


class RoutineValidationError(TrackerError):
    key = "routine_invalid"


class FormatError(TrackerError):
    """Import payload is not a history export."""
    key = "import_invalid_format"


class InvalidTransition(TrackerError):
    status_code = 409
    key = "invalid_transition"


class ConfirmationRequired(TrackerError):
    status_code = 409
    key = "confirmation_required"


class NotFound(TrackerError):
    status_code = 404
    key = "not_found"


class PersistenceError(TrackerError):
    status_code = 503
    key = "persistence_failed"


class AuthError(TrackerError):
    """Carries a provider-style code such as ``auth/weak-password``."""
    key = "auth/unknown"

    def __init__(self, code: str, status_code: int = 400):
        super().__init__(code)
        self.status_code = status_code
