"""Domain error taxonomy.

Every error carries a machine-readable ``code`` so clients can tell *why* an
action was rejected (``daily_limit_reached`` vs ``already_completed`` vs
``insufficient_funds``) instead of showing a generic failure.
"""

from __future__ import annotations


class DreamGameError(Exception):
    """Base class for expected, user-recoverable domain errors."""

    code = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(DreamGameError, ValueError):
    """Bad input: missing reflection, non-positive price, unknown personality."""

    code = "validation_error"


class NotFoundError(DreamGameError, LookupError):
    """A milestone, challenge, listing or item does not exist."""

    code = "not_found"


class StateConflictError(DreamGameError):
    """The request is valid but the current state does not allow it."""

    code = "state_conflict"


class AlreadyCompletedError(StateConflictError):
    code = "already_completed"


class DailyLimitReachedError(StateConflictError):
    code = "daily_limit_reached"


class BossLimitReachedError(StateConflictError):
    code = "boss_limit_reached"


class InsufficientFundsError(StateConflictError):
    code = "insufficient_funds"


class NotOwnerError(StateConflictError):
    code = "not_owner"


class ContentGenerationError(Exception):
    """The content-generation collaborator failed. Always recovered locally."""
