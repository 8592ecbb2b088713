"""
Exceptions raised by the scheduler, the review session and the stores.
"""


class FlashboxError(Exception):
    """Base exception for all Flashbox errors."""
    pass


class InvalidScheduleError(FlashboxError, ValueError):
    """Scheduling data violates an invariant (bad box, bad date, unknown outcome).

    Indicates corruption upstream; never retried.
    """
    pass


class PersistenceError(FlashboxError):
    """A store write failed for a reason that may go away on retry."""
    pass


class SessionExhaustedError(FlashboxError):
    """An action was requested on a review session with no current card."""
    pass


class NotFoundError(FlashboxError):
    """Raised when a requested resource is not found."""
    pass
