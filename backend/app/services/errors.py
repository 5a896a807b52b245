"""
Error taxonomy for scheduling and standings.

InvalidArgumentError carries a human-readable reason the caller can act on.
InternalError carries nothing for the caller; details go to the server log.
"""


class SchedulingError(Exception):
    """Base exception for scheduling and leaderboard errors"""

    pass


class InvalidArgumentError(SchedulingError):
    """Business rule violated; message is safe to return to the caller"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InternalError(SchedulingError):
    """Unexpected failure (e.g. persistence error mid-transaction)"""

    pass
