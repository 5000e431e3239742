"""Domain errors raised by the matching core.

Quota exhaustion and insufficient-data scoring are results, not errors,
and have no class here.
"""


class MatchCoreError(Exception):
    """Base class for every error the core raises."""


class ProfileValidationError(MatchCoreError, ValueError):
    pass


class SelfSwipeError(MatchCoreError, ValueError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} cannot swipe on themselves")
        self.user_id = user_id


class ProfileNotFoundError(MatchCoreError, LookupError):
    def __init__(self, user_id: str):
        super().__init__(f"Profile {user_id} not found")
        self.user_id = user_id


class StorageUnavailableError(MatchCoreError):
    """The persistence backend failed; the caller owns the retry policy."""
