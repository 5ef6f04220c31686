"""Error kinds raised by the matching core.

Routes translate these into HTTP responses; presentation code picks the
user-facing message per kind.
"""


class MatchingError(Exception):
    """Base class for every matching-core failure."""


class UserNotEligible(MatchingError):
    """The user is inactive or has not verified their email."""

    def __init__(self, user_id, reason: str = "User is not eligible for matching"):
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"{reason}: {user_id}")


class UserNotFound(UserNotEligible):
    def __init__(self, user_id):
        super().__init__(user_id, reason="User not found")


class ProfileNotReady(MatchingError):
    """No journey embedding yet; the user has to answer more questions."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"No embedding for user {user_id} yet. Answer more journey questions.")


class NoEligibleUsers(MatchingError):
    """The candidate pool is empty: nobody else can be matched."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"No other eligible users to match with {user_id}")


class NoVectorForReference(MatchingError):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"No stored vector for reference user {user_id}")


class EmbeddingUnavailable(MatchingError):
    """The text-embedding collaborator is unreachable, timed out or misconfigured."""


class MatchQueryFailed(MatchingError):
    """Transient storage failure during a match query. Safe to retry."""


class VectorDimensionMismatch(MatchingError):
    """Vectors of different dimensions met. Configuration or migration defect."""

    def __init__(self, expected: int, actual=None):
        self.expected = expected
        self.actual = actual
        got = actual if actual is not None else "a different dimension"
        super().__init__(f"Expected a vector of dimension {expected}, got {got}")
