"""
Error taxonomy for the Study Buddy backend.

Every error carries the HTTP status the router answers with.
"""


class StudyBuddyError(Exception):
    """Base class for errors surfaced as ``{"error": message}``."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudyBuddyError):
    """A required request field is missing or invalid."""

    status_code = 400


class NotFound(StudyBuddyError):
    """Lookup on a session that has no stored record."""

    status_code = 404

    def __init__(self, message: str = "Session not found"):
        super().__init__(message)


class NotInitialized(StudyBuddyError):
    """Mutation attempted before the session record exists."""

    status_code = 500

    def __init__(self, message: str = "Session not initialized"):
        super().__init__(message)


class UpstreamFailure(StudyBuddyError):
    """The language model call failed or returned garbage. Recovered locally."""

    status_code = 502


class StorageFailure(StudyBuddyError):
    """The session store could not load or save a record."""

    status_code = 500
