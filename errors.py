"""Exception classes for the Schedule-Forge pipeline.

These are raised inside stage implementations and converted to tagged
results at stage boundaries (see contracts.outcomes). Nothing above the
pipeline boundary should see them.
"""


class ScheduleForgeError(Exception):
    """Base exception for all Schedule-Forge errors."""
    pass


class DocumentUnreadable(ScheduleForgeError):
    """Raised by a content store when a document cannot be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read document {path}: {reason}")


class ModelInvocationFailure(ScheduleForgeError):
    """Raised when the generator call fails (network, auth, timeout)."""
    pass


class MalformedOutput(ScheduleForgeError):
    """Raised when no recovery strategy can extract a structured object."""
    pass
