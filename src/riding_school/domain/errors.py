"""Domain errors surfaced to API callers."""


class ValidationError(Exception):
    """Raised when a request cannot be applied to the lesson schedule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LessonNotFoundError(ValidationError):
    """Raised when a lesson id does not exist."""

    def __init__(self, message: str = "Lesson not found") -> None:
        super().__init__(message)


class PermissionDeniedError(ValidationError):
    """Raised when the caller may not act on a lesson."""
