class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulingConflictError(AppError):
    """Raised when the scheduling gate refuses a course placement."""
    def __init__(self, reason: str, conflicting_course_id: int | None = None):
        super().__init__(
            "Time slot conflict detected",
            status_code=409,
            details={"reason": reason, "conflicting_course_id": conflicting_course_id},
        )

class ResourceInUseError(AppError):
    """Raised when deleting a teacher or room that courses still reference."""
    def __init__(self, message: str, course_count: int):
        super().__init__(message, status_code=400, details={"course_count": course_count})

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
