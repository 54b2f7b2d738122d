class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class MalformedTimeError(AppError):
    """Raised when a time-of-day value cannot be normalized to HH:MM:SS."""
    def __init__(self, value: object):
        super().__init__(
            f"Malformed time value: {value!r}",
            status_code=422,
            details={"value": str(value)},
        )
        self.value = value

class InvalidDecisionError(AppError):
    """Raised when a cancel/replace decision is incomplete or inconsistent."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class InvalidEntryError(AppError):
    """Raised when a schedule entry fails validation after request parsing."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class RepositoryError(AppError):
    """Raised when the schedule store fails to read or write."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=502, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
