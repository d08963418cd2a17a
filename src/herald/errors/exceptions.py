"""Custom exception classes for the Herald API."""


class HeraldError(Exception):
    """Base exception for Herald."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(HeraldError):
    """Request validation failure."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(HeraldError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class DeliveryError(HeraldError):
    """A delivery channel could not hand off a notification."""

    def __init__(self, channel: str, message: str):
        super().__init__("DELIVERY_FAILED", f"{channel}: {message}", status_code=502)
        self.channel = channel


class ConflictError(HeraldError):
    """Resource state conflict."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)
