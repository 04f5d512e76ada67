"""Custom exceptions for the receipt tracker application."""


class ReceiptTrackerException(Exception):
    """Base exception for all receipt tracker errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ReceiptTrackerException):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(ReceiptTrackerException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ConflictError(ReceiptTrackerException):
    """Raised when there's a conflict (e.g., duplicate resource)."""

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message, status_code=409)


class UnsupportedMediaError(ReceiptTrackerException):
    """Raised when an upload has a MIME type outside the allow-list."""

    def __init__(self, message: str = "Unsupported file type"):
        super().__init__(message, status_code=415)


class AdapterFailure(ReceiptTrackerException):
    """Raised when a call to the external AI service fails."""

    def __init__(self, message: str = "External service call failed"):
        super().__init__(message, status_code=500)


class ParseFailure(AdapterFailure):
    """Raised when a receipt image cannot be turned into structured data."""

    def __init__(self, message: str = "Receipt parsing failed"):
        super().__init__(message)


class SummaryFailure(AdapterFailure):
    """Raised when a spending summary cannot be generated."""

    def __init__(self, message: str = "Summary generation failed"):
        super().__init__(message)


class StoreFailure(ReceiptTrackerException):
    """Raised when database operations fail."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)
