from typing import List, Optional


class WarrantyError(Exception):
    """Base error for the warranty core. Rendered to JSON by the app's exception handler."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(WarrantyError):
    """Missing or malformed field, bad date ordering, invalid enum value."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[List[dict]] = None):
        if field and not errors:
            errors = [{"field": field, "message": message}]
        super().__init__(message, errors)


class NotFoundError(WarrantyError):
    status_code = 404


class DomainError(WarrantyError):
    """A business rule refused the operation (e.g. no active warranty to claim against)."""

    status_code = 400


class InternalError(WarrantyError):
    status_code = 500
