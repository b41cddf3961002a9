from typing import Optional


class AppException(Exception):
    """Base application exception."""

    pass


class NotFoundError(AppException):
    """Resource not found exception."""

    pass


class ValidationError(AppException):
    """Validation error exception."""

    pass


class StorageError(AppException):
    """Persistence layer unavailable or constraint violation."""

    pass


class TeamLookupError(AppException, LookupError):
    """Team or team member enumeration failed."""

    pass


class RemoteError(AppException):
    """Payments service returned an error status or broke its response contract."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GateBlocked(AppException):
    """Payment is required and absent. A business refusal, not a fault."""

    pass


class BillingError(AppException):
    """User-visible billing failure, e.g. nothing to sync against."""

    pass


class OrganizationNameTakenError(ValidationError):
    """An organization with the requested name already exists."""

    def __init__(self, name: str):
        super().__init__(f"Organization name '{name}' has already been taken")
        self.name = name
