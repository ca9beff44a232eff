"""Custom exceptions for PharmaDesk frontend.

This module defines a hierarchy of exceptions for better error handling
and more informative error messages.

Field validation problems are not exceptions: they are reported as
ValidationResult values (see frontend.utils.validators) and never leave
the form controller.

Exception Hierarchy:
    PharmaDeskError (base)
    └── RemoteError
        ├── NotFoundError
        └── DuplicateNameError
"""

from typing import Optional


class PharmaDeskError(Exception):
    """Base exception for PharmaDesk.

    All custom exceptions in this application should inherit from this class.
    This allows catching all application-specific errors with a single except clause.

    Example:
        >>> try:
        ...     risky_operation()
        ... except PharmaDeskError as e:
        ...     handle_error(e)
    """

    def __init__(self, message: str = "An error occurred in PharmaDesk"):
        self.message = message
        super().__init__(self.message)


class RemoteError(PharmaDeskError):
    """Raised when a call to the backend API fails.

    Covers transport failures (connection refused, timeouts), non-success
    HTTP responses and malformed response bodies. The user can recover by
    retrying the action that triggered the call.

    Attributes:
        operation: What was being attempted (e.g., 'creating variant')
        status_code: HTTP status code (if a response was received)

    Example:
        >>> raise RemoteError(
        ...     "Error creating variant: HTTP 500",
        ...     operation="creating variant",
        ...     status_code=500
        ... )
    """

    def __init__(
        self,
        message: str = "Remote call failed",
        operation: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(RemoteError):
    """Raised when the requested record does not exist on the backend.

    Typically the record was deleted between fetching the list and acting
    on one of its rows.

    Attributes:
        entity_id: Identifier that could not be found

    Example:
        >>> raise NotFoundError("Variant not found", entity_id="abc123")
    """

    def __init__(
        self,
        message: str = "Record not found",
        entity_id: Optional[str] = None,
        operation: Optional[str] = None
    ):
        self.entity_id = entity_id
        super().__init__(message, operation=operation, status_code=404)


class DuplicateNameError(RemoteError):
    """Raised when the backend rejects a name that already exists.

    Local validation works from a name list fetched when the form opened,
    so another user may have taken the name in the meantime. The backend
    is the final arbiter and answers with HTTP 409.

    Example:
        >>> raise DuplicateNameError("Variant Name already exists")
    """

    def __init__(self, message: str = "Name already exists", operation: Optional[str] = None):
        super().__init__(message, operation=operation, status_code=409)
