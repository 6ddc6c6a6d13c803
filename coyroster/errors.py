"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when a request fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class AccessDenied(AppError):
    """Raised when a user may not perform an operation on a collection."""

    def __init__(self, message="You do not have permission to do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class CollaboratorError(AppError):
    """Base for failures of Firestore reads and writes.

    The underlying exception is kept on ``cause`` as well as ``__cause__``.
    """

    def __init__(self, message, cause=None, status_code=502):
        """Initialize the error."""
        super().__init__(message, status_code)
        self.cause = cause


class FetchFailed(CollaboratorError):
    """Raised when a membership document could not be read."""

    def __init__(self, message="Could not load collection members.", cause=None):
        """Initialize the error."""
        super().__init__(message, cause, 503)


class PromotionFailed(CollaboratorError):
    """Raised when adding a user to a collection's admins fails."""

    def __init__(self, message="Could not promote member.", cause=None):
        """Initialize the error."""
        super().__init__(message, cause)


class DemotionFailed(CollaboratorError):
    """Raised when removing a user from a collection's admins fails."""

    def __init__(self, message="Could not demote admin.", cause=None):
        """Initialize the error."""
        super().__init__(message, cause)


class MembershipUpdateFailed(CollaboratorError):
    """Raised when removing a user from a collection fails."""

    def __init__(self, message="Could not update collection members.", cause=None):
        """Initialize the error."""
        super().__init__(message, cause)
