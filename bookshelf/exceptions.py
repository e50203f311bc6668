"""Exception hierarchy for the library manager."""


class LibraryError(Exception):
    """Base exception for all library manager errors."""

    pass


class ValidationError(LibraryError):
    """Raised when user input (ISBN, email, name, password) is malformed."""

    pass


class NotFoundError(LibraryError):
    """Raised when a catalog record, user or membership does not exist."""

    pass


class ConflictError(LibraryError):
    """Raised when an email or a membership already exists."""

    pass


class StoreError(LibraryError):
    """Raised when the datastore connection or a transaction fails."""

    pass


class TransportError(LibraryError):
    """Raised when the catalog service cannot be reached or answers badly."""

    def __init__(self, message: str, status_code=None):
        """
        Initialize the exception.

        Args:
            message: Human readable description
            status_code: HTTP status returned by the service, if any
        """
        self.status_code = status_code
        super().__init__(message)
