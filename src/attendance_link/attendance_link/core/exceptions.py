class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced course, holiday or record does not exist."""


class LinkInactiveError(DomainError):
    """Raised when a token is presented for a course whose link is Inactive."""


class TokenExpiredError(DomainError):
    """Raised when a scanned token is older than the accepted window."""


class OutOfRangeError(DomainError):
    """Raised when the scanner is too far from the location bound to the token."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
