"""Custom exceptions and error handling for the Contact Search API."""

from fastapi import HTTPException, status


class ContactSearchException(HTTPException):
    """Base exception for the Contact Search API."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


# Authentication Errors (401, 403)
class AuthenticationError(ContactSearchException):
    """Raised when login credentials are invalid."""

    def __init__(self, detail: str = "Invalid username or password"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="AUTHENTICATION_FAILED",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(ContactSearchException):
    """Raised when a token is malformed, expired, revoked or issued to someone else."""

    def __init__(self, detail: str = "Invalid token", error_code: str = "INVALID_TOKEN"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ParseError(InvalidTokenError):
    """Raised when a signed token cannot be parsed or verified."""

    def __init__(self, detail: str = "Malformed or expired token"):
        super().__init__(detail=detail, error_code="TOKEN_PARSE_ERROR")


class ForbiddenError(ContactSearchException):
    """Raised when user lacks permission for an action."""

    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN",
        )


# Resource Errors (404, 409)
class NotFoundError(ContactSearchException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} not found",
            error_code="NOT_FOUND",
        )


class ConflictError(ContactSearchException):
    """Raised when a username or email is already taken."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT",
        )


# Validation Errors (400)
class InvalidArgumentError(ContactSearchException):
    """Raised when input validation fails."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="INVALID_ARGUMENT",
        )
