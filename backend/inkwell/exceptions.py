"""
Inkwell Backend: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for each failure the API can report.
Why:   Each class maps to exactly one HTTP status code, so route handlers
       never build error responses themselves.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers (registered in main.py) translate them into
       JSON error responses; the context is logged, never returned.

Exception Hierarchy:
    InkwellError (base)
    ├── AuthenticationError   → 401 (missing or invalid credential)
    ├── NotAuthorizedError    → 401 (caller does not own the post)
    ├── NotFoundError         → 404 (absent post or malformed identifier)
    ├── ValidationError       → 400 (business-rule input error)
    └── DatabaseError         → 500 (store failure, generic message)
"""

import enum
from typing import Any, Dict, Optional


class InkwellError(Exception):
    """
    Base exception for all Inkwell application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class CredentialFailure(str, enum.Enum):
    """
    Why a request carrying (or lacking) a credential was rejected.

    The value is the message returned to the client.
    """

    MISSING = "No token, authorization denied"
    INVALID = "Token is not valid"

    @property
    def code(self) -> str:
        return f"{self.name.lower()}_credential"


class AuthenticationError(InkwellError):
    """
    Raised when a private endpoint is called without a usable credential.

    What:    The Authorization header was absent, or its token failed
             verification (bad signature, malformed, expired, unknown user).
    HTTP:    401 Unauthorized

    The failure kind is kept so the response can say which of the two
    happened; both map to the same status code.
    """

    def __init__(
        self,
        failure: CredentialFailure = CredentialFailure.INVALID,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message or failure.value, context=context)
        self.failure = failure


class NotAuthorizedError(InkwellError):
    """
    Raised when an authenticated caller mutates a post they did not write.

    HTTP:    401 Unauthorized (kept from the public API contract; the token is
             fine, the ownership check is not)
    """

    def __init__(
        self,
        message: str = "User not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(InkwellError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /posts/{id} with an unknown id, or with an id that
             is not a valid UUID at all. The two cases are deliberately not
             distinguished to the caller.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ValidationError(InkwellError):
    """
    Raised when client input breaks a business rule.

    When:    Registering with a username or email that is already taken.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, wrong types) never reach this
    class; FastAPI answers those with 422 on its own.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(InkwellError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        exception type and the ids involved go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
