"""
Mood Journal — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the server and the client.
How:   Each exception carries a user-facing message and an optional context
       dict. Server-side classes have a `status_code`; global exception
       handlers (registered in main.py) turn them into `{"error": message}`
       JSON responses. Client-side classes are raised by the HTTP wrapper.

Exception Hierarchy:
    JournalError (base)                  → 500
    ├── ValidationError                  → 400 Bad Request (client can fix)
    ├── AuthenticationError              → 401 Unauthorized
    ├── NotFoundError                    → 404 Not Found (missing OR not yours)
    ├── DatabaseError                    → 500 Internal Server Error
    ├── ConfigurationError               client: backend URL not configured
    └── ApiError                         client: server answered with non-2xx

`context` is logged server-side but never returned to API consumers.
"""

from typing import Any, Dict, Optional


class JournalError(Exception):
    """
    Base exception for all Mood Journal application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JournalError):
    """
    Raised when client input fails a business rule.

    When:    Missing/blank title or content, unknown entry type or mood,
             checklist content that does not decode as checklist items.
    HTTP:    400 Bad Request
    """

    status_code = 400

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


class AuthenticationError(JournalError):
    """
    Raised when a request has no usable session.

    Server:  missing, malformed or rejected bearer token (401).
    Client:  no token could be resolved; raised before any network call.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(JournalError):
    """
    Raised when a requested resource does not exist for the caller.

    Entries owned by another user are reported exactly like missing ones,
    so the response never reveals that someone else's entry exists.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource[:1].upper()}{resource[1:]} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(JournalError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original
    exception type and the operation context are logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(JournalError):
    """Raised by the client when the backend URL is not configured."""

    def __init__(
        self,
        message: str = "Backend URL is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ApiError(JournalError):
    """
    Raised by the client for any non-2xx response.

    Attributes:
        status_code: HTTP status returned by the server
        body:        raw response body text
    """

    def __init__(self, status_code: int, body: str):
        super().__init__(
            message=f"API Error: {status_code} - {body}",
            context={"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body
