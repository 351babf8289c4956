"""
Bulletin Board API — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios a handler meets.
How:   Each exception carries a message and an optional context dict.
       The router (bulletin.router) is the single place that turns these
       into response envelopes.
Who:   Raised by services and route handlers; rendered by the router.

Exception Hierarchy:
    BulletinError (base)
    ├── ValidationError    → 400 {"error": <message>}
    ├── NotFoundError      → 404 {"error": "Not found"}
    ├── DatabaseError      → 500 {"error": "Server Error"}
    ├── AnalysisError      → 500 {"error": "Server Error"}
    └── MediaUploadError   → 500 {"error": <vendor message>} (upload handler only)

`context` is for server-side logs only and never reaches the response body.
"""

from typing import Any, Dict, List, Optional


class BulletinError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Human-readable description
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BulletinError):
    """
    Raised when client input fails an operation's input schema.

    When:    Missing required field, wrong type, malformed path parameter.
    HTTP:    400 Bad Request

    `fields` lists the offending field names; the message already names them
    so the response body stays a single string.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class NotFoundError(BulletinError):
    """
    Raised when a requested entity does not exist.

    When:    GET /posts/{id} with an id that matches no row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(BulletinError):
    """
    Raised when a statement fails at the storage layer.

    When:    Connection lost, constraint violation (e.g. a response whose
             post_id references no listing), NOT NULL rejection.
    HTTP:    500 Internal Server Error — the response body is always generic.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AnalysisError(BulletinError):
    """
    Raised when the analysis model call fails.

    No retry is attempted; the router answers with the generic 500 body.
    """

    def __init__(
        self,
        message: str = "Image analysis failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MediaUploadError(BulletinError):
    """
    Raised when the media host rejects or fails an upload.

    Unlike the other vendor failure, the vendor's message IS returned to the
    caller: the upload handler renders `{"error": message}` with status 500.
    """

    def __init__(
        self,
        message: str = "Upload failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
