# Middleware package init
"""
Cross-cutting request handling.

Execution order for a request:
    [Request ID] → [Access Logging] → [CORS] → Route Handler

The access logger runs inside the request-ID middleware, so every access
line carries the ID that is also returned in the X-Request-ID header.
"""
