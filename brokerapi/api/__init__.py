"""HTTP layer: routes, Basic authentication, error handlers, request context."""
