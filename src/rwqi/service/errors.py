"""
RWQI request errors

Only caller-facing failures are exceptions. Upstream outages are not: a
river with no reachable data yields a "coming_soon" result instead.
"""


class RWQIError(Exception):
    """Base class for request errors"""
    status_code = 500


class ValidationError(RWQIError):
    """Raised when the river query is missing or empty"""
    status_code = 400


class RiverNotFoundError(RWQIError):
    """Raised when the query doesn't resolve to any registered river"""
    status_code = 404
