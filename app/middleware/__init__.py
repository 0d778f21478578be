"""
HTTP middleware: security headers and per-client rate limiting.
"""
from app.middleware.security_headers import add_security_headers_middleware
from app.middleware.rate_limiter import add_rate_limit_middleware

__all__ = ["add_security_headers_middleware", "add_rate_limit_middleware"]
