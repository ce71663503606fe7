from .observability import ObservabilityMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "ObservabilityMiddleware",
    "SecurityHeadersMiddleware",
]
