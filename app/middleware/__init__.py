"""HTTP middleware: request ID and tenant context.

Applied in main app; order matters (first added = outermost).
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.tenant_context import TenantContextMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TenantContextMiddleware",
]
