"""Tenant context middleware for RLS.

Sets the current tenant ID in context from the tenant header so that
database sessions can run SET LOCAL app.current_tenant_id and RLS policies
apply. The header is only trusted after get_tenant_id validated it; invalid
values are skipped by the session setup.
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import get_settings
from app.core.request_context import set_tenant_id


def TenantContextMiddleware(app: Callable) -> Callable:
    """Set tenant context (for RLS) from the tenant header before the route runs."""

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            header = get_settings().tenant_header_name
            set_tenant_id(request.headers.get(header) or None)
            try:
                return await call_next(request)
            finally:
                set_tenant_id(None)

    return _Middleware(app)
