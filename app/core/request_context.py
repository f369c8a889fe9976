"""Per-request context variables: tenant ID (RLS) and request ID (logging).

TenantContextMiddleware sets the tenant so get_db / transactional_session can
run SET LOCAL app.current_tenant_id. RequestIDMiddleware sets the request ID
so log records carry it (RequestIdLogFilter).
"""

from contextvars import ContextVar

current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)
current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_tenant_id(tenant_id: str | None) -> None:
    """Set the current tenant ID for this context (e.g. request)."""
    current_tenant_id.set(tenant_id)


def get_tenant_id() -> str | None:
    """Return the current tenant ID if set."""
    return current_tenant_id.get()


def set_request_id(request_id: str | None) -> None:
    current_request_id.set(request_id)


def get_request_id() -> str | None:
    return current_request_id.get()
