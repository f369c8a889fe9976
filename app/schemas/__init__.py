"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.payment import (
    IBANValidateRequest,
    IBANValidationResponse,
    QRReferenceRequest,
    QRReferenceResponse,
    QRReferenceValidateRequest,
    QRReferenceValidateResponse,
)
from app.schemas.permission import (
    PermissionCatalogResponse,
    PermissionCheckResponse,
    PermissionSetResponse,
)
from app.schemas.role import (
    RoleCreate,
    RoleDuplicate,
    RolePermissionResponse,
    RolePermissionsUpdate,
    RoleResponse,
    RoleUpdate,
    UserRoleAssign,
    UserRoleAssignmentResponse,
)

__all__ = [
    "HealthResponse",
    "IBANValidateRequest",
    "IBANValidationResponse",
    "PermissionCatalogResponse",
    "PermissionCheckResponse",
    "PermissionSetResponse",
    "QRReferenceRequest",
    "QRReferenceResponse",
    "QRReferenceValidateRequest",
    "QRReferenceValidateResponse",
    "ReadinessResponse",
    "RoleCreate",
    "RoleDuplicate",
    "RolePermissionResponse",
    "RolePermissionsUpdate",
    "RoleResponse",
    "RoleUpdate",
    "UserRoleAssign",
    "UserRoleAssignmentResponse",
]
