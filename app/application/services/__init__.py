"""Application services: access control, role management, payment references."""

from app.application.services.access_control import (
    AccessControlService,
    build_permission_set,
    permission_cache_key,
)
from app.application.services.default_roles import DEFAULT_ROLES, DefaultRole
from app.application.services.payment_reference import (
    DEFAULT_IBAN_POLICY,
    IBANPolicy,
    IBANValidationResult,
    format_iban,
    format_qr_reference,
    generate_qr_reference,
    get_iban_for_qr,
    get_qr_reference_type,
    is_qr_iban,
    validate_iban,
    validate_qr_reference,
)
from app.application.services.role_service import RoleService

__all__ = [
    "DEFAULT_IBAN_POLICY",
    "DEFAULT_ROLES",
    "AccessControlService",
    "IBANPolicy",
    "IBANValidationResult",
    "RoleService",
    "DefaultRole",
    "build_permission_set",
    "format_iban",
    "format_qr_reference",
    "generate_qr_reference",
    "get_iban_for_qr",
    "get_qr_reference_type",
    "is_qr_iban",
    "validate_iban",
    "validate_qr_reference",
]
