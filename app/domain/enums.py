"""Domain enumerations for the brokerage core.

Enums represent the closed sets the permission model is built on
(modules, actions, visibility scopes) and payment reference schemes.
"""

from enum import Enum


class _ValuesMixin:
    """Adds values() to str enums (validation, CHECK constraints, serialization)."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class PermissionModule(_ValuesMixin, str, Enum):
    """Application area a permission grant applies to."""

    CLIENTS = "clients"
    CONTRACTS = "contracts"
    PARTNERS = "partners"
    PRODUCTS = "products"
    COLLABORATORS = "collaborators"
    COMMISSIONS = "commissions"
    DECOMPTES = "decomptes"
    PAYOUT = "payout"
    DASHBOARD = "dashboard"
    SETTINGS = "settings"


class PermissionAction(_ValuesMixin, str, Enum):
    """Operation a permission grant allows within a module."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    DEPOSIT = "deposit"
    CANCEL = "cancel"
    GENERATE = "generate"
    VALIDATE = "validate"
    MODIFY_RULES = "modify_rules"


class DashboardScope(_ValuesMixin, str, Enum):
    """Dashboard visibility. Ordered personal < team < global."""

    PERSONAL = "personal"
    TEAM = "team"
    GLOBAL = "global"

    @property
    def rank(self) -> int:
        return _DASHBOARD_RANK[self]


class CommissionScope(_ValuesMixin, str, Enum):
    """Commission visibility. Ordered none < own < team < all."""

    NONE = "none"
    OWN = "own"
    TEAM = "team"
    ALL = "all"

    @property
    def rank(self) -> int:
        return _COMMISSION_RANK[self]


class QRReferenceType(_ValuesMixin, str, Enum):
    """Swiss QR-bill reference scheme. SCOR (ISO 11649) is never produced."""

    QRR = "QRR"
    SCOR = "SCOR"
    NON = "NON"


_DASHBOARD_RANK = {
    DashboardScope.PERSONAL: 0,
    DashboardScope.TEAM: 1,
    DashboardScope.GLOBAL: 2,
}

_COMMISSION_RANK = {
    CommissionScope.NONE: 0,
    CommissionScope.OWN: 1,
    CommissionScope.TEAM: 2,
    CommissionScope.ALL: 3,
}


# Actions offered per module (role editor catalogue). Grants outside this map are rejected on write.
MODULE_ACTIONS: dict[PermissionModule, tuple[PermissionAction, ...]] = {
    PermissionModule.CLIENTS: (
        PermissionAction.VIEW,
        PermissionAction.CREATE,
        PermissionAction.UPDATE,
        PermissionAction.DELETE,
        PermissionAction.EXPORT,
    ),
    PermissionModule.CONTRACTS: (
        PermissionAction.VIEW,
        PermissionAction.DEPOSIT,
        PermissionAction.UPDATE,
        PermissionAction.CANCEL,
        PermissionAction.EXPORT,
    ),
    PermissionModule.PARTNERS: (
        PermissionAction.VIEW,
        PermissionAction.CREATE,
        PermissionAction.UPDATE,
        PermissionAction.DELETE,
    ),
    PermissionModule.PRODUCTS: (
        PermissionAction.VIEW,
        PermissionAction.CREATE,
        PermissionAction.UPDATE,
        PermissionAction.DELETE,
    ),
    PermissionModule.COLLABORATORS: (
        PermissionAction.VIEW,
        PermissionAction.CREATE,
        PermissionAction.UPDATE,
        PermissionAction.DELETE,
        PermissionAction.EXPORT,
    ),
    PermissionModule.COMMISSIONS: (
        PermissionAction.VIEW,
        PermissionAction.MODIFY_RULES,
        PermissionAction.EXPORT,
    ),
    PermissionModule.DECOMPTES: (
        PermissionAction.VIEW,
        PermissionAction.GENERATE,
        PermissionAction.EXPORT,
    ),
    PermissionModule.PAYOUT: (
        PermissionAction.VIEW,
        PermissionAction.GENERATE,
        PermissionAction.VALIDATE,
        PermissionAction.EXPORT,
    ),
    PermissionModule.DASHBOARD: (PermissionAction.VIEW,),
    PermissionModule.SETTINGS: (PermissionAction.VIEW, PermissionAction.UPDATE),
}


def is_catalogued(module: PermissionModule, action: PermissionAction) -> bool:
    """Return True if action is offered for module in MODULE_ACTIONS."""
    return action in MODULE_ACTIONS.get(module, ())
