"""Default roles created for a new tenant (initialize_default_roles)."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.enums import (
    MODULE_ACTIONS,
    DashboardScope,
    PermissionAction as A,
    PermissionModule as M,
)


@dataclass(frozen=True)
class DefaultRole:
    """Template for a seeded role and its grants."""

    name: str
    description: str
    dashboard_scope: DashboardScope
    can_see_own_commissions: bool
    can_see_team_commissions: bool
    can_see_all_commissions: bool
    grants: tuple[tuple[M, A], ...] = field(default_factory=tuple)
    is_super_role: bool = False


DEFAULT_ROLES: tuple[DefaultRole, ...] = (
    DefaultRole(
        name="Admin Cabinet",
        description="Accès complet à toutes les fonctionnalités",
        dashboard_scope=DashboardScope.GLOBAL,
        can_see_own_commissions=True,
        can_see_team_commissions=True,
        can_see_all_commissions=True,
        grants=tuple(
            (module, action)
            for module, actions in MODULE_ACTIONS.items()
            for action in actions
        ),
        is_super_role=True,
    ),
    DefaultRole(
        name="Manager",
        description="Accès équipe + clients personnels, dashboard équipe",
        dashboard_scope=DashboardScope.TEAM,
        can_see_own_commissions=True,
        can_see_team_commissions=True,
        can_see_all_commissions=False,
        grants=(
            (M.CLIENTS, A.VIEW),
            (M.CLIENTS, A.CREATE),
            (M.CLIENTS, A.UPDATE),
            (M.CLIENTS, A.EXPORT),
            (M.CONTRACTS, A.VIEW),
            (M.CONTRACTS, A.DEPOSIT),
            (M.CONTRACTS, A.UPDATE),
            (M.CONTRACTS, A.EXPORT),
            (M.COLLABORATORS, A.VIEW),
            (M.COMMISSIONS, A.VIEW),
            (M.DECOMPTES, A.VIEW),
            (M.DASHBOARD, A.VIEW),
            (M.SETTINGS, A.VIEW),
        ),
    ),
    DefaultRole(
        name="Agent",
        description="Accès uniquement à ses clients et contrats",
        dashboard_scope=DashboardScope.PERSONAL,
        can_see_own_commissions=True,
        can_see_team_commissions=False,
        can_see_all_commissions=False,
        grants=(
            (M.CLIENTS, A.VIEW),
            (M.CLIENTS, A.CREATE),
            (M.CLIENTS, A.UPDATE),
            (M.CONTRACTS, A.VIEW),
            (M.CONTRACTS, A.DEPOSIT),
            (M.COMMISSIONS, A.VIEW),
            (M.DASHBOARD, A.VIEW),
        ),
    ),
    DefaultRole(
        name="Back-office",
        description="Voit tous les clients et contrats, aucun accès finance",
        dashboard_scope=DashboardScope.GLOBAL,
        can_see_own_commissions=False,
        can_see_team_commissions=False,
        can_see_all_commissions=False,
        grants=(
            (M.CLIENTS, A.VIEW),
            (M.CLIENTS, A.CREATE),
            (M.CLIENTS, A.UPDATE),
            (M.CLIENTS, A.EXPORT),
            (M.CONTRACTS, A.VIEW),
            (M.CONTRACTS, A.DEPOSIT),
            (M.CONTRACTS, A.UPDATE),
            (M.CONTRACTS, A.EXPORT),
            (M.PARTNERS, A.VIEW),
            (M.PRODUCTS, A.VIEW),
            (M.COLLABORATORS, A.VIEW),
            (M.DASHBOARD, A.VIEW),
            (M.SETTINGS, A.VIEW),
        ),
    ),
)
