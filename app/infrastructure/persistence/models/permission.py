"""TenantRolePermission and UserTenantRole ORM models (role grants and assignments)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin


class TenantRolePermission(CuidMixin, Base):
    """One (module, action) row of a role. Table: tenant_role_permission.

    Only rows with allowed = true grant anything; allowed = false rows are kept
    so the role editor can show explicit revocations.
    """

    __tablename__ = "tenant_role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant_role.id", ondelete="CASCADE"), nullable=False
    )
    module: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint(
            "role_id", "module", "action", name="uq_tenant_role_permission"
        ),
        Index("ix_tenant_role_permission_role", "role_id"),
    )


class UserTenantRole(CuidMixin, TenantMixin, Base):
    """User-role assignment. Table: user_tenant_role.

    user_id comes from the identity provider; there is no local user table.
    """

    __tablename__ = "user_tenant_role"

    user_id: Mapped[str] = mapped_column(String, nullable=False)
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant_role.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_tenant_role"),
        Index("ix_user_tenant_role_lookup", "tenant_id", "user_id"),
    )
