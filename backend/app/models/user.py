from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from datetime import datetime
from typing import Set

from app.core.database import Base
from app.core.types import GUID, generate_uuid


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", GUID, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", GUID, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", GUID, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(Base):
    """A named capability, e.g. 'domains-create'"""
    __tablename__ = "permissions"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    roles = relationship("Role", secondary=role_permissions, back_populates="permissions")

    def __repr__(self):
        return f"<Permission {self.name}>"


class Role(Base):
    """Role grouping capabilities (system, admin, reseller, member)"""
    __tablename__ = "roles"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    permissions = relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        order_by="Permission.name",
    )
    users = relationship("User", secondary=user_roles, back_populates="roles")

    def __repr__(self):
        return f"<Role {self.name}>"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True)
    is_superuser = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    roles = relationship("Role", secondary=user_roles, back_populates="users")

    @property
    def role_names(self) -> Set[str]:
        return {role.name for role in self.roles}

    @property
    def capabilities(self) -> Set[str]:
        """Union of every permission granted through the user's roles.

        Requires `roles` and `roles.permissions` to be loaded.
        """
        return {permission.name for role in self.roles for permission in role.permissions}

    def has_capability(self, name: str) -> bool:
        if self.is_superuser:
            return True
        return name in self.capabilities

    def __repr__(self):
        return f"<User {self.email}>"
