"""
User Model
Application user bound to an external identity
"""

from sqlalchemy import Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from floortrack.core.roles import Role as RoleName
from floortrack.models.base import BaseModel, BigIntId, TimestampMixin


class User(BaseModel, TimestampMixin):
    __tablename__ = "users"

    firebase_uid = Column(String(128), nullable=False, unique=True)
    email = Column(String(254), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role_id = Column(BigIntId, ForeignKey("roles.id"), nullable=False, index=True)

    role = relationship("Role")
    user_groups = relationship("UserGroup", back_populates="user", order_by="UserGroup.group_id")
    owned_devices = relationship("UserOwnedDevice", back_populates="user")

    __table_args__ = (
        Index("ix_user_role_created", "role_id", "created_at"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def role_name(self) -> RoleName:
        return RoleName.from_name(self.role.name if self.role else None)

    @property
    def group_ids(self) -> list[int]:
        return [membership.group_id for membership in self.user_groups or []]
