"""
Group Models
Scoping units and their user memberships
"""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from floortrack.core.database import Base
from floortrack.models.base import BaseModel, BigIntId


class Group(BaseModel):
    """A named set of users sharing the same scoping grants"""
    __tablename__ = "groups"

    name = Column(String(100), nullable=False, unique=True)

    memberships = relationship("UserGroup", back_populates="group")

    def __repr__(self):
        return f"<Group(id={self.id}, name='{self.name}')>"


class UserGroup(Base):
    """(user, group) membership pair; the pair is the primary key"""
    __tablename__ = "user_groups"

    user_id = Column(BigIntId, ForeignKey("users.id"), primary_key=True)
    group_id = Column(BigIntId, ForeignKey("groups.id"), primary_key=True, index=True)

    user = relationship("User", back_populates="user_groups")
    group = relationship("Group", back_populates="memberships")

    def __repr__(self):
        return f"<UserGroup(user_id={self.user_id}, group_id={self.group_id})>"
