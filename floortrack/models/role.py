"""
Role Model
Fixed reference data; one role per user
"""

from sqlalchemy import Column, String

from floortrack.core.roles import Role as RoleName
from floortrack.models.base import BaseModel


class Role(BaseModel):
    __tablename__ = "roles"

    name = Column(String(50), nullable=False, unique=True)

    def __repr__(self):
        return f"<Role(id={self.id}, name='{self.name}')>"

    @property
    def role(self) -> RoleName:
        return RoleName.from_name(self.name)
