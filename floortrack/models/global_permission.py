"""
GlobalPermission Model
(group, building, floor) grant rows mediating scoped access
"""

from sqlalchemy import Column, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from floortrack.models.base import BaseModel, BigIntId


class GlobalPermission(BaseModel):
    """The floor must belong to the building; checked before insert"""
    __tablename__ = "global_permissions"

    group_id = Column(BigIntId, ForeignKey("groups.id"), nullable=False, index=True)
    building_id = Column(BigIntId, ForeignKey("buildings.id"), nullable=False, index=True)
    floor_id = Column(BigIntId, ForeignKey("floors.id"), nullable=False, index=True)

    group = relationship("Group")
    building = relationship("Building")
    floor = relationship("Floor")

    __table_args__ = (
        UniqueConstraint("group_id", "building_id", "floor_id", name="uq_global_permission_grant"),
    )

    def __repr__(self):
        return (
            f"<GlobalPermission(id={self.id}, group_id={self.group_id}, "
            f"building_id={self.building_id}, floor_id={self.floor_id})>"
        )
