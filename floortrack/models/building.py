"""
Location hierarchy models: buildings, floors and access points
"""

from sqlalchemy import Column, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from floortrack.models.base import BaseModel, BigIntId


class Building(BaseModel):
    __tablename__ = "buildings"

    name = Column(String(200), nullable=False)

    floors = relationship("Floor", back_populates="building")

    def __repr__(self):
        return f"<Building(id={self.id}, name='{self.name}')>"


class Floor(BaseModel):
    __tablename__ = "floors"

    name = Column(String(200), nullable=False)
    # Set at creation; never moved to another building
    building_id = Column(BigIntId, ForeignKey("buildings.id"), nullable=False, index=True)
    # Opaque rendering payload for the floor-plan view
    svg_map = Column(Text, nullable=False)

    building = relationship("Building", back_populates="floors")
    access_points = relationship("AccessPoint", back_populates="floor")

    def __repr__(self):
        return f"<Floor(id={self.id}, name='{self.name}', building_id={self.building_id})>"


class AccessPoint(BaseModel):
    __tablename__ = "access_points"

    name = Column(String(200), nullable=False)
    cx = Column(Float, nullable=False)
    cy = Column(Float, nullable=False)
    floor_id = Column(BigIntId, ForeignKey("floors.id"), nullable=False, index=True)

    floor = relationship("Floor", back_populates="access_points")
    client_devices = relationship("ClientDevice", back_populates="access_point")

    def __repr__(self):
        return f"<AccessPoint(id={self.id}, name='{self.name}', floor_id={self.floor_id})>"
