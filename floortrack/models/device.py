"""
Device Models
Network-observed client devices and user self-registered devices
"""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from floortrack.models.base import BaseModel, BigIntId, TimestampMixin


class ClientDevice(BaseModel, TimestampMixin):
    """A device seen on the network, attached to one AP at a time"""
    __tablename__ = "client_devices"

    # Stored trimmed and lower-cased
    mac = Column(String(32), nullable=False, unique=True)
    ap_id = Column(BigIntId, ForeignKey("access_points.id"), nullable=False, index=True)

    access_point = relationship("AccessPoint", back_populates="client_devices")

    def __repr__(self):
        return f"<ClientDevice(id={self.id}, mac='{self.mac}', ap_id={self.ap_id})>"


class UserOwnedDevice(BaseModel):
    """A MAC a user registered to be correlated with ClientDevice sightings"""
    __tablename__ = "user_devices"

    name = Column(String(100), nullable=False)
    mac = Column(String(32), nullable=False, unique=True)
    user_id = Column(BigIntId, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="owned_devices")

    def __repr__(self):
        return f"<UserOwnedDevice(id={self.id}, name='{self.name}', user_id={self.user_id})>"
