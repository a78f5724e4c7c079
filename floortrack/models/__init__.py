"""
SQLAlchemy Models Package
"""

from floortrack.models.role import Role
from floortrack.models.group import Group, UserGroup
from floortrack.models.building import Building, Floor, AccessPoint
from floortrack.models.device import ClientDevice, UserOwnedDevice
from floortrack.models.global_permission import GlobalPermission
from floortrack.models.user import User

__all__ = [
    "Role",
    "Group",
    "UserGroup",
    "Building",
    "Floor",
    "AccessPoint",
    "ClientDevice",
    "UserOwnedDevice",
    "GlobalPermission",
    "User",
]
