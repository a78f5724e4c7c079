"""
Profile Schemas
"""

from datetime import datetime
from typing import List, Optional

from floortrack.core.identifiers import StrId
from floortrack.schemas.access import GroupResponse, RoleResponse
from floortrack.schemas.base import BaseSchema, ShortName


class ProfileUser(BaseSchema):
    id: StrId
    email: str
    first_name: str
    last_name: str
    role: Optional[RoleResponse] = None
    groups: List[GroupResponse] = []


class ProfileResponse(BaseSchema):
    user: ProfileUser


class ProfileUpdate(BaseSchema):
    first_name: Optional[ShortName] = None
    last_name: Optional[ShortName] = None


class ProfileUpdated(BaseSchema):
    id: StrId
    first_name: str
    last_name: str


class ConnectedAccessPoint(BaseSchema):
    id: StrId
    name: str
    floor_id: StrId


class ApConnection(BaseSchema):
    mac: str
    ap: Optional[ConnectedAccessPoint] = None
    updated_at: Optional[datetime] = None


class ApConnectionsResponse(BaseSchema):
    connections: List[ApConnection]
