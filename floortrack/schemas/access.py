"""
Access Management Schemas
Roles, groups, global permissions and pending-user assignment
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from floortrack.core.identifiers import IdIn, StrId
from floortrack.schemas.base import BaseSchema, ShortName


class RoleResponse(BaseSchema):
    id: StrId
    name: str


class GroupCreate(BaseSchema):
    name: ShortName


class GroupUpdate(BaseSchema):
    name: ShortName


class GroupResponse(BaseSchema):
    id: StrId
    name: str


class GlobalPermissionCreate(BaseSchema):
    group_id: IdIn
    building_id: IdIn
    floor_id: IdIn


class GlobalPermissionUpdate(BaseSchema):
    """Omitted fields keep their current value"""
    group_id: Optional[IdIn] = None
    building_id: Optional[IdIn] = None
    floor_id: Optional[IdIn] = None


class GlobalPermissionResponse(BaseSchema):
    id: StrId
    group_id: StrId
    group_name: Optional[str] = None
    building_id: StrId
    building_name: Optional[str] = None
    floor_id: StrId
    floor_name: Optional[str] = None


class PendingUserResponse(BaseSchema):
    id: StrId
    email: str
    created_at: datetime


class AssignPendingUserRequest(BaseSchema):
    role_id: IdIn
    group_ids: List[IdIn] = Field(..., min_length=1)

    @field_validator("group_ids")
    @classmethod
    def collapse_repeats(cls, v):
        return list(dict.fromkeys(v))
