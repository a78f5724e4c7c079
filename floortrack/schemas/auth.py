"""
Authentication Schemas
"""

from typing import List

from floortrack.core.identifiers import StrId
from floortrack.schemas.base import BaseSchema, EmailText, RequiredText, ShortName


class RegisterRequest(BaseSchema):
    first_name: ShortName
    last_name: ShortName
    email: EmailText
    password: RequiredText


class LoginRequest(BaseSchema):
    email: EmailText
    password: RequiredText


class ResetPasswordRequest(BaseSchema):
    email: EmailText


class SessionUser(BaseSchema):
    uid: str
    email: str


class LoginResponse(BaseSchema):
    message: str
    user: SessionUser


class MeResponse(BaseSchema):
    """The application user bound to the current session"""
    id: StrId
    email: str
    first_name: str
    last_name: str
    role: str
    role_id: StrId
    group_ids: List[StrId]
