"""
Device Schemas
Network client devices and self-registered devices
"""

from datetime import datetime
from typing import Optional

from floortrack.core.identifiers import IdIn, StrId
from floortrack.schemas.base import BaseSchema, MacText, ShortName


class ClientDeviceCreate(BaseSchema):
    mac: MacText
    ap_id: IdIn


class ClientDeviceUpdate(BaseSchema):
    mac: Optional[MacText] = None
    ap_id: Optional[IdIn] = None


class ClientDeviceCreated(BaseSchema):
    id: StrId
    mac: str


class ClientDeviceUpdated(BaseSchema):
    id: StrId
    mac: str
    ap_id: StrId
    floor_id: StrId


class ClientDeviceListItem(BaseSchema):
    id: StrId
    mac: str
    ap_id: StrId
    floor_id: StrId
    building_id: StrId
    created_at: datetime


class OwnedDeviceCreate(BaseSchema):
    name: ShortName
    mac: MacText


class OwnedDeviceUpdate(BaseSchema):
    name: Optional[ShortName] = None
    mac: Optional[MacText] = None


class OwnedDeviceResponse(BaseSchema):
    id: StrId
    name: str
    mac: str
