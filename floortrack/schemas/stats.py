"""
Floor Statistics Schemas
"""

from typing import List

from floortrack.core.identifiers import StrId
from floortrack.schemas.base import BaseSchema


class TotalDevicesResponse(BaseSchema):
    floor_id: StrId
    total_devices: int


class TotalApsResponse(BaseSchema):
    floor_id: StrId
    total_aps: int


class ApDeviceCount(BaseSchema):
    ap_id: StrId
    title: str
    cx: float
    cy: float
    device_count: int


class DevicesByApResponse(BaseSchema):
    floor_id: StrId
    aps: List[ApDeviceCount]
