"""
Location Schemas
Buildings, floors and access points
"""

from typing import Optional

from pydantic import Field

from floortrack.core.identifiers import IdIn, StrId
from floortrack.schemas.base import BaseSchema, LongName, RequiredText


class BuildingCreate(BaseSchema):
    name: LongName


class BuildingUpdate(BaseSchema):
    name: LongName


class BuildingResponse(BaseSchema):
    id: StrId
    name: str


class FloorCreate(BaseSchema):
    name: LongName
    svg_map: RequiredText
    building_id: IdIn


class FloorUpdate(BaseSchema):
    name: Optional[LongName] = None
    svg_map: Optional[str] = Field(None, min_length=1)


class FloorCreated(BaseSchema):
    id: StrId
    name: str
    building_id: StrId


class FloorUpdated(BaseSchema):
    id: StrId
    name: str


class FloorListItem(BaseSchema):
    id: StrId
    name: str
    building_id: StrId
    building_name: Optional[str] = None


class FloorDetail(BaseSchema):
    id: StrId
    name: str
    svg_map: str


class AccessPointCreate(BaseSchema):
    name: LongName
    cx: float
    cy: float
    floor_id: IdIn


class AccessPointUpdate(BaseSchema):
    name: Optional[LongName] = None
    cx: Optional[float] = None
    cy: Optional[float] = None


class AccessPointSummary(BaseSchema):
    id: StrId
    name: str


class AccessPointListItem(BaseSchema):
    id: StrId
    name: str
    cx: float
    cy: float
    floor_id: StrId
    building_id: StrId
