"""
Base Pydantic Schemas
Common configuration for request and response models
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )


class OkResponse(BaseModel):
    ok: bool = True


class MessageResponse(BaseModel):
    message: str


class DiagnosticsResponse(BaseModel):
    ok: bool = True
    uid: str
    db: datetime


class ErrorResponse(BaseModel):
    """Error response schema"""
    error: str = Field(..., description="Short, client-safe error message")
    details: Optional[List[Any]] = Field(None, description="Field-level validation details")


# Present and non-blank after stripping
RequiredText = Annotated[str, Field(min_length=1)]

# Bounded by the width of the column they are stored in
LongName = Annotated[str, Field(min_length=1, max_length=200)]
ShortName = Annotated[str, Field(min_length=1, max_length=100)]
EmailText = Annotated[str, Field(min_length=1, max_length=254)]
MacText = Annotated[str, Field(min_length=1, max_length=32)]
