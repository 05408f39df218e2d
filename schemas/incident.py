from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContactCreate(BaseModel):
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=120)
    phone: str = Field(..., min_length=3, max_length=32)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class LocationCreate(BaseModel):
    # A caller-supplied "name" is dropped; it is always resolved from the coordinates
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class IncidentCreate(BaseModel):
    user: UUID
    contact: ContactCreate
    location: LocationCreate
    video_file: Optional[str] = Field(None, alias="videoFile", max_length=255)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("video_file")
    @classmethod
    def video_file_is_plain_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError("must be a file name, not a path")
        return value


class VideoShareCreate(BaseModel):
    share_to: Optional[str] = Field(None, alias="shareTo", max_length=64)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)
