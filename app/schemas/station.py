"""
Station Schemas for request/response validation
"""
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import fix_pg_timezone


class StationBase(BaseModel):
    st_name: str
    st_latitude: float = Field(..., ge=-90, le=90)
    st_longitude: float = Field(..., ge=-180, le=180)
    st_radius_m: float = Field(..., gt=0)


class StationCreate(StationBase):
    st_id: str = Field(..., min_length=1, max_length=50)
    st_status: Literal["active", "offline"] = "active"


class StationUpdate(BaseModel):
    st_name: Optional[str] = None
    st_latitude: Optional[float] = Field(None, ge=-90, le=90)
    st_longitude: Optional[float] = Field(None, ge=-180, le=180)
    st_radius_m: Optional[float] = Field(None, gt=0)


class StationStatusUpdate(BaseModel):
    st_status: Literal["active", "offline"]


class StationInDB(StationBase):
    model_config = ConfigDict(from_attributes=True)

    st_id: str
    st_status: Literal["active", "offline"]
    st_last_active_at: Optional[datetime] = None
    st_created_at: Optional[datetime] = None
    st_updated_at: Optional[datetime] = None

    @field_validator('st_last_active_at', 'st_created_at', 'st_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return fix_pg_timezone(v)


class Station(StationInDB):
    pass


class StationStatusResponse(BaseModel):
    """Response schema for station status check"""
    st_id: str
    st_status: Literal["active", "offline"]
    st_last_active_at: Optional[datetime] = None
