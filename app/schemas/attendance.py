"""
Attendance Schemas for day records, scans and leave application
"""
from typing import Optional, Literal
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import fix_pg_timezone


AttendanceStatus = Literal["A", "P", "L", "S"]


class AttendanceRecordBase(BaseModel):
    ar_user_id: str
    ar_date: date
    ar_check_in: Optional[datetime] = None
    ar_check_out: Optional[datetime] = None
    ar_status: AttendanceStatus
    ar_station_id: Optional[str] = None


class AttendanceRecordInDB(AttendanceRecordBase):
    model_config = ConfigDict(from_attributes=True)

    ar_id: str
    ar_created_at: Optional[datetime] = None
    ar_updated_at: Optional[datetime] = None

    @field_validator('ar_check_in', 'ar_check_out', 'ar_created_at', 'ar_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return fix_pg_timezone(v)


class AttendanceRecord(AttendanceRecordInDB):
    pass


class AttendanceRecordUpdate(BaseModel):
    """Admin correction of a day record; only fields sent are changed"""
    ar_check_in: Optional[datetime] = None
    ar_check_out: Optional[datetime] = None
    ar_status: Optional[AttendanceStatus] = None


# Request/Response schemas for API endpoints
class ScanLocation(BaseModel):
    """GPS position of the scanning device"""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class QrData(BaseModel):
    """Decoded QR content. expiredAt is kept verbatim because it is part of the signed payload."""
    model_config = ConfigDict(populate_by_name=True)

    station_id: Optional[str] = Field(None, alias="stationId")
    expired_at: Optional[str] = Field(None, alias="expiredAt")
    signature: Optional[str] = None

    def signed_payload(self) -> dict:
        return {"stationId": self.station_id, "expiredAt": self.expired_at}


class ScanRequest(BaseModel):
    """Request schema for check-in and check-out endpoints"""
    model_config = ConfigDict(populate_by_name=True)

    scanned_at: Optional[datetime] = Field(None, alias="scannedAt")
    location: Optional[ScanLocation] = None
    qr_data: Optional[QrData] = Field(None, alias="qrData")


class LeaveApplyRequest(BaseModel):
    """Request schema for applying an approved leave/sick request to attendance"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    kind: Literal["leave", "sick"]


class RecordTodayResponse(BaseModel):
    """Response schema for today's record"""
    ar_id: Optional[str] = None
    ar_status: Optional[AttendanceStatus] = None
    ar_station_id: Optional[str] = None
    ar_check_in: Optional[datetime] = None
    ar_check_out: Optional[datetime] = None
