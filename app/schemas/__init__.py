from .station import (
    Station,
    StationCreate,
    StationUpdate,
    StationStatusUpdate,
    StationStatusResponse
)
from .attendance import (
    AttendanceRecord,
    AttendanceRecordUpdate,
    ScanLocation,
    QrData,
    ScanRequest,
    LeaveApplyRequest,
    RecordTodayResponse
)
from .qr import QrGenerateRequest, QrGenerateResponse, QrPayloadData
from .common import DataResponse, PaginationResponse

__all__ = [
    # Station schemas
    "Station",
    "StationCreate",
    "StationUpdate",
    "StationStatusUpdate",
    "StationStatusResponse",
    # Attendance schemas
    "AttendanceRecord",
    "AttendanceRecordUpdate",
    "ScanLocation",
    "QrData",
    "ScanRequest",
    "LeaveApplyRequest",
    "RecordTodayResponse",
    # QR schemas
    "QrGenerateRequest",
    "QrGenerateResponse",
    "QrPayloadData",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
