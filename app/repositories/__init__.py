from .station_repository import StationRepository
from .attendance_record_repository import AttendanceRecordRepository
from .qr_code_repository import QrCodeRepository

__all__ = [
    "StationRepository",
    "AttendanceRecordRepository",
    "QrCodeRepository"
]
