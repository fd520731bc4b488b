from .signature_service import SignatureService
from .qr_service import QrService
from .day_record_service import DayRecordService
from .attendance_service import AttendanceService
from .station_service import StationService
from .cleanup_service import CleanupService

__all__ = [
    "SignatureService",
    "QrService",
    "DayRecordService",
    "AttendanceService",
    "StationService",
    "CleanupService"
]
