from .station import Station
from .attendance_record import AttendanceRecord
from .qr_code import QrCode

__all__ = [
    "Station",
    "AttendanceRecord",
    "QrCode"
]
