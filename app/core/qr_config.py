"""
QR Config - Immutable protocol configuration injected into services
"""
from dataclasses import dataclass
from datetime import timedelta, timezone


@dataclass(frozen=True)
class QrConfig:
    secret_key: str
    expiry_minutes: int = 5
    image_size: int = 1024
    earth_radius_m: float = 6371000.0
    utc_offset_hours: int = 7
    station_offline_after_minutes: int = 15

    def __post_init__(self):
        if not self.secret_key:
            raise ValueError("QR secret key must not be empty")
        if self.expiry_minutes <= 0:
            raise ValueError("QR expiry must be positive")

    @property
    def expires_in_seconds(self) -> int:
        return self.expiry_minutes * 60

    @property
    def attendance_tz(self) -> timezone:
        return timezone(timedelta(hours=self.utc_offset_hours))

    @classmethod
    def from_settings(cls, settings) -> "QrConfig":
        return cls(
            secret_key=settings.QR_SECRET_KEY,
            expiry_minutes=settings.QR_EXPIRY_MINUTES,
            image_size=settings.QR_IMAGE_SIZE,
            earth_radius_m=settings.EARTH_RADIUS_M,
            utc_offset_hours=settings.ATTENDANCE_UTC_OFFSET_HOURS,
            station_offline_after_minutes=settings.STATION_OFFLINE_AFTER_MINUTES,
        )


def default_qr_config() -> QrConfig:
    """Build config from application settings"""
    from app.core.config import settings
    return QrConfig.from_settings(settings)
