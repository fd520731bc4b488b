from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required)
    - ATLAS_SSO_URL, ATLAS_APP_CODE, ATLAS_ENCRYPTION_KEY, ATLAS_ENCRYPTION_IV
    - ENCRYPTION_ENABLED, ENCRYPTION_KEY, ENCRYPTION_IV (response encryption)
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str = "SIGAP Attendance"
    APP_VERSION: str = "1.0.0"

    # QR signing settings
    QR_SECRET_KEY: str
    QR_EXPIRY_MINUTES: int = 5
    QR_IMAGE_SIZE: int = 1024
    QR_AUDIT_RETENTION_DAYS: int = 7

    # Display Authentication
    DISPLAY_API_KEY: str

    # Geofence settings
    EARTH_RADIUS_M: float = 6371000.0

    # Calendar day boundary for day records (WIB by default)
    ATTENDANCE_UTC_OFFSET_HOURS: int = 7

    # Station heartbeat
    STATION_OFFLINE_AFTER_MINUTES: int = 15


settings = Settings()
