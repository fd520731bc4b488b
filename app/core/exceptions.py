"""
Domain Exceptions - Check-in protocol and QR issuance failures

All exceptions extend the ATAMS exception family so the global handlers
render them as {"success": false, "message": ..., "details": {...}}.
"""
from typing import Any, Dict, List, Optional

from fastapi import status
from atams.exceptions import (
    AppException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
)


class RequestValidationException(BadRequestException):
    """400 - Required request fields missing or malformed"""

    def __init__(self, message: str = "Invalid request", missing_fields: Optional[List[str]] = None):
        details = {"missing_fields": missing_fields} if missing_fields else None
        super().__init__(message, details)
        self.missing_fields = missing_fields or []


class InvalidSignatureException(UnauthorizedException):
    """401 - QR signature does not match"""

    def __init__(self, message: str = "Invalid QR code signature"):
        super().__init__(message)


class TokenExpiredException(BadRequestException):
    """400 - QR scanned after its expiry"""

    def __init__(self, expired_at: str, scanned_at: str):
        super().__init__(
            "QR code has expired",
            {"expired_at": expired_at, "scanned_at": scanned_at},
        )


class StationNotFoundException(NotFoundException):
    """404 - Station referenced by the QR does not exist"""

    def __init__(self, station_id: str):
        super().__init__(f"Station with ID {station_id} not found", {"station_id": station_id})
        self.station_id = station_id


class OutOfRangeException(ForbiddenException):
    """403 - Scan location is outside the station geofence"""

    def __init__(self, distance_m: float, radius_m: float):
        message = (
            f"You are too far from the check-in station "
            f"({distance_m:.0f}m away, max allowed: {radius_m:g}m)"
        )
        super().__init__(message, {"distance_m": round(distance_m, 2), "radius_m": radius_m})
        self.distance_m = distance_m
        self.radius_m = radius_m


class NoCheckInRecordException(BadRequestException):
    """400 - Check-out without a check-in record for the day"""

    def __init__(self, message: str = "No check-in record found for today. Please check in first."):
        super().__init__(message)


class InvalidCoordinateException(BadRequestException):
    """400 - Coordinates are not finite or out of WGS-84 bounds"""

    def __init__(self, message: str = "Invalid coordinates", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class QrGenerationException(AppException):
    """QR issuance failed: 400 for bad input, 500 when rendering fails"""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(f"Failed to generate QR: {message}", status_code)
