"""
Attendance Service - Main business logic for check-in/check-out and day records
"""
from typing import List, Optional
from datetime import date, timezone
from sqlalchemy.orm import Session

from atams.exceptions import NotFoundException
from atams.logging import get_logger
from app.core.qr_config import QrConfig, default_qr_config
from app.core.exceptions import (
    RequestValidationException,
    InvalidSignatureException,
    TokenExpiredException,
    StationNotFoundException,
    OutOfRangeException,
)
from app.models.station import Station
from app.repositories.station_repository import StationRepository
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.services.signature_service import SignatureService
from app.services.qr_service import QrService
from app.services.day_record_service import DayRecordService
from app.schemas.attendance import (
    AttendanceRecord,
    AttendanceRecordUpdate,
    ScanRequest,
    LeaveApplyRequest,
    RecordTodayResponse
)
from app.utils.geo import haversine_distance
from app.utils.datetime_utils import utc_now, parse_iso, to_iso_millis, ensure_aware

logger = get_logger(__name__)


class AttendanceService:
    def __init__(
        self,
        config: Optional[QrConfig] = None,
        signer: Optional[SignatureService] = None,
        station_repo: Optional[StationRepository] = None,
        record_repo: Optional[AttendanceRecordRepository] = None
    ) -> None:
        self.config = config or default_qr_config()
        self.signer = signer or SignatureService(self.config)
        self.station_repo = station_repo or StationRepository()
        self.record_repo = record_repo or AttendanceRecordRepository()
        self.day_records = DayRecordService(self.config, self.record_repo)

    def _rejected(self, reason: str, user_id: str, station_id: Optional[str], exc: Exception) -> Exception:
        logger.warning(
            f"Scan rejected: {reason}",
            extra={'extra_data': {'user_id': user_id, 'station_id': station_id, 'reason': reason}}
        )
        return exc

    def _validate_request(self, user_id: str, request: ScanRequest) -> None:
        missing = []
        qr = request.qr_data
        if qr is None:
            missing.append("qrData")
        else:
            if not qr.station_id:
                missing.append("qrData.stationId")
            if not qr.expired_at:
                missing.append("qrData.expiredAt")
            if not qr.signature:
                missing.append("qrData.signature")
        location = request.location
        if location is None:
            missing.append("location")
        else:
            if location.latitude is None:
                missing.append("location.latitude")
            if location.longitude is None:
                missing.append("location.longitude")
        if request.scanned_at is None:
            missing.append("scannedAt")

        if missing:
            raise self._rejected(
                "missing fields",
                user_id,
                qr.station_id if qr else None,
                RequestValidationException("Missing required fields", missing)
            )

    def _verify_scan(self, db: Session, user_id: str, request: ScanRequest) -> Station:
        """
        Run scan validation in order: fields, signature, expiry, station, distance

        Returns:
            Station: The station the QR was issued for

        Raises:
            RequestValidationException: Missing fields or unreadable expiry
            InvalidSignatureException: Signature mismatch
            TokenExpiredException: Scanned after expiry
            StationNotFoundException: Unknown station
            InvalidCoordinateException: Non-finite or out-of-bounds coordinates
            OutOfRangeException: Outside station radius
        """
        self._validate_request(user_id, request)
        qr = request.qr_data
        station_id = qr.station_id

        if not self.signer.verify(qr.signed_payload(), qr.signature):
            raise self._rejected("invalid signature", user_id, station_id, InvalidSignatureException())

        try:
            expired_at = parse_iso(qr.expired_at)
        except ValueError:
            raise self._rejected(
                "unreadable expiry",
                user_id,
                station_id,
                RequestValidationException("qrData.expiredAt is not a valid timestamp")
            )

        if not QrService.check_qr_expired(expired_at, request.scanned_at):
            raise self._rejected(
                "expired",
                user_id,
                station_id,
                TokenExpiredException(qr.expired_at, to_iso_millis(request.scanned_at))
            )

        station = self.station_repo.get_by_id(db, station_id)
        if not station:
            raise self._rejected("station not found", user_id, station_id, StationNotFoundException(station_id))

        distance = haversine_distance(
            station.st_latitude, station.st_longitude,
            request.location.latitude, request.location.longitude,
            radius_m=self.config.earth_radius_m
        )
        if distance > station.st_radius_m:
            raise self._rejected(
                "out of range",
                user_id,
                station_id,
                OutOfRangeException(distance, station.st_radius_m)
            )

        return station

    def check_in(self, db: Session, user_id: str, request: ScanRequest) -> AttendanceRecord:
        """
        Process check-in scan

        Args:
            db: Database session
            user_id: Current user ID from auth
            request: Scan request data

        Returns:
            AttendanceRecord: Day record with status A
        """
        station = self._verify_scan(db, user_id, request)
        record = self.day_records.apply_check_in(db, user_id, request.scanned_at, station.st_id)
        return AttendanceRecord.model_validate(record)

    def check_out(self, db: Session, user_id: str, request: ScanRequest) -> AttendanceRecord:
        """
        Process check-out scan

        Returns:
            AttendanceRecord: Day record with status P

        Raises:
            NoCheckInRecordException: If there is no record for the day
        """
        self._verify_scan(db, user_id, request)
        record = self.day_records.apply_check_out(db, user_id, request.scanned_at)
        return AttendanceRecord.model_validate(record)

    def get_today_record(self, db: Session, user_id: str) -> RecordTodayResponse:
        """Get user's record for today"""
        today = self.day_records.day_of(utc_now())
        record = self.record_repo.get_by_user_and_date(db, user_id, today)

        if not record:
            return RecordTodayResponse()

        return RecordTodayResponse(
            ar_id=record.ar_id,
            ar_status=record.ar_status,
            ar_station_id=record.ar_station_id,
            ar_check_in=record.ar_check_in,
            ar_check_out=record.ar_check_out
        )

    def get_user_records(self, db: Session, user_id: str, skip: int = 0, limit: int = 50) -> List[AttendanceRecord]:
        records = self.record_repo.get_user_records(db, user_id, skip, limit)
        return [AttendanceRecord.model_validate(r) for r in records]

    def count_user_records(self, db: Session, user_id: str) -> int:
        return self.record_repo.count_user_records(db, user_id)

    def get_records_admin(
        self,
        db: Session,
        user_id: str = None,
        station_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None,
        skip: int = 0,
        limit: int = 100,
        sort: str = "desc"
    ) -> List[AttendanceRecord]:
        """Get attendance records for admin (with filters)"""
        records = self.record_repo.get_records_with_filters(
            db, user_id, station_id, date_from, date_to, status, skip, limit, sort
        )
        return [AttendanceRecord.model_validate(r) for r in records]

    def count_records_admin(
        self,
        db: Session,
        user_id: str = None,
        station_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ) -> int:
        """Count attendance records for admin (with filters)"""
        return self.record_repo.count_records_with_filters(
            db, user_id, station_id, date_from, date_to, status
        )

    def get_record(self, db: Session, record_id: str) -> AttendanceRecord:
        record = self.record_repo.get_by_id(db, record_id)
        if not record:
            raise NotFoundException("Attendance record not found")
        return AttendanceRecord.model_validate(record)

    def update_record(self, db: Session, record_id: str, payload: AttendanceRecordUpdate) -> AttendanceRecord:
        """
        Admin correction of a day record

        Args:
            db: Database session
            record_id: Attendance record ID
            payload: Fields to change; check_in/check_out may be sent as null to clear them

        Returns:
            AttendanceRecord: Updated record

        Raises:
            NotFoundException: If record not found
            RequestValidationException: Null status or check-out before check-in
        """
        record = self.record_repo.get_by_id(db, record_id)
        if not record:
            raise NotFoundException("Attendance record not found")

        patch = payload.model_dump(exclude_unset=True)
        if "ar_status" in patch and patch["ar_status"] is None:
            raise RequestValidationException("ar_status must not be null")
        for field in ("ar_check_in", "ar_check_out"):
            if patch.get(field) is not None:
                patch[field] = ensure_aware(patch[field]).astimezone(timezone.utc)

        check_in = patch.get("ar_check_in", record.ar_check_in)
        check_out = patch.get("ar_check_out", record.ar_check_out)
        if check_in is not None and check_out is not None and ensure_aware(check_out) < ensure_aware(check_in):
            raise RequestValidationException("ar_check_out must not be before ar_check_in")

        record = self.record_repo.update_record(db, record, patch)
        logger.info(
            "Attendance record corrected",
            extra={'extra_data': {'record_id': record_id, 'fields': sorted(patch)}}
        )
        return AttendanceRecord.model_validate(record)

    def delete_record(self, db: Session, record_id: str) -> None:
        if not self.record_repo.delete_by_id(db, record_id):
            raise NotFoundException("Attendance record not found")
        logger.info("Attendance record deleted", extra={'extra_data': {'record_id': record_id}})

    def apply_leave(self, db: Session, request: LeaveApplyRequest) -> List[AttendanceRecord]:
        """Apply an approved leave/sick request to the user's day records"""
        records = self.day_records.apply_leave_or_sick(
            db, request.user_id, request.start_date, request.end_date, request.kind
        )
        return [AttendanceRecord.model_validate(r) for r in records]
