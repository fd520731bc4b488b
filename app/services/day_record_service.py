"""
Day Record Service - Maintains exactly one attendance record per user per calendar day
"""
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from atams.logging import get_logger
from app.core.qr_config import QrConfig, default_qr_config
from app.core.exceptions import NoCheckInRecordException, RequestValidationException
from app.models.attendance_record import AttendanceRecord
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.utils.datetime_utils import ensure_aware, calendar_day, iter_days

logger = get_logger(__name__)

LEAVE_STATUS = {"leave": "L", "sick": "S"}


class DayRecordService:
    def __init__(
        self,
        config: Optional[QrConfig] = None,
        record_repo: Optional[AttendanceRecordRepository] = None
    ) -> None:
        self.config = config or default_qr_config()
        self.record_repo = record_repo or AttendanceRecordRepository()

    def day_of(self, at: datetime) -> date:
        return calendar_day(at, self.config.attendance_tz)

    def _upsert(
        self,
        db: Session,
        user_id: str,
        day: date,
        create_data: Dict[str, Any],
        update_data: Dict[str, Any]
    ) -> AttendanceRecord:
        record = self.record_repo.get_by_user_and_date(db, user_id, day)
        if record is None:
            record = self.record_repo.create_record(db, {
                "ar_id": str(uuid.uuid4()),
                "ar_user_id": user_id,
                "ar_date": day,
                **create_data,
            })
            if record is not None:
                return record
            # Lost the insert race; the other writer's row is there now
            record = self.record_repo.get_by_user_and_date(db, user_id, day)
        return self.record_repo.update_record(db, record, update_data)

    def apply_check_in(self, db: Session, user_id: str, at: datetime, station_id: str) -> AttendanceRecord:
        """
        Record a check-in for the calendar day containing `at`

        New record: check_in=at, no check-out, status A.
        Existing record: check_in overwritten, status A, check_out untouched.

        Returns:
            AttendanceRecord: The stored day record
        """
        at = ensure_aware(at).astimezone(timezone.utc)
        day = self.day_of(at)
        record = self._upsert(
            db, user_id, day,
            create_data={
                "ar_check_in": at,
                "ar_check_out": None,
                "ar_status": "A",
                "ar_station_id": station_id,
            },
            update_data={
                "ar_check_in": at,
                "ar_status": "A",
                "ar_station_id": station_id,
            }
        )
        logger.info(
            "Check-in applied",
            extra={'extra_data': {'user_id': user_id, 'date': day.isoformat(), 'station_id': station_id}}
        )
        return record

    def apply_check_out(self, db: Session, user_id: str, at: datetime) -> AttendanceRecord:
        """
        Record a check-out for the calendar day containing `at`

        Raises:
            NoCheckInRecordException: If the user has no record for that day
        """
        at = ensure_aware(at).astimezone(timezone.utc)
        day = self.day_of(at)
        record = self.record_repo.get_by_user_and_date(db, user_id, day)
        if record is None:
            raise NoCheckInRecordException()

        record = self.record_repo.update_record(db, record, {
            "ar_check_out": at,
            "ar_status": "P",
        })
        logger.info(
            "Check-out applied",
            extra={'extra_data': {'user_id': user_id, 'date': day.isoformat()}}
        )
        return record

    def apply_leave_or_sick(
        self,
        db: Session,
        user_id: str,
        start: date,
        end: date,
        kind: str
    ) -> List[AttendanceRecord]:
        """
        Mark every day in [start, end] as leave (L) or sick (S), replacing any existing record content

        Raises:
            RequestValidationException: start after end, or unknown kind
        """
        if kind not in LEAVE_STATUS:
            raise RequestValidationException(f"Unknown leave kind: {kind}")
        if start > end:
            raise RequestValidationException("startDate must not be after endDate")

        status = LEAVE_STATUS[kind]
        values = {
            "ar_check_in": None,
            "ar_check_out": None,
            "ar_status": status,
            "ar_station_id": None,
        }
        records = [
            self._upsert(db, user_id, day, create_data=values, update_data=values)
            for day in iter_days(start, end)
        ]
        logger.info(
            "Leave applied",
            extra={'extra_data': {
                'user_id': user_id,
                'start': start.isoformat(),
                'end': end.isoformat(),
                'status': status,
                'days': len(records)
            }}
        )
        return records
