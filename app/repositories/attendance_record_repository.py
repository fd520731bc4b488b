"""
Attendance Record Repository - Data access layer for day records
"""
from typing import Optional, List, Dict, Any
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError

from atams.db import BaseRepository
from atams.logging import get_logger
from app.models.attendance_record import AttendanceRecord

logger = get_logger(__name__)


class AttendanceRecordRepository(BaseRepository[AttendanceRecord]):
    def __init__(self):
        super().__init__(AttendanceRecord)

    def get_by_id(self, db: Session, record_id: str) -> Optional[AttendanceRecord]:
        """Get record by ID using ORM"""
        return db.query(AttendanceRecord).filter(AttendanceRecord.ar_id == record_id).first()

    def get_by_user_and_date(self, db: Session, user_id: str, target_date: date) -> Optional[AttendanceRecord]:
        """Get the day record for a user on a calendar day"""
        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.ar_user_id == user_id,
                AttendanceRecord.ar_date == target_date
            )
        ).first()

    def create_record(self, db: Session, record_data: Dict[str, Any]) -> Optional[AttendanceRecord]:
        """
        Insert a day record.
        Returns None if (user, date) already exists (unique constraint lost a race).
        Any other integrity error is re-raised.
        """
        try:
            db_record = AttendanceRecord(**record_data)
            db.add(db_record)
            db.commit()
            db.refresh(db_record)
            return db_record
        except IntegrityError:
            db.rollback()
            existing = self.get_by_user_and_date(db, record_data.get("ar_user_id"), record_data.get("ar_date"))
            if existing is None:
                raise
            logger.warning(
                "Day record already exists, falling back to update",
                extra={'extra_data': {
                    'user_id': record_data.get("ar_user_id"),
                    'date': str(record_data.get("ar_date"))
                }}
            )
            return None

    def update_record(self, db: Session, db_record: AttendanceRecord, patch: Dict[str, Any]) -> AttendanceRecord:
        """Apply a partial update to a day record"""
        return self.update(db, db_record, patch)

    def delete_by_id(self, db: Session, record_id: str) -> bool:
        """Delete record by ID and return success status"""
        record = self.get_by_id(db, record_id)
        if record:
            db.delete(record)
            db.commit()
            return True
        return False

    def get_user_records(self, db: Session, user_id: str, skip: int = 0, limit: int = 50) -> List[AttendanceRecord]:
        """Get user's records newest first using ORM"""
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.ar_user_id == user_id
        ).order_by(AttendanceRecord.ar_date.desc()).offset(skip).limit(limit).all()

    def count_user_records(self, db: Session, user_id: str) -> int:
        return db.query(AttendanceRecord).filter(AttendanceRecord.ar_user_id == user_id).count()

    def _filtered_query(
        self,
        db: Session,
        user_id: str = None,
        station_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ) -> Query:
        query = db.query(AttendanceRecord)

        if user_id:
            query = query.filter(AttendanceRecord.ar_user_id == user_id)
        if station_id:
            query = query.filter(AttendanceRecord.ar_station_id == station_id)
        if date_from:
            query = query.filter(AttendanceRecord.ar_date >= date_from)
        if date_to:
            query = query.filter(AttendanceRecord.ar_date <= date_to)
        if status:
            query = query.filter(AttendanceRecord.ar_status == status)

        return query

    def get_records_with_filters(
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
        """Get records with various filters using ORM"""
        query = self._filtered_query(db, user_id, station_id, date_from, date_to, status)

        if sort.lower() == "asc":
            query = query.order_by(AttendanceRecord.ar_date.asc(), AttendanceRecord.ar_user_id.asc())
        else:
            query = query.order_by(AttendanceRecord.ar_date.desc(), AttendanceRecord.ar_user_id.asc())

        return query.offset(skip).limit(limit).all()

    def count_records_with_filters(
        self,
        db: Session,
        user_id: str = None,
        station_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ) -> int:
        """Count records with filters"""
        return self._filtered_query(db, user_id, station_id, date_from, date_to, status).count()
