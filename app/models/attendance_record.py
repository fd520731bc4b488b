"""
Attendance Record Model - One record per user per calendar day
"""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from atams.db import Base


class AttendanceRecord(Base):
    """Attendance Record model for sigap schema - Table: sigap.attendance_records"""
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("ar_user_id", "ar_date", name="uq_attendance_records_user_date"),
        {"schema": "sigap"},
    )

    ar_id = Column(String(36), primary_key=True, index=True)  # uuid4
    ar_user_id = Column(String(64), nullable=False, index=True)  # Atlas SSO user id
    ar_date = Column(Date, nullable=False, index=True)
    ar_check_in = Column(DateTime(timezone=True), nullable=True)
    ar_check_out = Column(DateTime(timezone=True), nullable=True)  # None until checked out
    ar_status = Column(String(1), nullable=False)  # 'A', 'P', 'L' or 'S'
    ar_station_id = Column(String(50), ForeignKey("sigap.stations.st_id", ondelete="SET NULL"), nullable=True, index=True)
    ar_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ar_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
