"""
Station Model - Physical check-in points with geofence
"""
from sqlalchemy import Column, String, DateTime, Float, CheckConstraint
from sqlalchemy.sql import func
from atams.db import Base


class Station(Base):
    """Station model for sigap schema - Table: sigap.stations"""
    __tablename__ = "stations"
    __table_args__ = (
        CheckConstraint("st_radius_m > 0", name="ck_stations_radius_positive"),
        {"schema": "sigap"},
    )

    st_id = Column(String(50), primary_key=True, index=True)
    st_name = Column(String(255), nullable=False)
    st_latitude = Column(Float, nullable=False)
    st_longitude = Column(Float, nullable=False)
    st_radius_m = Column(Float, nullable=False)  # Geofence radius in meters, > 0
    st_status = Column(String(10), nullable=False, default="active")  # 'active' or 'offline'
    st_last_active_at = Column(DateTime(timezone=True), nullable=True)
    st_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    st_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
