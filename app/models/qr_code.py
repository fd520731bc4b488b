"""
QR Code Model - Write-only audit log of issued QR codes
"""
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from atams.db import Base


class QrCode(Base):
    """QR Code model for sigap schema - Table: sigap.qr_codes"""
    __tablename__ = "qr_codes"
    __table_args__ = {"schema": "sigap"}

    qr_id = Column(String(36), primary_key=True, index=True)  # uuid4
    qr_image = Column(Text, nullable=False)  # data:image/png;base64,...
    qr_signature = Column(String(64), nullable=False)  # hex HMAC-SHA256
    qr_expires_at = Column(DateTime(timezone=True), nullable=False)
    qr_station_id = Column(String(50), nullable=False, index=True)
    qr_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
