"""
QR Code Repository - Audit log of issued QR codes
"""
from datetime import datetime
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.qr_code import QrCode


class QrCodeRepository(BaseRepository[QrCode]):
    def __init__(self):
        super().__init__(QrCode)

    def create_qr(self, db: Session, qr_data: dict) -> QrCode:
        """Create QR audit record and return the created object"""
        db_qr = QrCode(**qr_data)
        db.add(db_qr)
        db.commit()
        db.refresh(db_qr)
        return db_qr

    def delete_created_before(self, db: Session, cutoff: datetime) -> int:
        """Delete audit rows created before cutoff. Returns count of deleted records."""
        deleted = db.query(QrCode).filter(
            QrCode.qr_created_at < cutoff
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
