"""
Cleanup Service - Maintenance operations for database hygiene
"""
from datetime import timedelta
from sqlalchemy.orm import Session

from atams.logging import get_logger
from app.repositories.qr_code_repository import QrCodeRepository
from app.utils.datetime_utils import utc_now

logger = get_logger(__name__)


class CleanupService:
    def __init__(self) -> None:
        self.qr_repo = QrCodeRepository()

    def cleanup_old_qr_codes(self, db: Session, days_old: int = 7) -> int:
        """
        Delete old QR audit records to prevent table bloat

        Args:
            db: Database session
            days_old: Delete records older than this many days (default: 7)

        Returns:
            int: Number of records deleted
        """
        cutoff = utc_now() - timedelta(days=days_old)
        deleted = self.qr_repo.delete_created_before(db, cutoff)
        logger.info(
            "QR audit cleanup finished",
            extra={'extra_data': {'days_old': days_old, 'deleted': deleted}}
        )
        return deleted
