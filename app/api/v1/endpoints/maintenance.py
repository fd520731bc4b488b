"""
Maintenance Endpoints - System maintenance and cleanup operations
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.cleanup_service import CleanupService
from app.schemas import DataResponse
from app.api.deps import require_min_role_level
from app.core.config import settings
from pydantic import BaseModel

router = APIRouter()
cleanup_service = CleanupService()


class CleanupResult(BaseModel):
    """Cleanup operation result"""
    deleted_count: int
    message: str


@router.post(
    "/cleanup-qr",
    response_model=DataResponse[CleanupResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def cleanup_qr(
    days_old: int = Query(
        settings.QR_AUDIT_RETENTION_DAYS,
        ge=1,
        le=365,
        description="Delete QR audit records older than this many days"
    ),
    db: Session = Depends(get_db)
):
    """
    Clean up old QR audit records from qr_codes table

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Parameters:**
    - days_old: Delete records older than X days (default: QR_AUDIT_RETENTION_DAYS)

    **Use case:**
    - Every display refresh writes an audit row; run daily from a scheduled job
    """
    deleted_count = cleanup_service.cleanup_old_qr_codes(db, days_old=days_old)

    result = CleanupResult(
        deleted_count=deleted_count,
        message=f"Successfully deleted {deleted_count} QR records older than {days_old} days"
    )

    return DataResponse(
        success=True,
        message="QR cleanup completed",
        data=result
    )
