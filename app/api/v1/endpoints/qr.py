"""
QR Endpoints - Signed QR issuance for station displays
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.qr_service import QrService
from app.schemas import QrGenerateRequest, QrGenerateResponse, DataResponse
from app.api.deps import require_display_key

router = APIRouter()
qr_service = QrService()


@router.post(
    "/generate",
    response_model=DataResponse[QrGenerateResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_display_key)]
)
async def generate_qr(
    request: QrGenerateRequest,
    db: Session = Depends(get_db)
):
    """
    Generate signed QR code for a station display

    **Authentication:**
    - Requires X-Display-Key header matching DISPLAY_API_KEY

    **Response:**
    - qrCode: PNG image as data URL
    - data: stationId, expiredAt, signature encoded in the image
    - expiresIn: seconds until the QR expires
    """
    qr_response = qr_service.generate_qr(db, request.station_id)

    return DataResponse(
        success=True,
        message="QR code generated successfully",
        data=qr_response
    )
