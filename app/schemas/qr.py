"""
QR Schemas for issuance
"""
from pydantic import BaseModel, ConfigDict, Field


class QrGenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(..., alias="stationId", min_length=1, max_length=50)


class QrPayloadData(BaseModel):
    """Content encoded in the QR image"""
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(..., alias="stationId")
    expired_at: str = Field(..., alias="expiredAt")
    signature: str


class QrGenerateResponse(BaseModel):
    """Response schema for QR issuance"""
    model_config = ConfigDict(populate_by_name=True)

    qr_code: str = Field(..., alias="qrCode")  # data:image/png;base64,...
    data: QrPayloadData
    expires_in: int = Field(..., alias="expiresIn")
