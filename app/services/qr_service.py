"""
QR Service - Issues signed, short-lived QR codes for station displays
"""
import io
import json
import uuid
import base64
from datetime import datetime, timedelta
from typing import Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from sqlalchemy.orm import Session

from atams.logging import get_logger
from app.core.qr_config import QrConfig, default_qr_config
from app.core.exceptions import QrGenerationException
from app.repositories.qr_code_repository import QrCodeRepository
from app.repositories.station_repository import StationRepository
from app.services.signature_service import SignatureService
from app.schemas.qr import QrGenerateResponse, QrPayloadData
from app.utils.datetime_utils import utc_now, ensure_aware, to_iso_millis

logger = get_logger(__name__)

# Matches st_id / qr_station_id column width
STATION_ID_MAX_LENGTH = 50


class QrService:
    def __init__(self, config: Optional[QrConfig] = None, signer: Optional[SignatureService] = None) -> None:
        self.config = config or default_qr_config()
        self.signer = signer or SignatureService(self.config)
        self.qr_repo = QrCodeRepository()
        self.station_repo = StationRepository()

    def _render_qr_image(self, content: str) -> str:
        """Render content as a PNG data URL at least config.image_size pixels wide"""
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_H,
            box_size=10,
            border=1,
        )
        qr.add_data(content)
        qr.make(fit=True)

        # modules plus one-module border on each side
        modules = qr.modules_count + 2
        qr.box_size = max(1, -(-self.config.image_size // modules))

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    def generate_qr(self, db: Session, station_id: str) -> QrGenerateResponse:
        """
        Generate signed QR for a station display

        Args:
            db: Database session
            station_id: Station the QR is issued for

        Returns:
            QrGenerateResponse: Image data URL, encoded data and lifetime in seconds

        Raises:
            QrGenerationException: Empty or too long station id, or image rendering failure
        """
        if station_id is None or not str(station_id).strip():
            raise QrGenerationException("station id is required")
        if len(station_id) > STATION_ID_MAX_LENGTH:
            raise QrGenerationException(f"station id must be at most {STATION_ID_MAX_LENGTH} characters")

        now = utc_now()
        expires_at = now + timedelta(minutes=self.config.expiry_minutes)
        expired_at = to_iso_millis(expires_at)

        signature = self.signer.sign({"stationId": station_id, "expiredAt": expired_at})
        data = QrPayloadData(station_id=station_id, expired_at=expired_at, signature=signature)

        content = json.dumps(
            {"stationId": station_id, "expiredAt": expired_at, "signature": signature},
            separators=(",", ":"),
            ensure_ascii=False
        )
        try:
            image = self._render_qr_image(content)
        except Exception as e:
            logger.error(
                "QR rendering failed",
                exc_info=True,
                extra={'extra_data': {'station_id': station_id}}
            )
            raise QrGenerationException(str(e), status_code=500) from e

        self.qr_repo.create_qr(db, {
            "qr_id": str(uuid.uuid4()),
            "qr_image": image,
            "qr_signature": signature,
            "qr_expires_at": expires_at,
            "qr_station_id": station_id,
            "qr_created_at": now,
        })

        # Station heartbeat
        station = self.station_repo.get_by_id(db, station_id)
        if station:
            self.station_repo.update(db, station, {
                "st_last_active_at": now,
                "st_status": "active",
            })

        logger.info(
            "QR generated",
            extra={'extra_data': {'station_id': station_id, 'expired_at': expired_at}}
        )

        return QrGenerateResponse(
            qr_code=image,
            data=data,
            expires_in=self.config.expires_in_seconds
        )

    @staticmethod
    def check_qr_expired(expired_at: datetime, scanned_at: datetime) -> bool:
        """Return True while the QR is still valid (scanned_at <= expired_at)"""
        return ensure_aware(scanned_at) <= ensure_aware(expired_at)
