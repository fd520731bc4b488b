import base64
import io
import json
from datetime import datetime, timedelta, timezone

import pytest
from PIL import Image

from app.core.exceptions import QrGenerationException
from app.models.qr_code import QrCode
from app.models.station import Station
from app.services import qr_service as qr_module
from app.services.qr_service import QrService
from app.services.signature_service import SignatureService

FIXED_NOW = datetime(2026, 10, 17, 3, 0, 0, 123456, tzinfo=timezone.utc)


@pytest.fixture
def service(qr_config):
    return QrService(qr_config)


@pytest.fixture
def frozen_now(monkeypatch):
    monkeypatch.setattr(qr_module, "utc_now", lambda: FIXED_NOW)
    return FIXED_NOW


class TestCheckQrExpired:
    def test_scan_before_expiry_is_valid(self):
        expired_at = datetime(2026, 10, 17, 3, 5, tzinfo=timezone.utc)

        assert QrService.check_qr_expired(expired_at, expired_at - timedelta(minutes=1)) is True

    def test_scan_exactly_at_expiry_is_valid(self):
        expired_at = datetime(2026, 10, 17, 3, 5, tzinfo=timezone.utc)

        assert QrService.check_qr_expired(expired_at, expired_at) is True

    def test_scan_one_millisecond_late_is_expired(self):
        expired_at = datetime(2026, 10, 17, 3, 5, tzinfo=timezone.utc)

        assert QrService.check_qr_expired(expired_at, expired_at + timedelta(milliseconds=1)) is False

    def test_naive_values_are_utc(self):
        expired_at = datetime(2026, 10, 17, 3, 5)
        scanned_at = datetime(2026, 10, 17, 10, 4, tzinfo=timezone(timedelta(hours=7)))

        assert QrService.check_qr_expired(expired_at, scanned_at) is True


class TestGenerateQr:
    def test_response_shape(self, service, db_session, frozen_now):
        result = service.generate_qr(db_session, "ST1")

        assert result.data.station_id == "ST1"
        assert result.data.expired_at == "2026-10-17T03:05:00.123Z"
        assert result.expires_in == 300
        assert result.qr_code.startswith("data:image/png;base64,")

    def test_signature_verifies(self, service, db_session, qr_config):
        result = service.generate_qr(db_session, "ST1")
        signer = SignatureService(qr_config)

        assert signer.verify(
            {"stationId": "ST1", "expiredAt": result.data.expired_at},
            result.data.signature
        )

    def test_image_is_large_png(self, service, db_session):
        result = service.generate_qr(db_session, "ST1")
        raw = base64.b64decode(result.qr_code.split(",", 1)[1])
        image = Image.open(io.BytesIO(raw))

        assert image.format == "PNG"
        assert image.size[0] == image.size[1]
        assert image.size[0] >= 1024

    def test_encoded_content_is_signed_json(self, service, monkeypatch, db_session):
        captured = {}
        original = service._render_qr_image

        def capture(content):
            captured["content"] = content
            return original(content)

        monkeypatch.setattr(service, "_render_qr_image", capture)
        result = service.generate_qr(db_session, "ST1")

        assert json.loads(captured["content"]) == {
            "stationId": "ST1",
            "expiredAt": result.data.expired_at,
            "signature": result.data.signature,
        }

    def test_audit_record_written(self, service, db_session, frozen_now):
        result = service.generate_qr(db_session, "ST1")

        rows = db_session.query(QrCode).all()
        assert len(rows) == 1
        assert rows[0].qr_station_id == "ST1"
        assert rows[0].qr_signature == result.data.signature
        assert rows[0].qr_image == result.qr_code

    def test_unknown_station_still_issues(self, service, db_session):
        result = service.generate_qr(db_session, "NOT-REGISTERED")

        assert result.data.station_id == "NOT-REGISTERED"
        assert db_session.query(QrCode).filter(QrCode.qr_station_id == "NOT-REGISTERED").count() == 1

    def test_existing_station_heartbeat(self, service, db_session, station, frozen_now):
        station.st_status = "offline"
        db_session.commit()

        service.generate_qr(db_session, "ST1")

        refreshed = db_session.get(Station, "ST1")
        assert refreshed.st_status == "active"
        assert refreshed.st_last_active_at.replace(tzinfo=timezone.utc) == FIXED_NOW

    @pytest.mark.parametrize("station_id", ["", "   ", None])
    def test_empty_station_id(self, service, db_session, station_id):
        with pytest.raises(QrGenerationException) as exc_info:
            service.generate_qr(db_session, station_id)

        assert exc_info.value.status_code == 400
        assert db_session.query(QrCode).count() == 0

    def test_station_id_longer_than_column(self, service, db_session):
        with pytest.raises(QrGenerationException) as exc_info:
            service.generate_qr(db_session, "S" * 51)

        assert exc_info.value.status_code == 400
        assert db_session.query(QrCode).count() == 0

    def test_render_failure(self, service, db_session, monkeypatch):
        def boom(content):
            raise RuntimeError("encoder unavailable")

        monkeypatch.setattr(service, "_render_qr_image", boom)

        with pytest.raises(QrGenerationException) as exc_info:
            service.generate_qr(db_session, "ST1")

        assert exc_info.value.status_code == 500
        assert "encoder unavailable" in exc_info.value.message
        assert db_session.query(QrCode).count() == 0
