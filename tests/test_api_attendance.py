from datetime import timedelta

from app.models.attendance_record import AttendanceRecord
from app.models.qr_code import QrCode
from app.utils.datetime_utils import to_iso_millis, utc_now

from tests.conftest import DISPLAY_KEY


def generate_qr(client, station_id="ST1"):
    response = client.post(
        "/api/v1/qr/generate",
        json={"stationId": station_id},
        headers={"X-Display-Key": DISPLAY_KEY},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


def scan_body(qr_data, latitude=1.00001, longitude=1.0, scanned_at=None):
    return {
        "scannedAt": to_iso_millis(scanned_at or utc_now()),
        "location": {"latitude": latitude, "longitude": longitude},
        "qrData": qr_data,
    }


class TestQrGenerateEndpoint:
    def test_generate(self, client, station, db_session):
        data = generate_qr(client)

        assert data["qrCode"].startswith("data:image/png;base64,")
        assert data["data"]["stationId"] == "ST1"
        assert data["data"]["expiredAt"].endswith("Z")
        assert len(data["data"]["signature"]) == 64
        assert data["expiresIn"] == 300
        assert db_session.query(QrCode).count() == 1

    def test_wrong_display_key(self, client):
        response = client.post(
            "/api/v1/qr/generate",
            json={"stationId": "ST1"},
            headers={"X-Display-Key": "nope"},
        )

        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_missing_display_key(self, client):
        response = client.post("/api/v1/qr/generate", json={"stationId": "ST1"})

        assert response.status_code == 403

    def test_station_id_too_long(self, client):
        response = client.post(
            "/api/v1/qr/generate",
            json={"stationId": "S" * 51},
            headers={"X-Display-Key": DISPLAY_KEY},
        )

        assert response.status_code == 422

    def test_blank_station_id(self, client):
        response = client.post(
            "/api/v1/qr/generate",
            json={"stationId": "  "},
            headers={"X-Display-Key": DISPLAY_KEY},
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Failed to generate QR")


class TestCheckInFlow:
    def test_check_in_and_out(self, client, station, db_session):
        qr = generate_qr(client)["data"]

        response = client.post("/api/v1/attendance/check-in", json=scan_body(qr))
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        assert body["data"]["ar_status"] == "A"
        assert body["data"]["ar_user_id"] == "42"
        assert body["data"]["ar_check_out"] is None

        response = client.post("/api/v1/attendance/check-out", json=scan_body(qr))
        assert response.status_code == 200, response.text
        assert response.json()["data"]["ar_status"] == "P"

        assert db_session.query(AttendanceRecord).count() == 1

    def test_today(self, client, station):
        response = client.get("/api/v1/attendance/me/today")
        assert response.status_code == 200
        assert response.json()["data"]["ar_id"] is None

        qr = generate_qr(client)["data"]
        client.post("/api/v1/attendance/check-in", json=scan_body(qr))

        response = client.get("/api/v1/attendance/me/today")
        assert response.json()["data"]["ar_status"] == "A"
        assert response.json()["data"]["ar_station_id"] == "ST1"

    def test_my_history(self, client, station):
        qr = generate_qr(client)["data"]
        client.post("/api/v1/attendance/check-in", json=scan_body(qr))

        response = client.get("/api/v1/attendance/me")

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["data"][0]["ar_user_id"] == "42"

    def test_check_out_without_check_in(self, client, station):
        qr = generate_qr(client)["data"]

        response = client.post("/api/v1/attendance/check-out", json=scan_body(qr))

        assert response.status_code == 400
        assert "check in first" in response.json()["message"]

    def test_invalid_signature(self, client, station):
        qr = generate_qr(client)["data"]
        qr["signature"] = "0" * 64

        response = client.post("/api/v1/attendance/check-in", json=scan_body(qr))

        assert response.status_code == 401

    def test_expired(self, client, station):
        qr = generate_qr(client)["data"]
        late = utc_now() + timedelta(minutes=6)

        response = client.post("/api/v1/attendance/check-in", json=scan_body(qr, scanned_at=late))

        assert response.status_code == 400
        assert response.json()["details"]["expired_at"] == qr["expiredAt"]

    def test_station_not_found(self, client):
        qr = generate_qr(client, station_id="GHOST")["data"]

        response = client.post("/api/v1/attendance/check-in", json=scan_body(qr))

        assert response.status_code == 404

    def test_out_of_range(self, client, station):
        qr = generate_qr(client)["data"]

        response = client.post("/api/v1/attendance/check-in", json=scan_body(qr, latitude=1.01))

        assert response.status_code == 403
        assert "too far" in response.json()["message"]

    def test_missing_fields(self, client):
        response = client.post("/api/v1/attendance/check-in", json={"scannedAt": to_iso_millis(utc_now())})

        assert response.status_code == 400
        assert response.json()["details"]["missing_fields"] == ["qrData", "location"]


class TestAdminEndpoints:
    def test_requires_admin_role(self, client):
        response = client.get("/api/v1/attendance/")

        assert response.status_code == 403

    def test_list_get_delete(self, client, station, auth_user):
        qr = generate_qr(client)["data"]
        record_id = client.post("/api/v1/attendance/check-in", json=scan_body(qr)).json()["data"]["ar_id"]
        auth_user["role_level"] = 50

        response = client.get("/api/v1/attendance/", params={"status": "A", "user_id": "42"})
        assert response.status_code == 200
        assert response.json()["total"] == 1

        response = client.get(f"/api/v1/attendance/{record_id}")
        assert response.status_code == 200
        assert response.json()["data"]["ar_id"] == record_id

        response = client.delete(f"/api/v1/attendance/{record_id}")
        assert response.status_code == 204

        response = client.get(f"/api/v1/attendance/{record_id}")
        assert response.status_code == 404

    def test_correct_record(self, client, station, auth_user):
        qr = generate_qr(client)["data"]
        client.post("/api/v1/attendance/check-in", json=scan_body(qr))
        record_id = client.post("/api/v1/attendance/check-out", json=scan_body(qr)).json()["data"]["ar_id"]

        response = client.put(f"/api/v1/attendance/{record_id}", json={"ar_check_out": None, "ar_status": "A"})
        assert response.status_code == 403

        auth_user["role_level"] = 50
        response = client.put(f"/api/v1/attendance/{record_id}", json={"ar_check_out": None, "ar_status": "A"})

        assert response.status_code == 200, response.text
        assert response.json()["data"]["ar_status"] == "A"
        assert response.json()["data"]["ar_check_out"] is None

    def test_correct_record_invalid_status(self, client, auth_user):
        auth_user["role_level"] = 50

        response = client.put("/api/v1/attendance/whatever", json={"ar_status": "X"})

        assert response.status_code == 422

    def test_correct_unknown_record(self, client, auth_user):
        auth_user["role_level"] = 50

        response = client.put("/api/v1/attendance/missing", json={"ar_status": "A"})

        assert response.status_code == 404

    def test_invalid_date_filter(self, client, auth_user):
        auth_user["role_level"] = 50

        response = client.get("/api/v1/attendance/", params={"date_from": "17-10-2026"})

        assert response.status_code == 400

    def test_apply_leave(self, client, auth_user, db_session):
        auth_user["role_level"] = 50

        response = client.post("/api/v1/attendance/leave", json={
            "userId": "7",
            "startDate": "2026-10-19",
            "endDate": "2026-10-21",
            "kind": "sick",
        })

        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert len(data) == 3
        assert {r["ar_status"] for r in data} == {"S"}
        assert db_session.query(AttendanceRecord).filter(AttendanceRecord.ar_user_id == "7").count() == 3

    def test_apply_leave_inverted_range(self, client, auth_user):
        auth_user["role_level"] = 50

        response = client.post("/api/v1/attendance/leave", json={
            "userId": "7",
            "startDate": "2026-10-21",
            "endDate": "2026-10-19",
            "kind": "leave",
        })

        assert response.status_code == 400
