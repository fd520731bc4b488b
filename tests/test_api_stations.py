from datetime import timedelta

import pytest

from app.models.qr_code import QrCode
from app.models.station import Station
from app.utils.datetime_utils import utc_now


@pytest.fixture
def admin(auth_user):
    auth_user["role_level"] = 50
    return auth_user


STATION_BODY = {
    "st_id": "ST9",
    "st_name": "Warehouse",
    "st_latitude": -6.2,
    "st_longitude": 106.8,
    "st_radius_m": 75,
}


class TestStationEndpoints:
    def test_requires_admin_role(self, client):
        response = client.get("/api/v1/stations/")

        assert response.status_code == 403

    def test_create_and_get(self, client, admin):
        response = client.post("/api/v1/stations/", json=STATION_BODY)
        assert response.status_code == 201, response.text
        assert response.json()["data"]["st_status"] == "active"

        response = client.get("/api/v1/stations/ST9")
        assert response.status_code == 200
        assert response.json()["data"]["st_radius_m"] == 75

    def test_create_duplicate(self, client, admin, station):
        response = client.post("/api/v1/stations/", json={**STATION_BODY, "st_id": "ST1"})

        assert response.status_code == 409

    @pytest.mark.parametrize("field, value", [
        ("st_radius_m", 0),
        ("st_latitude", 91),
        ("st_longitude", -181),
    ])
    def test_create_invalid(self, client, admin, field, value):
        response = client.post("/api/v1/stations/", json={**STATION_BODY, field: value})

        assert response.status_code == 422

    def test_list_with_search(self, client, admin, station):
        client.post("/api/v1/stations/", json=STATION_BODY)

        response = client.get("/api/v1/stations/", params={"search": "ware"})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["data"][0]["st_id"] == "ST9"

    def test_update(self, client, admin, station):
        response = client.put("/api/v1/stations/ST1", json={"st_radius_m": 120})

        assert response.status_code == 200
        assert response.json()["data"]["st_radius_m"] == 120
        assert response.json()["data"]["st_name"] == "Main Gate"

    def test_get_unknown(self, client, admin):
        response = client.get("/api/v1/stations/NOPE")

        assert response.status_code == 404
        assert response.json()["message"] == "Station with ID NOPE not found"

    def test_set_status(self, client, admin, station):
        response = client.patch("/api/v1/stations/ST1/status", json={"st_status": "offline"})

        assert response.status_code == 200
        assert response.json()["data"]["st_status"] == "offline"

    def test_status_goes_offline_when_stale(self, client, admin, station, db_session):
        station.st_last_active_at = utc_now() - timedelta(minutes=30)
        db_session.commit()

        response = client.get("/api/v1/stations/ST1/status")

        assert response.status_code == 200
        assert response.json()["data"]["st_status"] == "offline"

    def test_status_stays_active_when_recent(self, client, admin, station, db_session):
        station.st_last_active_at = utc_now() - timedelta(minutes=1)
        db_session.commit()

        response = client.get("/api/v1/stations/ST1/status")

        assert response.json()["data"]["st_status"] == "active"

    def test_delete(self, client, admin, station, db_session):
        response = client.delete("/api/v1/stations/ST1")

        assert response.status_code == 204
        assert db_session.get(Station, "ST1") is None

        response = client.delete("/api/v1/stations/ST1")
        assert response.status_code == 404


class TestMaintenanceEndpoints:
    def test_cleanup_qr(self, client, admin, db_session):
        now = utc_now()
        for qr_id, age in (("old", 10), ("new", 1)):
            db_session.add(QrCode(
                qr_id=qr_id,
                qr_image="data:image/png;base64,",
                qr_signature="0" * 64,
                qr_expires_at=now - timedelta(days=age),
                qr_station_id="ST1",
                qr_created_at=now - timedelta(days=age),
            ))
        db_session.commit()

        response = client.post("/api/v1/maintenance/cleanup-qr", params={"days_old": 7})

        assert response.status_code == 200
        assert response.json()["data"]["deleted_count"] == 1
        assert [q.qr_id for q in db_session.query(QrCode).all()] == ["new"]
