"""
Station Service - Business logic for check-in station management
"""
from datetime import timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from atams.exceptions import ConflictException
from atams.logging import get_logger
from app.core.qr_config import QrConfig, default_qr_config
from app.core.exceptions import StationNotFoundException
from app.repositories.station_repository import StationRepository
from app.schemas.station import (
    Station,
    StationCreate,
    StationUpdate,
    StationStatusUpdate,
    StationStatusResponse
)
from app.utils.datetime_utils import utc_now, ensure_aware

logger = get_logger(__name__)


class StationService:
    def __init__(self, config: Optional[QrConfig] = None) -> None:
        self.config = config or default_qr_config()
        self.repo = StationRepository()

    def list_stations(self, db: Session, search: str = "", skip: int = 0, limit: int = 100) -> List[Station]:
        stations = self.repo.get_stations_with_search(db, search=search, skip=skip, limit=limit)
        return [Station.model_validate(s) for s in stations]

    def count_stations(self, db: Session, search: str = "") -> int:
        return self.repo.count_stations_with_search(db, search=search)

    def get_station(self, db: Session, st_id: str) -> Station:
        station = self.repo.get_by_id(db, st_id)
        if not station:
            raise StationNotFoundException(st_id)
        return Station.model_validate(station)

    def create_station(self, db: Session, payload: StationCreate) -> Station:
        if self.repo.check_station_exists(db, payload.st_id):
            raise ConflictException("Station with this ID already exists")

        obj = self.repo.create(db, payload.model_dump())
        logger.info("Station created", extra={'extra_data': {'station_id': obj.st_id}})
        return Station.model_validate(obj)

    def update_station(self, db: Session, st_id: str, payload: StationUpdate) -> Station:
        obj = self.repo.get_by_id(db, st_id)
        if not obj:
            raise StationNotFoundException(st_id)
        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        obj = self.repo.update(db, obj, update_data)
        logger.info(
            "Station updated",
            extra={'extra_data': {'station_id': st_id, 'fields': sorted(update_data)}}
        )
        return Station.model_validate(obj)

    def update_status(self, db: Session, st_id: str, payload: StationStatusUpdate) -> Station:
        obj = self.repo.get_by_id(db, st_id)
        if not obj:
            raise StationNotFoundException(st_id)
        update_data = {"st_status": payload.st_status}
        if payload.st_status == "active":
            update_data["st_last_active_at"] = utc_now()
        obj = self.repo.update(db, obj, update_data)
        return Station.model_validate(obj)

    def check_status(self, db: Session, st_id: str) -> StationStatusResponse:
        """
        Report station status, marking it offline if it has not been active recently

        Args:
            db: Database session
            st_id: Station ID

        Returns:
            StationStatusResponse: Current status and last activity

        Raises:
            StationNotFoundException: If station not found
        """
        obj = self.repo.get_by_id(db, st_id)
        if not obj:
            raise StationNotFoundException(st_id)

        threshold = timedelta(minutes=self.config.station_offline_after_minutes)
        last_active = ensure_aware(obj.st_last_active_at) if obj.st_last_active_at else None
        stale = last_active is None or utc_now() - last_active > threshold
        if obj.st_status == "active" and stale:
            obj = self.repo.update(db, obj, {"st_status": "offline"})
            logger.info("Station marked offline", extra={'extra_data': {'station_id': st_id}})

        return StationStatusResponse(
            st_id=obj.st_id,
            st_status=obj.st_status,
            st_last_active_at=obj.st_last_active_at
        )

    def delete_station(self, db: Session, st_id: str) -> None:
        # day records keep their history; FK is SET NULL
        deleted = self.repo.delete_by_id(db, st_id)
        if not deleted:
            raise StationNotFoundException(st_id)
        logger.info("Station deleted", extra={'extra_data': {'station_id': st_id}})
        return None
