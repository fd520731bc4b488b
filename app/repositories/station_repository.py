"""
Station Repository - Data access layer for stations
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.station import Station


class StationRepository(BaseRepository[Station]):
    def __init__(self):
        super().__init__(Station)

    def get_by_id(self, db: Session, station_id: str) -> Optional[Station]:
        """Get station by ID using ORM"""
        return db.query(Station).filter(Station.st_id == station_id).first()

    def get_stations_with_search(self, db: Session, search: str = "", skip: int = 0, limit: int = 100) -> List[Station]:
        """Get stations with optional name search using ORM"""
        query = db.query(Station)

        if search:
            query = query.filter(Station.st_name.ilike(f"%{search}%"))

        return query.order_by(Station.st_id.asc()).offset(skip).limit(limit).all()

    def count_stations_with_search(self, db: Session, search: str = "") -> int:
        """Count stations with optional name search"""
        query = db.query(Station)

        if search:
            query = query.filter(Station.st_name.ilike(f"%{search}%"))

        return query.count()

    def check_station_exists(self, db: Session, station_id: str) -> bool:
        """Check if station exists"""
        return db.query(Station.st_id).filter(Station.st_id == station_id).first() is not None

    def delete_by_id(self, db: Session, station_id: str) -> bool:
        """Delete station by ID and return success status"""
        station = self.get_by_id(db, station_id)
        if station:
            db.delete(station)
            db.commit()
            return True
        return False
