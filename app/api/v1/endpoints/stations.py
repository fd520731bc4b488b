"""
Stations Endpoints - CRUD and status operations for check-in stations
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.station_service import StationService
from app.schemas import (
    Station,
    StationCreate,
    StationUpdate,
    StationStatusUpdate,
    StationStatusResponse,
    DataResponse,
    PaginationResponse
)
from app.api.deps import require_auth, require_min_role_level
from app.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
station_service = StationService()


@router.get(
    "/",
    response_model=PaginationResponse[Station],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def list_stations(
    search: str = Query("", description="Search stations by name"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get list of stations with pagination and search

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    stations = station_service.list_stations(db, search=search, skip=skip, limit=limit)
    total = station_service.count_stations(db, search=search)

    response = PaginationResponse(
        success=True,
        message="Stations retrieved successfully",
        data=stations,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/{st_id}",
    response_model=DataResponse[Station],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_station(
    st_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get single station by ID

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    station = station_service.get_station(db, st_id)

    response = DataResponse(
        success=True,
        message="Station retrieved successfully",
        data=station
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/",
    response_model=DataResponse[Station],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_min_role_level(50))]
)
async def create_station(
    station: StationCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Create new station

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Validation:**
    - st_id: required, unique, max 50 characters
    - st_latitude/st_longitude: WGS-84 bounds
    - st_radius_m: geofence radius in meters, > 0
    """
    new_station = station_service.create_station(db, station)

    return DataResponse(
        success=True,
        message="Station created successfully",
        data=new_station
    )


@router.put(
    "/{st_id}",
    response_model=DataResponse[Station],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def update_station(
    st_id: str,
    station: StationUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Update existing station

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Updateable fields:**
    - st_name, st_latitude, st_longitude, st_radius_m
    """
    updated_station = station_service.update_station(db, st_id, station)

    return DataResponse(
        success=True,
        message="Station updated successfully",
        data=updated_station
    )


@router.patch(
    "/{st_id}/status",
    response_model=DataResponse[Station],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def update_station_status(
    st_id: str,
    payload: StationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Set station status (active/offline)

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    updated_station = station_service.update_status(db, st_id, payload)

    return DataResponse(
        success=True,
        message="Station status updated successfully",
        data=updated_station
    )


@router.get(
    "/{st_id}/status",
    response_model=DataResponse[StationStatusResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def check_station_status(
    st_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Check station status

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Note:**
    - A station whose display has not requested a QR within
      STATION_OFFLINE_AFTER_MINUTES is marked offline
    """
    station_status = station_service.check_status(db, st_id)

    response = DataResponse(
        success=True,
        message="Station status retrieved successfully",
        data=station_status
    )

    return encrypt_response_data(response, settings)


@router.delete(
    "/{st_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_min_role_level(50))]
)
async def delete_station(
    st_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Delete station

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Note:**
    - Existing attendance records keep their history with station reference cleared
    """
    station_service.delete_station(db, st_id)

    # 204 returns no content
    return None
