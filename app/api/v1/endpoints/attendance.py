"""
Attendance Endpoints - QR check-in/check-out, day records and leave application
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.db.session import get_db
from app.services.attendance_service import AttendanceService
from app.schemas import (
    ScanRequest,
    LeaveApplyRequest,
    RecordTodayResponse,
    AttendanceRecord,
    AttendanceRecordUpdate,
    DataResponse,
    PaginationResponse
)
from app.api.deps import require_auth, require_min_role_level
from app.core.config import settings
from atams.encryption import encrypt_response_data
from atams.exceptions import BadRequestException

router = APIRouter()
attendance_service = AttendanceService()


def _parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestException(f"Invalid {field} format. Use YYYY-MM-DD")


@router.post(
    "/check-in",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def check_in(
    request: ScanRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Check in by scanning a station QR code

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Process:**
    1. Validate required fields
    2. Verify QR signature
    3. Check QR expiry against scannedAt
    4. Look up station
    5. Check distance from station against its radius
    6. Create or update today's record with status A

    **Errors:**
    - 400: Missing fields, expired QR or invalid coordinates
    - 401: Invalid QR signature
    - 403: Too far from station
    - 404: Station not found
    """
    user_id = str(current_user["user_id"])

    record = attendance_service.check_in(db, user_id, request)

    return DataResponse(
        success=True,
        message="Check-in successful",
        data=record
    )


@router.post(
    "/check-out",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def check_out(
    request: ScanRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Check out by scanning a station QR code

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Errors:**
    - Same as check-in, plus 400 when there is no check-in record for the day
    """
    user_id = str(current_user["user_id"])

    record = attendance_service.check_out(db, user_id, request)

    return DataResponse(
        success=True,
        message="Check-out successful",
        data=record
    )


@router.get(
    "/me/today",
    response_model=DataResponse[RecordTodayResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_record_today(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's attendance record for today

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Response:**
    - Record details if exists
    - Empty response if no record today
    """
    user_id = str(current_user["user_id"])

    record = attendance_service.get_today_record(db, user_id)

    response = DataResponse(
        success=True,
        message="Today's record retrieved successfully",
        data=record
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me",
    response_model=PaginationResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_records(
    limit: int = Query(50, ge=1, le=100, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's attendance history, newest first

    **Authentication:**
    - Requires valid user authentication (role level >= 1)
    """
    user_id = str(current_user["user_id"])

    records = attendance_service.get_user_records(db, user_id, offset, limit)
    total = attendance_service.count_user_records(db, user_id)

    response = PaginationResponse(
        success=True,
        message="Records retrieved successfully",
        data=records,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/",
    response_model=PaginationResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_records_admin(
    user_id: Optional[str] = Query(None, description="Filter by user ID"),
    station_id: Optional[str] = Query(None, description="Filter by station ID"),
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    status: Optional[str] = Query(None, pattern="^[APLS]$", description="Filter by status (A/P/L/S)"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    sort: str = Query("desc", pattern="^(asc|desc)$", description="Sort order by date"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get attendance records (Admin only)

    **Authentication:**
    - Requires role level >= 50 (Admin or above)

    **Query Parameters:**
    - user_id: Filter by specific user
    - station_id: Filter by specific station
    - date_from/date_to: Date range filter (YYYY-MM-DD)
    - status: A (attend), P (present, checked out), L (leave), S (sick)
    - limit: Max records (1-1000, default 100)
    - offset: Skip records (default 0)
    - sort: asc or desc (default desc)
    """
    parsed_date_from = _parse_date(date_from, "date_from")
    parsed_date_to = _parse_date(date_to, "date_to")

    records = attendance_service.get_records_admin(
        db, user_id, station_id, parsed_date_from, parsed_date_to, status, offset, limit, sort
    )

    total = attendance_service.count_records_admin(
        db, user_id, station_id, parsed_date_from, parsed_date_to, status
    )

    response = PaginationResponse(
        success=True,
        message="Records retrieved successfully",
        data=records,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/leave",
    response_model=DataResponse[List[AttendanceRecord]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def apply_leave(
    request: LeaveApplyRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Apply an approved leave or sick request to attendance

    **Authentication:**
    - Requires role level >= 50 (Admin or above)

    **Process:**
    - Every day from startDate to endDate (inclusive) becomes L (leave) or S (sick)
    - Existing check-in/check-out on those days is cleared
    """
    records = attendance_service.apply_leave(db, request)

    return DataResponse(
        success=True,
        message=f"{len(records)} day(s) marked as {request.kind}",
        data=records
    )


@router.get(
    "/{record_id}",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_record(
    record_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get single attendance record by ID

    **Authentication:**
    - Requires role level >= 50 (Admin or above)
    """
    record = attendance_service.get_record(db, record_id)

    response = DataResponse(
        success=True,
        message="Record retrieved successfully",
        data=record
    )

    return encrypt_response_data(response, settings)


@router.put(
    "/{record_id}",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def update_record(
    record_id: str,
    payload: AttendanceRecordUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Correct an attendance record (e.g. a mistaken check-out)

    **Authentication:**
    - Requires role level >= 50 (Admin or above)

    **Updateable fields:**
    - ar_check_in, ar_check_out: send null to clear
    - ar_status: A, P, L or S
    """
    record = attendance_service.update_record(db, record_id, payload)

    return DataResponse(
        success=True,
        message="Record updated successfully",
        data=record
    )


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_min_role_level(50))]
)
async def delete_record(
    record_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Delete attendance record

    **Authentication:**
    - Requires role level >= 50 (Admin or above)
    """
    attendance_service.delete_record(db, record_id)

    # 204 returns no content
    return None
