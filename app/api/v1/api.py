from fastapi import APIRouter
from app.api.v1.endpoints import qr, attendance, stations, maintenance

api_router = APIRouter()

# Register routes
api_router.include_router(qr.router, prefix="/qr", tags=["QR"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(stations.router, prefix="/stations", tags=["Stations"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["Maintenance"])
