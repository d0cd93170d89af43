from fastapi import APIRouter
from placement_tracker.api import (
    applications,
    drives,
    roles,
)


api_router = APIRouter()

api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(drives.router, prefix="/drives", tags=["Company Drives"])
api_router.include_router(roles.router, prefix="/roles", tags=["Job Roles"])
