from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from placement_tracker.core.config import settings
from placement_tracker.core.rate_limiter import limiter
from placement_tracker.core.security import CurrentOwner, get_current_owner
from placement_tracker.logs.logging_config import logger
from placement_tracker.models.application import TargetRef
from placement_tracker.schemas.application import ApplicationResponse, ApplyRequest
from placement_tracker.schemas.target import DriveListResponse, DriveResponse
from placement_tracker.services.application_service import ApplicationService
from placement_tracker.services.target_service import TargetService

router = APIRouter()


@router.get("", response_model=DriveListResponse)
@limiter.limit("60/minute")
async def list_drives(
    request: Request,
    search: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(settings.default_page_size),
):
    return await TargetService.list_drives(search=search, page=page, limit=limit)


@router.get("/{drive_id}", response_model=DriveResponse)
@limiter.limit("60/minute")
async def get_drive(request: Request, drive_id: str):
    return await TargetService.get_drive(drive_id)


@router.post("/{drive_id}/apply", response_model=ApplicationResponse, status_code=201)
@limiter.limit("10/minute")
async def apply_to_drive(
    request: Request,
    drive_id: str,
    background_tasks: BackgroundTasks,
    data: Optional[ApplyRequest] = None,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    data = data or ApplyRequest()
    application = await ApplicationService.apply(
        current_owner.owner_id,
        TargetRef.drive(drive_id),
        resume=data.resume,
        cover_letter=data.cover_letter,
    )
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} applied to drive {drive_id}"
    )
    return application
