from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response, status

from placement_tracker.core.config import settings
from placement_tracker.core.rate_limiter import limiter
from placement_tracker.core.security import CurrentOwner, get_current_owner
from placement_tracker.logs.logging_config import logger
from placement_tracker.models.application import TargetRef
from placement_tracker.schemas.application import (
    ApplicationCheckResponse,
    ApplicationDetailResponse,
    ApplicationFullStatusResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatsResponse,
    ApplicationStatusUpdate,
    BookmarkRequest,
    DriveApplicationListResponse,
    MessageResponse,
    TimelineEntry,
    WithdrawResponse,
)
from placement_tracker.services.application_service import ApplicationService

router = APIRouter()


@router.get("", response_model=ApplicationListResponse)
@limiter.limit("30/minute")
async def list_applications(
    request: Request,
    background_tasks: BackgroundTasks,
    status_filter: Optional[str] = Query(None, alias="status"),
    type: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(settings.default_page_size),
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} listing applications: status={status_filter}, type={type}, page={page}"
    )
    return await ApplicationService.list_applications(
        current_owner.owner_id, status=status_filter, kind=type, page=page, limit=limit
    )


@router.get("/stats", response_model=ApplicationStatsResponse)
@limiter.limit("30/minute")
async def application_stats(
    request: Request,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.stats(current_owner.owner_id)


@router.get("/drives", response_model=DriveApplicationListResponse)
@limiter.limit("30/minute")
async def list_drive_applications(
    request: Request,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.list_drive_applications(current_owner.owner_id)


@router.get("/check/{kind}/{target_id}", response_model=ApplicationCheckResponse)
@limiter.limit("60/minute")
async def check_application(
    request: Request,
    kind: str,
    target_id: str,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.get_by_target(current_owner.owner_id, kind, target_id)


@router.post("/bookmark", response_model=ApplicationResponse, status_code=201)
@limiter.limit("20/minute")
async def bookmark(
    request: Request,
    response: Response,
    data: BookmarkRequest,
    background_tasks: BackgroundTasks,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    target_ref = TargetRef.from_ids(role_id=data.role_id, drive_id=data.drive_id)
    application, created = await ApplicationService.bookmark(current_owner.owner_id, target_ref)
    if not created:
        response.status_code = status.HTTP_200_OK

    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} bookmarked {target_ref.kind.value} {target_ref.id}"
    )
    return application


@router.get("/status/{application_id}", response_model=ApplicationFullStatusResponse)
@limiter.limit("30/minute")
async def application_full_status(
    request: Request,
    application_id: str,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.get_full_status(application_id, current_owner.owner_id)


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
@limiter.limit("30/minute")
async def get_application(
    request: Request,
    application_id: str,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.get_application(application_id, current_owner.owner_id)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
@limiter.limit("20/minute")
async def update_application_status(
    request: Request,
    application_id: str,
    data: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    application = await ApplicationService.update_status(application_id, current_owner.owner_id, data)
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} moved application {application_id} to "
        f"{application.status.value} / {application.current_stage}"
    )
    return application


@router.get("/{application_id}/timeline", response_model=List[TimelineEntry])
@limiter.limit("30/minute")
async def application_timeline(
    request: Request,
    application_id: str,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    return await ApplicationService.timeline(application_id, current_owner.owner_id)


@router.post("/{application_id}/withdraw", response_model=WithdrawResponse)
@limiter.limit("10/minute")
async def withdraw_application(
    request: Request,
    application_id: str,
    background_tasks: BackgroundTasks,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    application = await ApplicationService.withdraw(application_id, current_owner.owner_id)
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} withdrew application {application_id}"
    )
    return WithdrawResponse(message="Application withdrawn successfully", application=application)


@router.delete("/{application_id}", response_model=MessageResponse)
@limiter.limit("10/minute")
async def delete_application(
    request: Request,
    application_id: str,
    background_tasks: BackgroundTasks,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    await ApplicationService.delete(application_id, current_owner.owner_id)
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} deleted application {application_id}"
    )
    return MessageResponse(message="Application deleted successfully")
