from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from placement_tracker.core.config import settings
from placement_tracker.core.rate_limiter import limiter
from placement_tracker.core.security import CurrentOwner, get_current_owner
from placement_tracker.logs.logging_config import logger
from placement_tracker.models.application import TargetRef
from placement_tracker.schemas.application import ApplicationResponse, ApplyRequest
from placement_tracker.schemas.target import RoleListResponse, RoleResponse
from placement_tracker.services.application_service import ApplicationService
from placement_tracker.services.target_service import TargetService

router = APIRouter()


@router.get("", response_model=RoleListResponse)
@limiter.limit("60/minute")
async def list_roles(
    request: Request,
    search: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(settings.default_page_size),
):
    return await TargetService.list_roles(search=search, page=page, limit=limit)


@router.get("/{role_id}", response_model=RoleResponse)
@limiter.limit("60/minute")
async def get_role(request: Request, role_id: str):
    return await TargetService.get_role(role_id)


@router.post("/{role_id}/apply", response_model=ApplicationResponse, status_code=201)
@limiter.limit("10/minute")
async def apply_to_role(
    request: Request,
    role_id: str,
    background_tasks: BackgroundTasks,
    data: Optional[ApplyRequest] = None,
    current_owner: CurrentOwner = Depends(get_current_owner),
):
    data = data or ApplyRequest()
    application = await ApplicationService.apply(
        current_owner.owner_id,
        TargetRef.role(role_id),
        resume=data.resume,
        cover_letter=data.cover_letter,
    )
    background_tasks.add_task(
        logger.info,
        f"Owner {current_owner.owner_id} applied to role {role_id}"
    )
    return application
