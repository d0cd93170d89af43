from typing import Optional
import logging

from placement_tracker.core.config import settings
from placement_tracker.core.exceptions import NotFoundError, ValidationError
from placement_tracker.core.monitoring import monitor_service_call
from placement_tracker.models.application import TargetKind, TargetRef
from placement_tracker.models.company_drive import CompanyDrive
from placement_tracker.models.job_role import JobRole
from placement_tracker.repositories.target_repository import Target, TargetRepository
from placement_tracker.schemas.target import (
    DriveListResponse,
    DriveResponse,
    ProcessScheduleResponse,
    RoleListResponse,
    RoleResponse,
    TargetSummary,
)
from placement_tracker.utils.helpers import calculate_pagination

logger = logging.getLogger(__name__)

TARGET_LABELS = {
    TargetKind.ROLE: "Job role",
    TargetKind.DRIVE: "Company drive",
}


def check_page(page: int, limit: int) -> None:
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be greater than 0")
    if limit > settings.max_page_size:
        raise ValidationError(f"Limit cannot exceed {settings.max_page_size}")


class TargetService:

    @staticmethod
    async def require_target(ref: TargetRef) -> Target:
        target = await TargetRepository.get_target(ref)
        if target is None:
            raise NotFoundError(f"{TARGET_LABELS[ref.kind]} not found")
        return target

    @staticmethod
    @monitor_service_call("list_drives")
    async def list_drives(search: Optional[str] = None, page: int = 1, limit: int = 10) -> DriveListResponse:
        check_page(page, limit)
        drives, total = await TargetRepository.list_drives(search=search, skip=(page - 1) * limit, limit=limit)
        pagination = calculate_pagination(total, page, limit)
        return DriveListResponse(
            drives=[TargetService.drive_to_response(drive) for drive in drives],
            total=total,
            total_pages=pagination["total_pages"],
            current_page=page,
        )

    @staticmethod
    @monitor_service_call("list_roles")
    async def list_roles(search: Optional[str] = None, page: int = 1, limit: int = 10) -> RoleListResponse:
        check_page(page, limit)
        roles, total = await TargetRepository.list_roles(search=search, skip=(page - 1) * limit, limit=limit)
        pagination = calculate_pagination(total, page, limit)
        return RoleListResponse(
            roles=[TargetService.role_to_response(role) for role in roles],
            total=total,
            total_pages=pagination["total_pages"],
            current_page=page,
        )

    @staticmethod
    @monitor_service_call("get_drive")
    async def get_drive(drive_id: str) -> DriveResponse:
        drive = await TargetService.require_target(TargetRef.drive(drive_id))
        return TargetService.drive_to_response(drive)

    @staticmethod
    @monitor_service_call("get_role")
    async def get_role(role_id: str) -> RoleResponse:
        role = await TargetService.require_target(TargetRef.role(role_id))
        return TargetService.role_to_response(role)

    @staticmethod
    def drive_to_response(drive: CompanyDrive) -> DriveResponse:
        return DriveResponse(
            id=str(drive.id),
            company=drive.company,
            role=drive.role,
            location=drive.location,
            package=drive.package,
            deadline=drive.deadline,
            logo=drive.logo,
            featured=drive.featured,
            requirements=drive.requirements,
            eligibility=drive.eligibility,
            description=drive.description,
            process=drive.process,
            process_schedule=[
                ProcessScheduleResponse(**entry.model_dump()) for entry in drive.process_schedule
            ],
            applicants=drive.applicants,
            is_active=drive.is_active,
        )

    @staticmethod
    def role_to_response(role: JobRole) -> RoleResponse:
        return RoleResponse(
            id=str(role.id),
            title=role.title,
            company=role.company,
            location=role.location,
            salary=role.salary,
            experience=role.experience,
            skills=role.skills,
            description=role.description,
            applicants=role.applicants,
            featured=role.featured,
            match_score=role.match_score,
            company_logo=role.company_logo,
            responsibilities=role.responsibilities,
            qualifications=role.qualifications,
            company_culture=role.company_culture,
            is_active=role.is_active,
            deadline=role.deadline,
        )

    @staticmethod
    def to_summary(target: Target) -> TargetSummary:
        if isinstance(target, CompanyDrive):
            return TargetSummary(
                id=str(target.id),
                kind=TargetKind.DRIVE.value,
                title=target.role,
                company=target.company,
                location=target.location,
                salary=target.package,
                logo=target.logo,
                featured=target.featured,
                deadline=target.deadline,
                requirements=target.requirements,
                applicants=target.applicants,
            )
        return TargetSummary(
            id=str(target.id),
            kind=TargetKind.ROLE.value,
            title=target.title,
            company=target.company,
            location=target.location,
            salary=target.salary,
            logo=target.company_logo,
            featured=target.featured,
            deadline=target.deadline,
            experience=target.experience,
            skills=target.skills,
            match_score=target.match_score,
            applicants=target.applicants,
        )
