from typing import Dict, List, Optional, Tuple
import logging

from placement_tracker.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from placement_tracker.core.monitoring import monitor_service_call, record_business_metric
from placement_tracker.dependencies.error_code import ErrorCode
from placement_tracker.models.application import (
    Application,
    ApplicationStatus,
    TargetKind,
    TargetRef,
)
from placement_tracker.models.company_drive import CompanyDrive
from placement_tracker.repositories.application_repository import ApplicationRepository
from placement_tracker.repositories.target_repository import TargetRepository, stage_list
from placement_tracker.schemas.application import (
    ApplicationCheckResponse,
    ApplicationDetailResponse,
    ApplicationFullStatusResponse,
    ApplicationListItem,
    ApplicationListResponse,
    ApplicationProgress,
    ApplicationResponse,
    ApplicationStatsResponse,
    ApplicationStatusUpdate,
    DriveApplicationListResponse,
    DriveApplicationSummary,
    StageUpdateResponse,
    TimelineEntry,
)
from placement_tracker.services.stage_calculator import APPLIED_STAGE, compute_stage, locate_stage
from placement_tracker.services.target_service import TargetService, check_page
from placement_tracker.services.timeline import build_timeline
from placement_tracker.utils.helpers import calculate_pagination, parse_object_id
from placement_tracker.utils.time import ensure_utc

logger = logging.getLogger(__name__)

BOOKMARKED_STAGE = "Bookmarked"
BOOKMARKED_NEXT_STEP = "Apply when ready"
ROLE_NEXT_STEP = "Screening"
WITHDRAWN_STAGE = "Withdrawn"
WITHDRAWN_NOTE = "Application withdrawn by user"


class ApplicationService:
    """Lifecycle of a candidate's applications: bookmark, apply, progress, withdraw."""

    @staticmethod
    @monitor_service_call("apply")
    async def apply(
        owner_id: str,
        target_ref: TargetRef,
        resume: Optional[str] = None,
        cover_letter: Optional[str] = None
    ) -> ApplicationResponse:
        owner_oid = parse_object_id(owner_id, "owner id")
        target = await TargetService.require_target(target_ref)

        existing = await ApplicationRepository.find_by_target(owner_oid, target_ref)
        if existing:
            raise ConflictError(
                f"Already applied for this {target_ref.kind.value}",
                ErrorCode.RESOURCE_ALREADY_EXISTS,
            )

        if target_ref.kind == TargetKind.DRIVE:
            stage = compute_stage(0, stage_list(target))
            current_stage, next_step = stage.current_stage, stage.next_step
        else:
            current_stage, next_step = APPLIED_STAGE, ROLE_NEXT_STEP

        application = Application(
            owner_id=owner_oid,
            target=target_ref,
            status=ApplicationStatus.APPLIED,
            process_stage_index=0,
            current_stage=current_stage,
            next_step=next_step,
            resume=resume,
            cover_letter=cover_letter,
        )
        await ApplicationRepository.create(application)
        try:
            await TargetRepository.increment_applicants(target_ref)
        except PersistenceError as e:
            # the application is stored; a retry would only hit the duplicate check
            logger.error(
                f"Applicant counter of {target_ref.kind.value} {target_ref.id} not incremented "
                f"for application {application.id}: {e.original_error}"
            )

        record_business_metric("application_created", tags={"kind": target_ref.kind.value})
        logger.info(f"Owner {owner_id} applied to {target_ref.kind.value} {target_ref.id}")
        return ApplicationService._to_response(application)

    @staticmethod
    @monitor_service_call("bookmark")
    async def bookmark(owner_id: str, target_ref: TargetRef) -> Tuple[ApplicationResponse, bool]:
        """Bookmark a role or drive.

        Returns the application and whether it was newly created. An existing
        application in any other status is turned back into a bookmark in
        place, dropping its stage position.
        """
        owner_oid = parse_object_id(owner_id, "owner id")
        await TargetService.require_target(target_ref)

        existing = await ApplicationRepository.find_by_target(owner_oid, target_ref)
        if existing:
            if existing.status == ApplicationStatus.BOOKMARKED:
                raise ConflictError("Already bookmarked", ErrorCode.RESOURCE_ALREADY_EXISTS)

            logger.info(f"Converting application {existing.id} from {existing.status.value} to bookmarked")
            existing.status = ApplicationStatus.BOOKMARKED
            existing.process_stage_index = 0
            existing.current_stage = BOOKMARKED_STAGE
            existing.next_step = BOOKMARKED_NEXT_STEP
            await ApplicationRepository.save(existing)
            return ApplicationService._to_response(existing), False

        application = Application(
            owner_id=owner_oid,
            target=target_ref,
            status=ApplicationStatus.BOOKMARKED,
            current_stage=BOOKMARKED_STAGE,
            next_step=BOOKMARKED_NEXT_STEP,
        )
        await ApplicationRepository.create(application)

        record_business_metric("application_bookmarked", tags={"kind": target_ref.kind.value})
        return ApplicationService._to_response(application), True

    @staticmethod
    @monitor_service_call("update_status")
    async def update_status(
        application_id: str,
        owner_id: str,
        patch: ApplicationStatusUpdate
    ) -> ApplicationResponse:
        if patch.process_stage_index is not None and patch.process_stage_index < 0:
            raise ValidationError("Stage index cannot be negative", ErrorCode.INVALID_STAGE_INDEX)

        application = await ApplicationService._require_application(application_id, owner_id)

        current_stage = application.current_stage
        next_step = application.next_step
        if patch.process_stage_index is not None:
            target = await TargetService.require_target(application.target)
            stages = stage_list(target)
            ApplicationService._check_stage_index(patch.process_stage_index, stages)
            # role labels are not tied to a stage list
            if application.is_drive:
                stage = compute_stage(patch.process_stage_index, stages)
                current_stage, next_step = stage.current_stage, stage.next_step

        # every call is recorded, even when nothing changes
        application.record_update(
            stage=current_stage,
            status=(patch.status or application.status).value,
            notes=patch.notes or f"Stage updated to {current_stage}",
        )

        if patch.status:
            application.status = patch.status
        if patch.process_stage_index is not None:
            application.process_stage_index = patch.process_stage_index
        application.current_stage = current_stage
        application.next_step = next_step
        if patch.notes:
            application.notes = patch.notes

        await ApplicationRepository.save(application)
        return ApplicationService._to_response(application)

    @staticmethod
    @monitor_service_call("withdraw")
    async def withdraw(application_id: str, owner_id: str) -> ApplicationResponse:
        application = await ApplicationService._require_application(application_id, owner_id)

        if application.status == ApplicationStatus.WITHDRAWN:
            raise ConflictError("Application already withdrawn")

        application.status = ApplicationStatus.WITHDRAWN
        application.current_stage = WITHDRAWN_STAGE
        application.next_step = WITHDRAWN_NOTE
        application.record_update(
            stage=WITHDRAWN_STAGE,
            status=ApplicationStatus.WITHDRAWN.value,
            notes=WITHDRAWN_NOTE,
        )
        await ApplicationRepository.save(application)

        record_business_metric("application_withdrawn", tags={"kind": application.target.kind.value})
        return ApplicationService._to_response(application)

    @staticmethod
    @monitor_service_call("delete_application")
    async def delete(application_id: str, owner_id: str) -> None:
        application = await ApplicationService._require_application(application_id, owner_id)
        await ApplicationRepository.delete(application)

    @staticmethod
    @monitor_service_call("timeline")
    async def timeline(application_id: str, owner_id: str) -> List[TimelineEntry]:
        application = await ApplicationService._require_application(application_id, owner_id)
        return [
            TimelineEntry(stage=entry.stage, status=entry.status, date=entry.date, notes=entry.notes)
            for entry in build_timeline(application)
        ]

    @staticmethod
    @monitor_service_call("list_applications")
    async def list_applications(
        owner_id: str,
        status: Optional[str] = None,
        kind: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> ApplicationListResponse:
        owner_oid = parse_object_id(owner_id, "owner id")
        check_page(page, limit)
        status_filter = ApplicationService._parse_status(status)
        kind_filter = ApplicationService._parse_kind(kind)

        applications, total = await ApplicationRepository.list_for_owner(
            owner_oid,
            status=status_filter,
            kind=kind_filter,
            skip=(page - 1) * limit,
            limit=limit,
        )
        targets = await ApplicationService._load_targets(applications)

        items = []
        for application in applications:
            target = targets.get((application.target.kind, application.target.id))
            items.append(
                ApplicationListItem(
                    id=str(application.id),
                    type=application.target.kind.value,
                    status=application.status,
                    applied_date=ensure_utc(application.applied_date),
                    current_stage=application.current_stage,
                    next_step=application.next_step,
                    process_stage_index=application.process_stage_index,
                    target=TargetService.to_summary(target) if target else None,
                )
            )

        pagination = calculate_pagination(total, page, limit)
        return ApplicationListResponse(
            applications=items,
            total=total,
            total_pages=pagination["total_pages"],
            current_page=page,
        )

    @staticmethod
    @monitor_service_call("list_drive_applications")
    async def list_drive_applications(owner_id: str) -> DriveApplicationListResponse:
        owner_oid = parse_object_id(owner_id, "owner id")
        applications = await ApplicationRepository.list_by_kind(owner_oid, TargetKind.DRIVE)
        return DriveApplicationListResponse(
            applications=[
                DriveApplicationSummary(
                    id=str(application.id),
                    drive_id=str(application.target.id),
                    status=application.status,
                    applied_date=ensure_utc(application.applied_date),
                    current_stage=application.current_stage,
                    process_stage_index=application.process_stage_index or 0,
                    next_step=application.next_step,
                )
                for application in applications
            ]
        )

    @staticmethod
    @monitor_service_call("application_stats")
    async def stats(owner_id: str) -> ApplicationStatsResponse:
        owner_oid = parse_object_id(owner_id, "owner id")
        counts = await ApplicationRepository.count_by_status(owner_oid)
        by_status = {status.value: counts.get(status.value, 0) for status in ApplicationStatus}
        return ApplicationStatsResponse(total=sum(counts.values()), **by_status)

    @staticmethod
    @monitor_service_call("get_by_target")
    async def get_by_target(owner_id: str, kind: str, target_id: str) -> ApplicationCheckResponse:
        owner_oid = parse_object_id(owner_id, "owner id")
        target_ref = TargetRef.parse(kind, target_id)

        application = await ApplicationRepository.find_by_target(owner_oid, target_ref)
        if not application:
            return ApplicationCheckResponse(has_applied=False)

        return ApplicationCheckResponse(
            has_applied=True,
            status=application.status,
            application_id=str(application.id),
            applied_date=ensure_utc(application.applied_date),
        )

    @staticmethod
    @monitor_service_call("get_application")
    async def get_application(application_id: str, owner_id: str) -> ApplicationDetailResponse:
        application = await ApplicationService._require_application(application_id, owner_id)
        target = await TargetRepository.get_target(application.target)

        response = ApplicationDetailResponse(application=ApplicationService._to_response(application))
        ApplicationService._attach_target(response, target)
        return response

    @staticmethod
    @monitor_service_call("get_full_status")
    async def get_full_status(application_id: str, owner_id: str) -> ApplicationFullStatusResponse:
        """Application with progress recomputed against the target's current stage list."""
        application = await ApplicationService._require_application(application_id, owner_id)
        target = await TargetService.require_target(application.target)

        stages = stage_list(target)
        stage_index = application.process_stage_index or 0
        if stage_index >= len(stages) and stages:
            # the process shrank since the pointer was stored
            stage_index = locate_stage(application.current_stage or APPLIED_STAGE, stages)
        stage = compute_stage(stage_index, stages)
        next_step = stage.next_step if stages else application.next_step

        base = ApplicationService._to_response(application)
        response = ApplicationFullStatusResponse(
            application=ApplicationProgress(
                **base.model_dump(exclude={"next_step", "process_stage_index"}),
                process_stage_index=stage_index,
                next_step=next_step,
                progress=stage.progress,
            )
        )
        ApplicationService._attach_target(response, target)
        return response

    @staticmethod
    async def _require_application(application_id: str, owner_id: str) -> Application:
        application_oid = parse_object_id(application_id, "application id")
        owner_oid = parse_object_id(owner_id, "owner id")

        application = await ApplicationRepository.get_for_owner(application_oid, owner_oid)
        if not application:
            raise NotFoundError("Application not found")
        return application

    @staticmethod
    def _check_stage_index(index: int, stages: List[str]) -> None:
        if stages and index >= len(stages):
            raise ValidationError(
                f"Stage index {index} is outside the {len(stages)} stage process",
                ErrorCode.INVALID_STAGE_INDEX,
            )
        if not stages and index != 0:
            raise ValidationError(
                "Stage index must be 0 when the target has no process stages",
                ErrorCode.INVALID_STAGE_INDEX,
            )

    @staticmethod
    def _parse_status(status: Optional[str]) -> Optional[ApplicationStatus]:
        if not status or status == "all":
            return None
        try:
            return ApplicationStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

    @staticmethod
    def _parse_kind(kind: Optional[str]) -> Optional[TargetKind]:
        if not kind or kind == "all":
            return None
        try:
            return TargetKind(kind)
        except ValueError:
            raise ValidationError('Invalid type. Use "role" or "drive"', ErrorCode.INVALID_TARGET)

    @staticmethod
    async def _load_targets(applications: List[Application]) -> Dict:
        targets = {}
        for kind in TargetKind:
            ids = [a.target.id for a in applications if a.target.kind == kind]
            found = await TargetRepository.get_targets(kind, ids)
            targets.update({(kind, target_id): target for target_id, target in found.items()})
        return targets

    @staticmethod
    def _attach_target(response, target) -> None:
        if target is None:
            return
        if isinstance(target, CompanyDrive):
            response.drive = TargetService.drive_to_response(target)
        else:
            response.role = TargetService.role_to_response(target)

    @staticmethod
    def _to_response(application: Application) -> ApplicationResponse:
        is_drive = application.is_drive
        return ApplicationResponse(
            id=str(application.id),
            owner_id=str(application.owner_id),
            type=application.target.kind.value,
            role_id=None if is_drive else str(application.target.id),
            drive_id=str(application.target.id) if is_drive else None,
            status=application.status,
            applied_date=ensure_utc(application.applied_date),
            process_stage_index=application.process_stage_index,
            current_stage=application.current_stage,
            next_step=application.next_step,
            notes=application.notes,
            resume=application.resume,
            cover_letter=application.cover_letter,
            updates=[
                StageUpdateResponse(
                    stage=update.stage,
                    status=update.status,
                    date=ensure_utc(update.date),
                    notes=update.notes,
                )
                for update in application.updates
            ],
        )
