from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

from placement_tracker.core.monitoring import monitor_service_call, record_business_metric
from placement_tracker.models.application import Application, ApplicationStatus, TargetKind
from placement_tracker.repositories.application_repository import ApplicationRepository
from placement_tracker.repositories.target_repository import TargetRepository
from placement_tracker.services.stage_calculator import APPLIED_STAGE, compute_stage, locate_stage
from placement_tracker.utils.helpers import parse_object_id

logger = logging.getLogger(__name__)

# labels of these statuses are not process stage names
UNTRACKED_STATUSES = {ApplicationStatus.BOOKMARKED, ApplicationStatus.WITHDRAWN}


@dataclass
class SyncReport:
    scanned: int = 0
    updated: int = 0
    skipped: int = 0


def derive_stage_fields(application: Application, process: List[str]) -> Dict:
    """Stage pointer and labels re-derived from the application's current stage label."""
    index = locate_stage(application.current_stage or APPLIED_STAGE, process)
    stage = compute_stage(index, process)
    return {
        "process_stage_index": index,
        "current_stage": stage.current_stage,
        "next_step": stage.next_step,
    }


class StageSyncService:

    @staticmethod
    @monitor_service_call("sync_drive_stages")
    async def sync_drive_stages(drive_id: Optional[str] = None) -> SyncReport:
        """Re-align drive applications with their drive's (possibly edited) process.

        Running it twice in a row changes nothing the second time.
        """
        drive_oid = parse_object_id(drive_id, "drive_id") if drive_id else None
        applications = await ApplicationRepository.list_for_drives(drive_oid)
        drives = await TargetRepository.get_targets(
            TargetKind.DRIVE, [application.target.id for application in applications]
        )
        logger.info(f"Found {len(applications)} drive applications to check")

        report = SyncReport()
        for application in applications:
            report.scanned += 1

            if application.status in UNTRACKED_STATUSES:
                report.skipped += 1
                continue

            drive = drives.get(application.target.id)
            if drive is None:
                logger.warning(f"Drive {application.target.id} for application {application.id} no longer exists")
                report.skipped += 1
                continue

            fields = derive_stage_fields(application, drive.process)
            current = {
                "process_stage_index": application.process_stage_index,
                "current_stage": application.current_stage,
                "next_step": application.next_step,
            }
            if fields == current:
                continue

            await ApplicationRepository.set_fields(application.id, fields)
            report.updated += 1
            logger.info(
                f"Updated application {application.id}: stage {fields['process_stage_index']} "
                f"({fields['current_stage']}) -> next: {fields['next_step']}"
            )

        record_business_metric("stage_sync_updated", value=report.updated)
        logger.info(f"Stage sync finished: {report}")
        return report
