"""
Tests for re-aligning drive applications after a drive's process changes.
"""

import pytest
from bson import ObjectId

from placement_tracker.core.exceptions import ValidationError
from placement_tracker.jobs import sync_drive_stages
from placement_tracker.models.application import Application, TargetRef
from placement_tracker.schemas.application import ApplicationStatusUpdate
from placement_tracker.services.application_service import ApplicationService
from placement_tracker.services.stage_sync_service import StageSyncService, SyncReport


async def stored(application_id):
    return await Application.get(ObjectId(application_id))


class TestSyncDriveStages:

    async def test_nothing_to_do(self, owner_id, drive):
        await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))

        report = await StageSyncService.sync_drive_stages()

        assert report == SyncReport(scanned=1, updated=0, skipped=0)

    async def test_inserted_stage_moves_pointer(self, owner_id, drive):
        application = await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))
        await ApplicationService.update_status(
            application.id, owner_id, ApplicationStatusUpdate(process_stage_index=1)
        )
        drive.process = ["Online Test", "Group Discussion", "Technical Interview", "HR Interview"]
        await drive.save()

        report = await StageSyncService.sync_drive_stages()

        synced = await stored(application.id)
        assert report.updated == 1
        assert synced.process_stage_index == 2
        assert synced.current_stage == "Technical Interview"
        assert synced.next_step == "HR Interview"

    async def test_removed_stage_resets_to_first(self, owner_id, drive):
        application = await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))
        await ApplicationService.update_status(
            application.id, owner_id, ApplicationStatusUpdate(process_stage_index=1)
        )
        drive.process = ["Online Test", "HR Interview"]
        await drive.save()

        await StageSyncService.sync_drive_stages()

        synced = await stored(application.id)
        assert synced.process_stage_index == 0
        assert synced.current_stage == "Online Test"
        assert synced.next_step == "HR Interview"

    async def test_second_run_is_a_no_op(self, owner_id, drive):
        await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))
        drive.process = ["Resume Review"] + drive.process
        await drive.save()

        first = await StageSyncService.sync_drive_stages()
        second = await StageSyncService.sync_drive_stages()

        assert first.updated == 1
        assert second.updated == 0

    async def test_skips_bookmarked_and_withdrawn(self, owner_id, other_owner_id, drive):
        await ApplicationService.bookmark(owner_id, TargetRef.drive(drive.id))
        withdrawn = await ApplicationService.apply(other_owner_id, TargetRef.drive(drive.id))
        await ApplicationService.withdraw(withdrawn.id, other_owner_id)
        drive.process = ["Resume Review"] + drive.process
        await drive.save()

        report = await StageSyncService.sync_drive_stages()

        assert report == SyncReport(scanned=2, updated=0, skipped=2)
        assert (await stored(withdrawn.id)).current_stage == "Withdrawn"

    async def test_skips_deleted_drives(self, owner_id, drive):
        await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))
        await drive.delete()

        report = await StageSyncService.sync_drive_stages()

        assert report.skipped == 1

    async def test_role_applications_are_ignored(self, owner_id, role):
        await ApplicationService.apply(owner_id, TargetRef.role(role.id))

        report = await StageSyncService.sync_drive_stages()

        assert report.scanned == 0

    async def test_single_drive_filter(self, owner_id, drive, single_stage_drive):
        await ApplicationService.apply(owner_id, TargetRef.drive(drive.id))
        await ApplicationService.apply(owner_id, TargetRef.drive(single_stage_drive.id))

        report = await StageSyncService.sync_drive_stages(str(single_stage_drive.id))

        assert report.scanned == 1

    async def test_malformed_drive_id(self, db):
        with pytest.raises(ValidationError):
            await StageSyncService.sync_drive_stages("bogus")


class TestSyncCommand:

    def test_main_reports_success(self, monkeypatch):
        async def fake_run(drive_id=None):
            assert drive_id == "abc"
            return SyncReport(scanned=3, updated=1, skipped=1)

        monkeypatch.setattr(sync_drive_stages, "run", fake_run)

        assert sync_drive_stages.main(["--drive-id", "abc"]) == 0

    def test_main_reports_failure(self, monkeypatch):
        async def failing_run(drive_id=None):
            raise ValidationError("Invalid drive_id")

        monkeypatch.setattr(sync_drive_stages, "run", failing_run)

        assert sync_drive_stages.main([]) == 1
