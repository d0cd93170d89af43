"""
Tests for timeline reconstruction.
"""

from datetime import datetime, timedelta, timezone

from bson import ObjectId

from placement_tracker.models.application import Application, StageUpdate, TargetRef
from placement_tracker.services.timeline import APPLICATION_SUBMITTED, build_timeline


def make_application(updates=None, applied_date=None):
    return Application(
        owner_id=ObjectId(),
        target=TargetRef.drive(ObjectId()),
        applied_date=applied_date or datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc),
        current_stage="Online Test",
        updates=updates or [],
    )


class TestBuildTimeline:

    async def test_no_updates_yields_single_applied_entry(self, db):
        application = make_application()

        timeline = build_timeline(application)

        assert len(timeline) == 1
        assert timeline[0].stage == "Applied"
        assert timeline[0].status == "applied"
        assert timeline[0].notes == APPLICATION_SUBMITTED
        assert timeline[0].date == application.applied_date

    async def test_entries_are_newest_first(self, db):
        applied = datetime(2025, 1, 10, tzinfo=timezone.utc)
        updates = [
            StageUpdate(stage="Online Test", status="eligible", date=applied + timedelta(days=1)),
            StageUpdate(stage="HR Interview", status="interview", date=applied + timedelta(days=5)),
            StageUpdate(stage="Technical Interview", status="shortlisted", date=applied + timedelta(days=3)),
        ]

        timeline = build_timeline(make_application(updates, applied))

        assert [entry.stage for entry in timeline] == [
            "HR Interview",
            "Technical Interview",
            "Online Test",
            "Applied",
        ]

    async def test_naive_dates_are_treated_as_utc(self, db):
        applied = datetime(2025, 1, 10, tzinfo=timezone.utc)
        updates = [StageUpdate(stage="Online Test", status="eligible", date=datetime(2025, 1, 11))]

        timeline = build_timeline(make_application(updates, applied))

        assert timeline[0].date == datetime(2025, 1, 11, tzinfo=timezone.utc)
        assert timeline[1].stage == "Applied"

    async def test_stored_updates_are_not_modified(self, db):
        application = make_application([StageUpdate(stage="Online Test", status="eligible")])

        build_timeline(application)

        assert len(application.updates) == 1
