"""
Shared fixtures: an in-memory Mongo (mongomock-motor) bound to the document
models, plus a small catalog of drives and roles.
"""

import os

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/placement_tracker_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import timedelta

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from placement_tracker.core.database import init_db
from placement_tracker.core.monitoring import monitoring
from placement_tracker.models.company_drive import CompanyDrive, ProcessScheduleEntry
from placement_tracker.models.job_role import JobRole
from placement_tracker.utils.time import now_utc

THREE_STAGE_PROCESS = ["Online Test", "Technical Interview", "HR Interview"]


@pytest.fixture
async def db():
    """Fresh in-memory database per test."""
    client = AsyncMongoMockClient()
    database = client["placement_tracker_test"]
    await init_db(database)
    monitoring.clear_metrics()
    return database


@pytest.fixture
def owner_id():
    return str(ObjectId())


@pytest.fixture
def other_owner_id():
    return str(ObjectId())


@pytest.fixture
async def drive(db):
    """Drive with a three stage process."""
    drive = CompanyDrive(
        company="Acme Corp",
        role="Backend Engineer",
        location="Bengaluru",
        package="12 LPA",
        deadline=now_utc() + timedelta(days=14),
        requirements=["Python", "MongoDB"],
        eligibility=["B.Tech 2025"],
        process=list(THREE_STAGE_PROCESS),
        process_schedule=[ProcessScheduleEntry(stage=stage) for stage in THREE_STAGE_PROCESS],
    )
    await drive.insert()
    return drive


@pytest.fixture
async def single_stage_drive(db):
    drive = CompanyDrive(
        company="Globex",
        role="Data Analyst",
        location="Pune",
        package="8 LPA",
        deadline=now_utc() + timedelta(days=7),
        process=["Interview"],
    )
    await drive.insert()
    return drive


@pytest.fixture
async def empty_process_drive(db):
    drive = CompanyDrive(
        company="Initech",
        role="QA Engineer",
        location="Remote",
        package="6 LPA",
        deadline=now_utc() + timedelta(days=30),
        process=[],
    )
    await drive.insert()
    return drive


@pytest.fixture
async def role(db):
    role = JobRole(
        title="Frontend Developer",
        company="Umbrella",
        location="Hyderabad",
        salary="10 LPA",
        experience="0-2 years",
        skills=["React", "TypeScript"],
        description="Build candidate facing dashboards",
        featured=True,
    )
    await role.insert()
    return role
