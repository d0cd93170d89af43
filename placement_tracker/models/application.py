from datetime import datetime
from enum import Enum
from typing import List, Optional

from beanie import Document
from bson import ObjectId
from pydantic import BaseModel, Field
from pymongo import IndexModel

from placement_tracker.core.exceptions import ValidationError
from placement_tracker.dependencies.error_code import ErrorCode
from placement_tracker.utils.helpers import parse_object_id
from placement_tracker.utils.time import now_utc


class ApplicationStatus(str, Enum):
    BOOKMARKED = "bookmarked"
    APPLIED = "applied"
    ELIGIBLE = "eligible"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    SELECTED = "selected"
    WITHDRAWN = "withdrawn"


class TargetKind(str, Enum):
    ROLE = "role"
    DRIVE = "drive"


class TargetRef(BaseModel):
    """Reference to exactly one recruiting target: a job role or a company drive."""

    kind: TargetKind = Field(..., description="role or drive")
    id: ObjectId = Field(..., description="ID of the referenced role or drive")

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @classmethod
    def role(cls, role_id) -> "TargetRef":
        return cls(kind=TargetKind.ROLE, id=parse_object_id(role_id, "role_id"))

    @classmethod
    def drive(cls, drive_id) -> "TargetRef":
        return cls(kind=TargetKind.DRIVE, id=parse_object_id(drive_id, "drive_id"))

    @classmethod
    def from_ids(cls, role_id=None, drive_id=None) -> "TargetRef":
        """Build a reference from the two optional ids a client may send.

        Exactly one of them has to be present; sending none or both is a
        validation error.
        """
        if bool(role_id) == bool(drive_id):
            raise ValidationError(
                "Either roleId or driveId is required, but not both",
                ErrorCode.INVALID_TARGET,
            )
        if role_id:
            return cls.role(role_id)
        return cls.drive(drive_id)

    @classmethod
    def parse(cls, kind: str, target_id) -> "TargetRef":
        try:
            target_kind = TargetKind(kind)
        except ValueError:
            raise ValidationError('Invalid type. Use "role" or "drive"', ErrorCode.INVALID_TARGET)
        return cls(kind=target_kind, id=parse_object_id(target_id, f"{target_kind.value}_id"))


class StageUpdate(BaseModel):
    stage: Optional[str] = Field(None, description="Stage label at the time of the update")
    status: str = Field(..., description="Application status at the time of the update")
    date: datetime = Field(default_factory=lambda: now_utc())
    notes: Optional[str] = Field(None)


class Application(Document):
    owner_id: ObjectId = Field(..., description="ID of the candidate who owns the application")
    target: TargetRef = Field(..., description="The role or drive this application points to")
    status: ApplicationStatus = Field(ApplicationStatus.APPLIED)
    applied_date: datetime = Field(default_factory=lambda: now_utc(), description="First time the target was touched")
    process_stage_index: int = Field(0, ge=0, description="Zero-based pointer into the drive process")
    current_stage: Optional[str] = Field(None)
    next_step: Optional[str] = Field(None)
    notes: Optional[str] = Field(None)
    resume: Optional[str] = Field(None, description="Resume link or reference submitted with the application")
    cover_letter: Optional[str] = Field(None)
    updates: List[StageUpdate] = Field(default_factory=list, description="Append-only status history")
    updated_at: datetime = Field(default_factory=lambda: now_utc())

    class Settings:
        name = "applications"
        indexes = [
            IndexModel(
                [("owner_id", 1), ("target.kind", 1), ("target.id", 1)],
                name="uniq_applications_owner_target",
                unique=True,
            ),
            IndexModel([("owner_id", 1), ("applied_date", -1)], name="idx_applications_owner_recent"),
            IndexModel([("owner_id", 1), ("status", 1)], name="idx_applications_owner_status"),
            IndexModel([("target.kind", 1), ("target.id", 1)], name="idx_applications_target"),
        ]

    class Config:
        arbitrary_types_allowed = True

    @property
    def is_drive(self) -> bool:
        return self.target.kind == TargetKind.DRIVE

    def record_update(self, stage: Optional[str], status: str, notes: Optional[str]) -> StageUpdate:
        update = StageUpdate(stage=stage, status=status, date=now_utc(), notes=notes)
        self.updates.append(update)
        return update
