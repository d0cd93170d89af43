from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from placement_tracker.models.application import ApplicationStatus
from placement_tracker.schemas.target import DriveResponse, RoleResponse, TargetSummary


class BookmarkRequest(BaseModel):
    role_id: Optional[str] = None
    drive_id: Optional[str] = None


class ApplyRequest(BaseModel):
    resume: Optional[str] = None
    cover_letter: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    status: Optional[ApplicationStatus] = None
    process_stage_index: Optional[int] = None
    notes: Optional[str] = None


class StageUpdateResponse(BaseModel):
    stage: Optional[str] = None
    status: str
    date: datetime
    notes: Optional[str] = None


class ApplicationResponse(BaseModel):
    id: str
    owner_id: str
    type: str
    role_id: Optional[str] = None
    drive_id: Optional[str] = None
    status: ApplicationStatus
    applied_date: datetime
    process_stage_index: int
    current_stage: Optional[str] = None
    next_step: Optional[str] = None
    notes: Optional[str] = None
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    updates: List[StageUpdateResponse]


class ApplicationListItem(BaseModel):
    id: str
    type: str
    status: ApplicationStatus
    applied_date: datetime
    current_stage: Optional[str] = None
    next_step: Optional[str] = None
    process_stage_index: int
    target: Optional[TargetSummary] = None


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationListItem]
    total: int
    total_pages: int
    current_page: int


class DriveApplicationSummary(BaseModel):
    id: str
    drive_id: str
    status: ApplicationStatus
    applied_date: datetime
    current_stage: Optional[str] = None
    process_stage_index: int
    next_step: Optional[str] = None


class DriveApplicationListResponse(BaseModel):
    applications: List[DriveApplicationSummary]


class ApplicationStatsResponse(BaseModel):
    total: int
    bookmarked: int
    applied: int
    eligible: int
    shortlisted: int
    interview: int
    rejected: int
    selected: int
    withdrawn: int


class ApplicationCheckResponse(BaseModel):
    has_applied: bool
    status: Optional[ApplicationStatus] = None
    application_id: Optional[str] = None
    applied_date: Optional[datetime] = None


class ApplicationDetailResponse(BaseModel):
    application: ApplicationResponse
    drive: Optional[DriveResponse] = None
    role: Optional[RoleResponse] = None


class ApplicationProgress(ApplicationResponse):
    progress: int


class ApplicationFullStatusResponse(BaseModel):
    application: ApplicationProgress
    drive: Optional[DriveResponse] = None
    role: Optional[RoleResponse] = None


class TimelineEntry(BaseModel):
    stage: Optional[str] = None
    status: str
    date: datetime
    notes: Optional[str] = None


class WithdrawResponse(BaseModel):
    message: str
    application: ApplicationResponse


class MessageResponse(BaseModel):
    message: str
