from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import BaseModel, Field
from pymongo import IndexModel

from placement_tracker.utils.time import now_utc


class ProcessScheduleEntry(BaseModel):
    stage: str = Field(..., description="Stage name, parallel to the process list")
    date: Optional[datetime] = Field(None)
    time: Optional[str] = Field(None)
    venue: Optional[str] = Field(None)
    description: Optional[str] = Field(None)


class CompanyDrive(Document):
    company: str = Field(..., description="Company running the drive")
    role: str = Field(..., description="Role offered through the drive")
    location: str = Field(...)
    package: str = Field(..., description="Compensation package")
    deadline: datetime = Field(..., description="Last date to apply")
    logo: Optional[str] = Field(None)
    featured: bool = Field(default=False)
    requirements: List[str] = Field(default_factory=list)
    eligibility: List[str] = Field(default_factory=list)
    description: Optional[str] = Field(None)
    process: List[str] = Field(default_factory=list, description="Ordered recruitment stages")
    process_schedule: List[ProcessScheduleEntry] = Field(default_factory=list)
    applicants: int = Field(default=0, ge=0)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: now_utc())

    class Settings:
        name = "company_drives"
        indexes = [
            IndexModel([("is_active", 1), ("featured", -1), ("deadline", 1)], name="idx_company_drives_listing"),
            IndexModel([("company", 1)], name="idx_company_drives_company"),
        ]
