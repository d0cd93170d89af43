from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import Field
from pymongo import IndexModel

from placement_tracker.utils.time import now_utc


class JobRole(Document):
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    location: str = Field(...)
    salary: str = Field(...)
    experience: str = Field(..., description="Experience requirement")
    skills: List[str] = Field(default_factory=list)
    description: str = Field(...)
    applicants: int = Field(default=0, ge=0)
    featured: bool = Field(default=False)
    match_score: Optional[int] = Field(None, ge=0, le=100)
    company_logo: Optional[str] = Field(None)
    responsibilities: List[str] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    company_culture: Optional[str] = Field(None)
    is_active: bool = Field(default=True)
    deadline: Optional[datetime] = Field(None)
    created_at: datetime = Field(default_factory=lambda: now_utc())

    class Settings:
        name = "job_roles"
        indexes = [
            IndexModel([("is_active", 1), ("featured", -1), ("created_at", -1)], name="idx_job_roles_listing"),
            IndexModel([("company", 1)], name="idx_job_roles_company"),
        ]
