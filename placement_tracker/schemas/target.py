from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class ProcessScheduleResponse(BaseModel):
    stage: str
    date: Optional[datetime] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    description: Optional[str] = None


class DriveResponse(BaseModel):
    id: str
    company: str
    role: str
    location: str
    package: str
    deadline: datetime
    logo: Optional[str] = None
    featured: bool
    requirements: List[str]
    eligibility: List[str]
    description: Optional[str] = None
    process: List[str]
    process_schedule: List[ProcessScheduleResponse]
    applicants: int
    is_active: bool


class RoleResponse(BaseModel):
    id: str
    title: str
    company: str
    location: str
    salary: str
    experience: str
    skills: List[str]
    description: str
    applicants: int
    featured: bool
    match_score: Optional[int] = None
    company_logo: Optional[str] = None
    responsibilities: List[str]
    qualifications: List[str]
    company_culture: Optional[str] = None
    is_active: bool
    deadline: Optional[datetime] = None


class DriveListResponse(BaseModel):
    drives: List[DriveResponse]
    total: int
    total_pages: int
    current_page: int


class RoleListResponse(BaseModel):
    roles: List[RoleResponse]
    total: int
    total_pages: int
    current_page: int


class TargetSummary(BaseModel):
    id: str
    kind: str
    title: str
    company: str
    location: str
    salary: str
    logo: Optional[str] = None
    featured: bool = False
    deadline: Optional[datetime] = None
    experience: Optional[str] = None
    skills: List[str] = []
    requirements: List[str] = []
    match_score: Optional[int] = None
    applicants: int = 0
