from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from jobboard.models.job import Experience, JobCategory, Language, Location, WorkType


# 1. Input: What the company sends
class JobCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    company_name: Optional[str] = None  # defaults to the company's registered name
    location: Location
    salary_range: Optional[str] = None
    work_type: WorkType
    experience: Experience
    education: str = Field(min_length=1)
    languages: List[Language] = []
    job_category: JobCategory


# 2. Input: Update existing job (omitted fields keep their value)
class JobUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    company_name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[Location] = None
    salary_range: Optional[str] = None
    work_type: Optional[WorkType] = None
    experience: Optional[Experience] = None
    education: Optional[str] = Field(default=None, min_length=1)
    languages: Optional[List[Language]] = None
    job_category: Optional[JobCategory] = None


# 3. Input: admin review
class JobStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]


# 4. Outputs
class ContactInfo(BaseModel):
    name: str
    email: str


class PosterResponse(BaseModel):
    kind: Literal["user", "company"]
    id: str


class JobResponse(BaseModel):
    id: str
    custom_id: str
    title: str
    description: str
    company_name: str
    location: str
    salary_range: Optional[str] = None
    work_type: str
    experience: str
    education: str
    languages: List[str] = []
    job_category: str
    poster: PosterResponse
    email: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    contact: Optional[ContactInfo] = None


class JobCreatedResponse(BaseModel):
    message: str
    job_id: str


class JobMessageResponse(BaseModel):
    message: str
    job: JobResponse
