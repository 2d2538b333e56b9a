from datetime import datetime
from enum import Enum
from typing import List, Optional

from bson import ObjectId
from pydantic import Field, model_validator

from .base import MongoBaseModel


class Role(str, Enum):
    JOB_SEEKER = "jobseeker"
    COMPANY = "company"
    ADMIN = "admin"


class User(MongoBaseModel):
    email: str
    password: str
    role: Role
    name: Optional[str] = None
    surname: Optional[str] = None
    birth_date: Optional[datetime] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    resume: Optional[ObjectId] = None
    saved_jobs: List[ObjectId] = Field(default_factory=list)
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def check_profile_fields(self):
        # company accounts keep their profile on the Company record
        if self.role != Role.COMPANY:
            missing = [
                field for field in ("name", "surname", "birth_date", "phone")
                if getattr(self, field) is None
            ]
            if missing:
                raise ValueError(f"Missing profile fields: {', '.join(missing)}")
        return self

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.name, self.surname) if part) or "Unnamed"
