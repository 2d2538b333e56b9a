from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

PHONE_PATTERN = r"^\+?[\d\s-]{10,}$"


# 1. Job-seeker registration (Input)
class UserRegister(BaseModel):
    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    birth_date: date
    phone: str = Field(pattern=PHONE_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6)
    profile_photo: Optional[str] = None
    role: Literal["jobseeker", "admin"] = "jobseeker"

    @field_validator("name", "surname", "phone")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


# 2. Company registration (Input)
class CompanyRegister(BaseModel):
    company_name: str = Field(min_length=1)
    email: EmailStr
    registrant_name: str = Field(min_length=1)
    registrant_surname: str = Field(min_length=1)
    description: str = Field(min_length=1)
    password: str = Field(min_length=6)
    phone: str = Field(pattern=PHONE_PATTERN)
    profile_photo: Optional[str] = None
    personal_id: Optional[str] = None


class UserLogin(BaseModel):
    email: str
    password: str


# 3. Outputs
class UserRegisterResponse(BaseModel):
    message: str
    user_id: str
    token: str


class CompanyRegisterResponse(BaseModel):
    message: str
    company_id: str
    user_id: str
    token: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    id: str
    role: str
    email: str
    name: Optional[str] = None


class CompanyJobSummary(BaseModel):
    id: str
    title: str
    description: str


class CompanyResponse(BaseModel):
    id: str
    company_name: str
    email: str
    registrant_name: str
    registrant_surname: str
    description: str
    phone: str
    profile_photo: Optional[str] = None
    user_id: str
    jobs: List[str] = []
    created_at: Optional[datetime] = None


class CompanyDetailResponse(CompanyResponse):
    jobs: List[CompanyJobSummary] = []
