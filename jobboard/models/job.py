import random
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import MongoBaseModel


class JobStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Location(str, Enum):
    TBILISI = "თბილისი"
    BATUMI = "ბათუმი"
    KUTAISI = "ქუთაისი"
    RUSTAVI = "რუსთავი"
    GORI = "გორი"
    ZUGDIDI = "ზუგდიდი"
    POTI = "ფოთი"
    TELAVI = "თელავი"
    SOKHUMI = "სოხუმი"
    KHASHURI = "ხაშური"


class WorkType(str, Enum):
    OFFICE = "ოფისი"
    REMOTE = "დისტანციური"
    HYBRID = "ჰიბრიდი"
    FLEXIBLE_HOURS = "თავისუფალი გრაფიკი"


class Experience(str, Enum):
    UP_TO_TWO_YEARS = "0-2 წლამდე"
    TWO_TO_FIVE_YEARS = "2-5 წლამდე"
    FIVE_PLUS_YEARS = "5+ წელი"
    NO_EXPERIENCE = "გამოუცდელი"


class Language(str, Enum):
    GEORGIAN = "ქართული"
    ENGLISH = "ინგლისური"
    RUSSIAN = "რუსული"
    SPANISH = "ესპანური"
    ITALIAN = "იტალიური"
    TURKISH = "თურქული"
    GERMAN = "გერმანული"
    FRENCH = "ფრანგული"
    KOREAN = "კორეული"
    CHINESE = "ჩინური"
    JAPANESE = "იაპონური"


class JobCategory(str, Enum):
    BANKING = "საბანკო სფერო"
    IT_DEVELOPMENT = "IT დეველოპმენტი"
    SALES = "გაყიდვები/ვაჭრობა"
    OFFICE = "საოფისე"
    SERVICE_STAFF = "მომსახურე პერსონალი"
    MEDICINE = "მედიცინა/ფარმაცევტი"


# ===========================
# POSTER (user XOR company)
# ===========================

class UserPoster(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["user"] = "user"
    id: ObjectId


class CompanyPoster(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["company"] = "company"
    id: ObjectId


Poster = Annotated[Union[UserPoster, CompanyPoster], Field(discriminator="kind")]


def generate_custom_id() -> str:
    return f"ID{random.randint(100000, 999999)}"


class Job(MongoBaseModel):
    title: str
    description: str
    company_name: str
    location: Location
    salary_range: Optional[str] = None
    work_type: WorkType
    experience: Experience
    education: str
    languages: List[Language] = Field(default_factory=list)
    job_category: JobCategory
    custom_id: str = Field(default_factory=generate_custom_id)
    poster: Poster
    email: str
    status: JobStatus = JobStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None

    @property
    def poster_company_id(self) -> Optional[ObjectId]:
        if isinstance(self.poster, CompanyPoster):
            return self.poster.id
        return None
