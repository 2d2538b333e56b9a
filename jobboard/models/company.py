from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import Field

from .base import MongoBaseModel

DEFAULT_PROFILE_PHOTO = "https://example.com/default.jpg"


class Company(MongoBaseModel):
    company_name: str
    email: str
    registrant_name: str
    registrant_surname: str
    description: str
    phone: str
    profile_photo: str = DEFAULT_PROFILE_PHOTO
    personal_id: Optional[str] = None
    user_id: ObjectId
    jobs: List[ObjectId] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
