from datetime import datetime

from bson import ObjectId
from pydantic import Field

from .base import MongoBaseModel


class Application(MongoBaseModel):
    job_id: ObjectId
    applicant_id: ObjectId
    document_id: ObjectId
    filename: str
    notification_sent: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
