from datetime import datetime

from pydantic import BaseModel


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    document_id: str
    filename: str
    notification_sent: bool
    created_at: datetime


class ApplySubmittedResponse(BaseModel):
    message: str
    application: ApplicationResponse
