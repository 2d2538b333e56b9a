from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from jobboard.database import get_db
from jobboard.models.application import Application
from jobboard.models.base import to_object_id
from jobboard.schemas.application import ApplicationResponse, ApplySubmittedResponse
from jobboard.services.applications import apply_to_job, list_applications
from jobboard.utils.auth import CallerContext, jobseeker_required

router = APIRouter(tags=["Applications"])


def application_to_response(application: Application) -> dict:
    return {
        "id": str(application.id),
        "job_id": str(application.job_id),
        "applicant_id": str(application.applicant_id),
        "document_id": str(application.document_id),
        "filename": application.filename,
        "notification_sent": application.notification_sent,
        "created_at": application.created_at,
    }


# ✅ 1. APPLY WITH A CV (Job-seeker, multipart field "cv")
@router.post("/jobs/{job_id}/apply", response_model=ApplySubmittedResponse)
async def apply_job(
    job_id: str,
    cv: Optional[UploadFile] = File(None),
    caller: CallerContext = Depends(jobseeker_required),
):
    db = get_db()
    application = await apply_to_job(db, to_object_id(job_id), caller, cv)
    return {"message": "Application submitted", "application": application_to_response(application)}


# ✅ 2. MY APPLICATIONS (Job-seeker)
@router.get("/applications/me", response_model=List[ApplicationResponse])
async def my_applications(caller: CallerContext = Depends(jobseeker_required)):
    db = get_db()
    return [application_to_response(a) for a in await list_applications(db, caller)]
