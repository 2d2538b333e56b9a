from typing import List

from fastapi import APIRouter, Depends

from jobboard.database import get_db
from jobboard.models.base import to_object_id
from jobboard.schemas.job import JobResponse
from jobboard.schemas.saved_job import SavedJobsResponse
from jobboard.services import access_policy
from jobboard.services.applications import list_saved_jobs, save_job, unsave_job
from jobboard.utils.auth import CallerContext, jobseeker_required

router = APIRouter(tags=["Saved Jobs"])


# ✅ 1. Save a Job
@router.post("/jobs/{job_id}/save", response_model=SavedJobsResponse)
async def save(job_id: str, caller: CallerContext = Depends(jobseeker_required)):
    """Save an approved job. Saving it again changes nothing."""
    db = get_db()
    saved = await save_job(db, to_object_id(job_id), caller)
    return {"message": "Job saved", "saved_jobs": [str(j) for j in saved]}


# ✅ 2. Unsave a Job (no error when it wasn't saved)
@router.delete("/jobs/{job_id}/save", response_model=SavedJobsResponse)
async def unsave(job_id: str, caller: CallerContext = Depends(jobseeker_required)):
    db = get_db()
    saved = await unsave_job(db, to_object_id(job_id), caller)
    return {"message": "Job removed from saved jobs", "saved_jobs": [str(j) for j in saved]}


# ✅ 3. Get All Saved Jobs with Full Job Details
@router.get("/saved-jobs", response_model=List[JobResponse])
async def get_saved_jobs(caller: CallerContext = Depends(jobseeker_required)):
    db = get_db()
    jobs = await list_saved_jobs(db, caller)
    return [access_policy.project_job(job, await access_policy.resolve_contact(db, job)) for job in jobs]
