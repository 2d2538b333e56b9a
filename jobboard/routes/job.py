from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from jobboard.database import get_db
from jobboard.models.base import to_object_id
from jobboard.models.job import Job, JobCategory, JobStatus, Location, WorkType
from jobboard.schemas.job import (
    JobCreate,
    JobCreatedResponse,
    JobMessageResponse,
    JobResponse,
    JobStatusUpdate,
    JobUpdate,
)
from jobboard.services import access_policy, job_lifecycle
from jobboard.utils.auth import (
    CallerContext,
    admin_required,
    company_required,
    get_current_caller,
    get_optional_caller,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


async def project_all(db, documents) -> List[dict]:
    """Project a batch of job documents, resolving each poster once."""
    contacts = {}
    projected = []
    for document in documents:
        job = Job.from_mongo(document)
        key = (job.poster.kind, job.poster.id)
        if key not in contacts:
            contacts[key] = await access_policy.resolve_contact(db, job)
        projected.append(access_policy.project_job(job, contacts[key]))
    return projected


# ===========================
# PUBLIC / OPTIONAL AUTH
# ===========================

# ✅ 1. LIST JOBS (status filter depends on who is asking)
@router.get("", response_model=List[JobResponse])
async def list_jobs(
    location: Optional[Location] = Query(None, description="Exact location"),
    job_category: Optional[JobCategory] = Query(None, description="Exact category"),
    work_type: Optional[WorkType] = Query(None, description="Exact work type"),
    limit: int = Query(100, ge=1, le=500),
    caller: CallerContext = Depends(get_optional_caller),
):
    db = get_db()

    company_id = await access_policy.caller_company_id(db, caller)
    query = access_policy.listing_filter(
        caller,
        company_id,
        location=location.value if location else None,
        job_category=job_category.value if job_category else None,
        work_type=work_type.value if work_type else None,
    )

    documents = await db.jobs.find(query).sort("created_at", -1).to_list(limit)
    return await project_all(db, documents)


# ===========================
# ADMIN / COMPANY VIEWS
# ===========================

# ✅ 2. PENDING QUEUE (Admin)
@router.get("/pending", response_model=List[JobResponse])
async def list_pending_jobs(caller: CallerContext = Depends(admin_required)):
    db = get_db()
    documents = await db.jobs.find({"status": JobStatus.PENDING.value}).sort("created_at", 1).to_list(500)
    return await project_all(db, documents)


# ✅ 3. MY JOBS (Company, any status)
@router.get("/me", response_model=List[JobResponse])
async def list_my_jobs(caller: CallerContext = Depends(company_required)):
    db = get_db()
    company = await job_lifecycle.get_company_for_caller(db, caller)
    documents = await db.jobs.find(
        {"poster.kind": "company", "poster.id": company.id}
    ).sort("created_at", -1).to_list(500)
    return await project_all(db, documents)


# ✅ 4. ONE OF MY JOBS (Company)
@router.get("/me/{job_id}", response_model=JobResponse)
async def get_my_job(job_id: str, caller: CallerContext = Depends(company_required)):
    db = get_db()
    company = await job_lifecycle.get_company_for_caller(db, caller)

    document = await db.jobs.find_one({
        "_id": to_object_id(job_id),
        "poster.kind": "company",
        "poster.id": company.id,
    })
    if not document:
        raise HTTPException(status_code=404, detail="Job not found or not owned by you")

    job = Job.from_mongo(document)
    return access_policy.project_job(job, await access_policy.resolve_contact(db, job))


# ===========================
# LIFECYCLE
# ===========================

# ✅ 5. POST A JOB (Company)
@router.post("", response_model=JobCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_job(payload: JobCreate, caller: CallerContext = Depends(company_required)):
    db = get_db()
    job = await job_lifecycle.create_job(db, caller, payload)
    return {"message": "Job created and pending admin approval", "job_id": str(job.id)}


# ✅ 6. APPROVE / REJECT (Admin)
@router.put("/{job_id}/status", response_model=JobMessageResponse)
async def review_job(
    job_id: str,
    status_update: JobStatusUpdate,
    caller: CallerContext = Depends(admin_required),
):
    db = get_db()
    job = await job_lifecycle.review_job(db, to_object_id(job_id), JobStatus(status_update.status))
    contact = await access_policy.resolve_contact(db, job)
    return {"message": f"Job {job.status}", "job": access_policy.project_job(job, contact)}


# ✅ 7. EDIT (Owning company or Admin)
@router.put("/{job_id}", response_model=JobMessageResponse)
async def update_job(
    job_id: str,
    job_update: JobUpdate,
    caller: CallerContext = Depends(get_current_caller),
):
    db = get_db()
    changes = job_update.model_dump(exclude_unset=True)
    job = await job_lifecycle.edit_job(db, to_object_id(job_id), caller, changes)
    contact = await access_policy.resolve_contact(db, job)
    return {"message": "Job updated and pending admin approval", "job": access_policy.project_job(job, contact)}


# ✅ 8. DELETE (Owning company or Admin)
@router.delete("/{job_id}")
async def delete_job(job_id: str, caller: CallerContext = Depends(get_current_caller)):
    db = get_db()
    await job_lifecycle.delete_job(db, to_object_id(job_id), caller)
    return {"message": "Job deleted", "job_id": job_id}


# ✅ 9. JOB DETAILS (approved: anyone; otherwise admin or owner)
@router.get("/{job_id}", response_model=JobResponse)
async def get_job_details(job_id: str, caller: CallerContext = Depends(get_optional_caller)):
    db = get_db()
    job = await job_lifecycle.get_job(db, to_object_id(job_id))
    return await access_policy.authorize_view(db, job, caller)
