"""
Job lifecycle: creation, admin review, edits and deletion.

Status changes made by an admin go through ALLOWED_TRANSITIONS. An edit is
not a transition in that table: it always puts the job back to pending.

    pending --approve--> approved
    pending --reject---> rejected
    approved|rejected --edit--> pending
"""
import logging
from datetime import datetime
from typing import Dict, List

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from jobboard.models.company import Company
from jobboard.models.job import CompanyPoster, Job, JobStatus
from jobboard.schemas.job import JobCreate
from jobboard.services.access_policy import authorize_mutation
from jobboard.utils.auth import CallerContext
from jobboard.utils.errors import Internal, InvalidTransitionError, NotFound

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[JobStatus, List[JobStatus]] = {
    JobStatus.PENDING: [JobStatus.APPROVED, JobStatus.REJECTED],
    JobStatus.APPROVED: [],
    JobStatus.REJECTED: [],
}

CUSTOM_ID_ATTEMPTS = 5


def can_transition(from_status: JobStatus, to_status: JobStatus) -> bool:
    return JobStatus(to_status) in ALLOWED_TRANSITIONS.get(JobStatus(from_status), [])


async def get_job(db, job_id: ObjectId) -> Job:
    job = Job.from_mongo(await db.jobs.find_one({"_id": job_id}))
    if job is None:
        raise NotFound("Job not found")
    return job


async def get_company_for_caller(db, caller: CallerContext) -> Company:
    company = Company.from_mongo(await db.companies.find_one({"user_id": caller.object_id}))
    if company is None:
        raise NotFound("Company not found")
    return company


async def create_job(db, caller: CallerContext, payload: JobCreate) -> Job:
    """Create a pending job posted by the caller's company."""
    company = await get_company_for_caller(db, caller)

    data = payload.model_dump()
    data["company_name"] = data.get("company_name") or company.company_name

    # custom ids are short and random; draw again on the rare collision
    for attempt in range(CUSTOM_ID_ATTEMPTS):
        job = Job(
            **data,
            poster=CompanyPoster(id=company.id),
            email=company.email,
            status=JobStatus.PENDING,
        )
        try:
            result = await db.jobs.insert_one(job.to_mongo())
            break
        except DuplicateKeyError:
            logger.warning("Custom id %s already taken (attempt %d)", job.custom_id, attempt + 1)
    else:
        raise Internal("Could not allocate a job identifier, please retry")

    job.id = result.inserted_id
    await db.companies.update_one({"_id": company.id}, {"$push": {"jobs": job.id}})

    logger.info("Job %s (%s) created by company %s, pending approval", job.id, job.custom_id, company.id)
    return job


async def review_job(db, job_id: ObjectId, to_status: JobStatus) -> Job:
    """Admin approval or rejection of a pending job."""
    to_status = JobStatus(to_status)
    job = await get_job(db, job_id)

    if not can_transition(job.status, to_status):
        raise InvalidTransitionError(f"Job already {job.status}")

    # only applies while the job is still pending
    updated = await db.jobs.find_one_and_update(
        {"_id": job_id, "status": JobStatus.PENDING.value},
        {"$set": {"status": to_status.value, "reviewed_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        current = await get_job(db, job_id)
        raise InvalidTransitionError(f"Job already {current.status}")

    logger.info("Job %s: %s → %s", job_id, job.status, to_status.value)
    return Job.from_mongo(updated)


async def edit_job(db, job_id: ObjectId, caller: CallerContext, changes: dict) -> Job:
    """Overwrite the provided fields and send the job back for review."""
    job = await get_job(db, job_id)
    await authorize_mutation(db, job, caller)

    update_data = {key: value for key, value in changes.items() if value is not None}
    update_data["status"] = JobStatus.PENDING.value
    update_data["updated_at"] = datetime.utcnow()

    updated = await db.jobs.find_one_and_update(
        {"_id": job_id},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFound("Job not found")

    logger.info("Job %s edited by %s %s, status reset to pending", job_id, caller.role, caller.id)
    return Job.from_mongo(updated)


async def delete_job(db, job_id: ObjectId, caller: CallerContext) -> None:
    job = await get_job(db, job_id)
    await authorize_mutation(db, job, caller)

    result = await db.jobs.delete_one({"_id": job_id})
    if result.deleted_count == 0:
        raise NotFound("Job not found")

    if job.poster_company_id is not None:
        await db.companies.update_one({"_id": job.poster_company_id}, {"$pull": {"jobs": job_id}})
    await db.users.update_many({"saved_jobs": job_id}, {"$pull": {"saved_jobs": job_id}})

    logger.info("Job %s deleted by %s %s", job_id, caller.role, caller.id)
