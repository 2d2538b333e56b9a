"""
Job-seeker workflows on approved jobs: applying with a CV and bookmarking.
"""
import logging
from typing import List, Optional

from bson import ObjectId
from fastapi import UploadFile
from pymongo import ReturnDocument

from jobboard.config import MAX_CV_SIZE
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.services.access_policy import (
    ALLOW,
    UNKNOWN_CONTACT,
    check_engagement,
    check_visibility,
    enforce,
    resolve_contact,
)
from jobboard.services.storage import store_document
from jobboard.utils.auth import CallerContext
from jobboard.utils.email import send_application_notification
from jobboard.utils.errors import Internal, InvalidRequest, NotFound

logger = logging.getLogger(__name__)


async def _find_job(db, job_id: ObjectId) -> Optional[Job]:
    return Job.from_mongo(await db.jobs.find_one({"_id": job_id}))


async def _get_user(db, caller: CallerContext) -> User:
    user = User.from_mongo(await db.users.find_one({"_id": caller.object_id}))
    if user is None:
        raise NotFound("User not found")
    return user


# ===========================
# APPLY
# ===========================

async def apply_to_job(db, job_id: ObjectId, caller: CallerContext, upload: Optional[UploadFile]) -> Application:
    """
    Submit an application to an approved job.

    The CV is stored, remembered as the user's latest resume and recorded as an
    Application; the poster is then emailed with the CV attached. A failed
    email surfaces as a 500 while the Application record stays, flagged
    notification_sent=False.
    """
    job = await _find_job(db, job_id)
    enforce(check_engagement(job))

    if upload is None or not upload.filename:
        raise InvalidRequest("CV file is required")
    content = await upload.read()
    if not content:
        raise InvalidRequest("CV file is empty")
    if len(content) > MAX_CV_SIZE:
        raise InvalidRequest("CV file exceeds size limit")

    user = await _get_user(db, caller)

    document_id = await store_document(
        filename=f"{user.email}_{upload.filename}",
        content=content,
        content_type=upload.content_type or "application/octet-stream",
        metadata={
            "user_id": str(user.id),
            "job_id": str(job.id),
            "original_filename": upload.filename,
        },
    )
    await db.users.update_one({"_id": user.id}, {"$set": {"resume": document_id}})

    application = Application(
        job_id=job.id,
        applicant_id=user.id,
        document_id=document_id,
        filename=upload.filename,
    )
    result = await db.applications.insert_one(application.to_mongo())
    application.id = result.inserted_id

    contact = await resolve_contact(db, job)
    recipient = job.email if contact is UNKNOWN_CONTACT else contact.email

    try:
        sent = await send_application_notification(
            company_email=recipient,
            job_title=job.title,
            applicant_email=user.email,
            filename=upload.filename,
            content=content,
        )
    except Exception as exc:
        logger.error("Application %s: notification to %s failed: %s", application.id, recipient, exc)
        raise Internal("Failed to send application", detail=str(exc)) from exc

    # False when no mail credentials are configured and the email was only logged
    if sent:
        await db.applications.update_one({"_id": application.id}, {"$set": {"notification_sent": True}})
        application.notification_sent = True
    else:
        logger.warning("Application %s: notification to %s was not sent", application.id, recipient)

    logger.info("User %s applied to job %s", user.id, job.id)
    return application


async def list_applications(db, caller: CallerContext) -> List[Application]:
    documents = await db.applications.find(
        {"applicant_id": caller.object_id}
    ).sort("created_at", -1).to_list(100)
    return [Application.from_mongo(doc) for doc in documents]


# ===========================
# SAVE / UNSAVE
# ===========================

async def save_job(db, job_id: ObjectId, caller: CallerContext) -> List[ObjectId]:
    """Bookmark an approved job. Saving twice keeps a single entry."""
    job = await _find_job(db, job_id)
    enforce(check_engagement(job))

    updated = await db.users.find_one_and_update(
        {"_id": caller.object_id},
        {"$addToSet": {"saved_jobs": job.id}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFound("User not found")
    return updated.get("saved_jobs", [])


async def unsave_job(db, job_id: ObjectId, caller: CallerContext) -> List[ObjectId]:
    updated = await db.users.find_one_and_update(
        {"_id": caller.object_id},
        {"$pull": {"saved_jobs": job_id}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFound("User not found")
    return updated.get("saved_jobs", [])


async def list_saved_jobs(db, caller: CallerContext) -> List[Job]:
    user = await _get_user(db, caller)
    if not user.saved_jobs:
        return []

    documents = await db.jobs.find({"_id": {"$in": user.saved_jobs}}).to_list(len(user.saved_jobs))
    by_id = {doc["_id"]: doc for doc in documents}

    # saved order; jobs deleted since, or sent back for review, are skipped
    jobs = [Job.from_mongo(by_id[job_id]) for job_id in user.saved_jobs if job_id in by_id]
    return [job for job in jobs if check_visibility(job, caller) == ALLOW]
