"""
Job visibility and access control.

Every job-reading and job-mutating operation asks this module. The check_*
functions are pure: given a job, the caller context and the caller's Company
id (if any), they return Allow or Deny. The async helpers gather the inputs
those functions need from the database and turn a Deny into an error.

Rules:
- approved jobs are visible to everyone, anonymous callers included
- other jobs are visible to the admin and to the company that posted them
- only the admin and the posting company may edit or delete a job
- apply/save only see approved jobs; anything else looks absent
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from bson import ObjectId

from jobboard.models.company import Company
from jobboard.models.job import CompanyPoster, Job, JobStatus, UserPoster
from jobboard.models.user import Role, User
from jobboard.schemas.job import ContactInfo
from jobboard.utils.auth import CallerContext
from jobboard.utils.errors import Forbidden, NotFound, Unauthenticated

logger = logging.getLogger(__name__)

UNKNOWN_CONTACT = ContactInfo(name="Unknown", email="Unknown")


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    message: str


Decision = Union[Allow, Deny]

ALLOW = Allow()

_ERRORS = {
    DenyReason.UNAUTHENTICATED: Unauthenticated,
    DenyReason.FORBIDDEN: Forbidden,
    DenyReason.NOT_FOUND: NotFound,
}


# ===========================
# PURE DECISIONS
# ===========================

def owns_job(job: Job, caller: CallerContext, caller_company_id: Optional[ObjectId]) -> bool:
    """Ownership is per Company record, not per role."""
    return (
        caller.role == Role.COMPANY.value
        and caller_company_id is not None
        and job.poster_company_id == caller_company_id
    )


def check_visibility(job: Job, caller: CallerContext, caller_company_id: Optional[ObjectId] = None) -> Decision:
    if job.status == JobStatus.APPROVED.value:
        return ALLOW
    if caller.is_anonymous:
        return Deny(DenyReason.UNAUTHENTICATED, "Unauthorized")
    if caller.role == Role.ADMIN.value or owns_job(job, caller, caller_company_id):
        return ALLOW
    return Deny(DenyReason.FORBIDDEN, "Access denied")


def check_mutation(job: Job, caller: CallerContext, caller_company_id: Optional[ObjectId] = None) -> Decision:
    if caller.is_anonymous:
        return Deny(DenyReason.UNAUTHENTICATED, "Unauthorized")
    if caller.role == Role.ADMIN.value:
        return ALLOW
    if caller.role != Role.COMPANY.value:
        return Deny(DenyReason.FORBIDDEN, "Only company or admin can modify this job")
    if not owns_job(job, caller, caller_company_id):
        return Deny(DenyReason.FORBIDDEN, "You can only modify your own jobs")
    return ALLOW


def check_engagement(job: Optional[Job]) -> Decision:
    """Apply and save: unapproved listings are reported as missing."""
    if job is None or job.status != JobStatus.APPROVED.value:
        return Deny(DenyReason.NOT_FOUND, "Job not found or not approved")
    return ALLOW


def listing_filter(
    caller: CallerContext,
    caller_company_id: Optional[ObjectId] = None,
    location: Optional[str] = None,
    job_category: Optional[str] = None,
    work_type: Optional[str] = None,
) -> dict:
    """MongoDB filter applying check_visibility to a whole listing at once."""
    query = {}
    if caller.role == Role.ADMIN.value:
        pass
    elif caller.role == Role.COMPANY.value and caller_company_id is not None:
        query["$or"] = [
            {"status": JobStatus.APPROVED.value},
            {"poster.kind": "company", "poster.id": caller_company_id},
        ]
    else:
        query["status"] = JobStatus.APPROVED.value

    if location:
        query["location"] = location
    if job_category:
        query["job_category"] = job_category
    if work_type:
        query["work_type"] = work_type
    return query


def enforce(decision: Decision) -> None:
    if isinstance(decision, Deny):
        raise _ERRORS[decision.reason](decision.message)


def project_job(job: Job, contact: Optional[ContactInfo] = None) -> dict:
    """Response shape for a job, ids stringified."""
    data = job.model_dump(exclude={"id", "reviewed_at"})
    data["id"] = str(job.id)
    data["poster"] = {"kind": job.poster.kind, "id": str(job.poster.id)}
    data["contact"] = contact.model_dump() if contact else None
    return data


# ===========================
# DATABASE-BACKED HELPERS
# ===========================

async def caller_company_id(db, caller: CallerContext) -> Optional[ObjectId]:
    if caller.role != Role.COMPANY.value:
        return None
    company = await db.companies.find_one({"user_id": caller.object_id}, {"_id": 1})
    return company["_id"] if company else None


async def resolve_contact(db, job: Job) -> ContactInfo:
    """Contact name/email of the poster, placeholder when it can't be found."""
    if isinstance(job.poster, CompanyPoster):
        company = Company.from_mongo(await db.companies.find_one({"_id": job.poster.id}))
        if company:
            return ContactInfo(name=company.company_name, email=company.email)
    elif isinstance(job.poster, UserPoster):
        user = User.from_mongo(await db.users.find_one({"_id": job.poster.id}))
        if user:
            return ContactInfo(name=user.display_name, email=user.email)

    logger.warning("Poster of job %s could not be resolved", job.id)
    return UNKNOWN_CONTACT


async def authorize_view(db, job: Job, caller: CallerContext) -> dict:
    """Visibility check plus projection for a single job."""
    company_id = await caller_company_id(db, caller)
    enforce(check_visibility(job, caller, company_id))
    return project_job(job, await resolve_contact(db, job))


async def authorize_mutation(db, job: Job, caller: CallerContext) -> None:
    company_id = await caller_company_id(db, caller)
    enforce(check_mutation(job, caller, company_id))
