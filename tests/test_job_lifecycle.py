"""
Tests for the job lifecycle service.

Validates:
- the review state machine (pending → approved | rejected, nothing else)
- creation always yields a pending, company-posted job
- edits reset the status to pending and keep omitted fields
- deletion cleans up company and saved-job references
"""
import pytest
import pytest_asyncio
from bson import ObjectId

from jobboard.models.job import JobStatus, Location
from jobboard.schemas.job import JobCreate
from jobboard.services.job_lifecycle import (
    ALLOWED_TRANSITIONS,
    can_transition,
    create_job,
    delete_job,
    edit_job,
    get_job,
    review_job,
)
from jobboard.utils.auth import CallerContext
from jobboard.utils.errors import Forbidden, InvalidTransitionError, NotFound

from conftest import job_payload

ADMIN = CallerContext(id=str(ObjectId()), role="admin")


async def make_company(db, email):
    user_id = (await db.users.insert_one({"email": email, "password": "x", "role": "company"})).inserted_id
    company_id = (await db.companies.insert_one({
        "company_name": email.split("@")[1],
        "email": email,
        "registrant_name": "A",
        "registrant_surname": "B",
        "description": "Company",
        "phone": "+995 555 111 222",
        "user_id": user_id,
        "jobs": [],
    })).inserted_id
    return CallerContext(id=str(user_id), role="company"), company_id


@pytest_asyncio.fixture
async def owner(db):
    return await make_company(db, "hr@owner.ge")


@pytest_asyncio.fixture
async def job(db, owner):
    caller, _ = owner
    return await create_job(db, caller, JobCreate(**job_payload()))


# =============================================================================
# State machine
# =============================================================================

def test_pending_can_be_approved_or_rejected():
    assert can_transition(JobStatus.PENDING, JobStatus.APPROVED)
    assert can_transition(JobStatus.PENDING, JobStatus.REJECTED)


@pytest.mark.parametrize("from_status", [JobStatus.APPROVED, JobStatus.REJECTED])
@pytest.mark.parametrize("to_status", [JobStatus.APPROVED, JobStatus.REJECTED])
def test_reviewed_jobs_cannot_be_reviewed_again(from_status, to_status):
    assert not can_transition(from_status, to_status)


def test_every_status_has_an_entry():
    assert set(ALLOWED_TRANSITIONS) == set(JobStatus)


# =============================================================================
# Create
# =============================================================================

@pytest.mark.asyncio
async def test_create_job_is_pending_and_company_posted(db, owner, job):
    _, company_id = owner
    assert job.status == JobStatus.PENDING.value
    assert job.poster.kind == "company"
    assert job.poster.id == company_id
    assert job.email == "hr@owner.ge"
    assert job.custom_id.startswith("ID") and len(job.custom_id) == 8

    stored = await db.jobs.find_one({"_id": job.id})
    assert stored["status"] == "pending"
    assert stored["poster"] == {"kind": "company", "id": company_id}

    company = await db.companies.find_one({"_id": company_id})
    assert company["jobs"] == [job.id]


@pytest.mark.asyncio
async def test_create_job_defaults_company_name(job):
    assert job.company_name == "owner.ge"


@pytest.mark.asyncio
async def test_create_job_without_company_profile(db):
    caller = CallerContext(id=str(ObjectId()), role="company")
    with pytest.raises(NotFound):
        await create_job(db, caller, JobCreate(**job_payload()))


# =============================================================================
# Review
# =============================================================================

@pytest.mark.asyncio
async def test_approve_pending_job(db, job):
    reviewed = await review_job(db, job.id, JobStatus.APPROVED)
    assert reviewed.status == "approved"
    assert reviewed.reviewed_at is not None


@pytest.mark.asyncio
async def test_approve_twice_is_rejected(db, job):
    await review_job(db, job.id, JobStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        await review_job(db, job.id, JobStatus.APPROVED)


@pytest.mark.asyncio
async def test_reject_after_approve_is_unreachable(db, job):
    await review_job(db, job.id, JobStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        await review_job(db, job.id, JobStatus.REJECTED)
    assert (await get_job(db, job.id)).status == "approved"


@pytest.mark.asyncio
async def test_review_missing_job(db):
    with pytest.raises(NotFound):
        await review_job(db, ObjectId(), JobStatus.APPROVED)


# =============================================================================
# Edit
# =============================================================================

@pytest.mark.asyncio
async def test_edit_resets_status_and_keeps_omitted_fields(db, owner, job):
    caller, _ = owner
    await review_job(db, job.id, JobStatus.APPROVED)

    edited = await edit_job(db, job.id, caller, {"title": "Senior Backend Developer"})

    assert edited.status == "pending"
    assert edited.title == "Senior Backend Developer"
    assert edited.description == job.description
    assert edited.location == job.location
    assert edited.updated_at is not None


@pytest.mark.asyncio
async def test_edited_rejected_job_can_be_reviewed_again(db, owner, job):
    caller, _ = owner
    await review_job(db, job.id, JobStatus.REJECTED)
    await edit_job(db, job.id, caller, {"location": Location.KUTAISI.value})

    reviewed = await review_job(db, job.id, JobStatus.APPROVED)
    assert reviewed.status == "approved"
    assert reviewed.location == "ქუთაისი"


@pytest.mark.asyncio
async def test_edit_by_other_company_forbidden(db, job):
    other, _ = await make_company(db, "hr@other.ge")
    with pytest.raises(Forbidden):
        await edit_job(db, job.id, other, {"title": "Hijacked"})
    assert (await get_job(db, job.id)).title == job.title


@pytest.mark.asyncio
async def test_admin_edit(db, job):
    edited = await edit_job(db, job.id, ADMIN, {"salary_range": "5000"})
    assert edited.salary_range == "5000"
    assert edited.status == "pending"


# =============================================================================
# Delete
# =============================================================================

@pytest.mark.asyncio
async def test_delete_cleans_references(db, owner, job):
    caller, company_id = owner
    seeker_id = (await db.users.insert_one({"email": "s@x.ge", "role": "jobseeker", "saved_jobs": [job.id]})).inserted_id

    await delete_job(db, job.id, caller)

    assert await db.jobs.find_one({"_id": job.id}) is None
    assert (await db.companies.find_one({"_id": company_id}))["jobs"] == []
    assert (await db.users.find_one({"_id": seeker_id}))["saved_jobs"] == []


@pytest.mark.asyncio
async def test_delete_by_other_company_forbidden(db, job):
    other, _ = await make_company(db, "hr@other.ge")
    with pytest.raises(Forbidden):
        await delete_job(db, job.id, other)
    assert await db.jobs.find_one({"_id": job.id}) is not None


@pytest.mark.asyncio
async def test_delete_missing_job(db):
    with pytest.raises(NotFound):
        await delete_job(db, ObjectId(), ADMIN)
