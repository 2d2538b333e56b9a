"""
Tests for applying to jobs with a CV.
"""
import pytest
from bson import ObjectId
from httpx import AsyncClient

import jobboard.config
import jobboard.services.applications

from conftest import auth

CV = ("cv.pdf", b"%PDF-1.4 fake cv", "application/pdf")


@pytest.mark.asyncio
async def test_apply_sends_notification_and_records_application(
    async_client: AsyncClient, db, fs_bucket, outbox, seeker, approved_job
):
    response = await async_client.post(
        f"/jobs/{approved_job}/apply", files={"cv": CV}, headers=auth(seeker["token"])
    )

    assert response.status_code == 200, response.text
    application = response.json()["application"]
    assert application["job_id"] == approved_job
    assert application["applicant_id"] == seeker["user_id"]
    assert application["notification_sent"] is True

    assert outbox == [{
        "company_email": "hr@acme.ge",
        "job_title": "Approved Developer",
        "applicant_email": "seeker@example.com",
        "filename": "cv.pdf",
        "content": b"%PDF-1.4 fake cv",
    }]

    document_id = ObjectId(application["document_id"])
    assert fs_bucket.files[document_id]["content"] == b"%PDF-1.4 fake cv"
    user = await db.users.find_one({"_id": ObjectId(seeker["user_id"])})
    assert user["resume"] == document_id


@pytest.mark.asyncio
async def test_apply_to_pending_job_is_hidden(async_client: AsyncClient, outbox, seeker, pending_job):
    response = await async_client.post(
        f"/jobs/{pending_job}/apply", files={"cv": CV}, headers=auth(seeker["token"])
    )
    assert response.status_code == 404
    assert outbox == []


@pytest.mark.asyncio
async def test_apply_to_missing_job(async_client: AsyncClient, outbox, seeker):
    response = await async_client.post(
        f"/jobs/{ObjectId()}/apply", files={"cv": CV}, headers=auth(seeker["token"])
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_without_cv(async_client: AsyncClient, outbox, seeker, approved_job):
    response = await async_client.post(f"/jobs/{approved_job}/apply", headers=auth(seeker["token"]))
    assert response.status_code == 400
    assert outbox == []


@pytest.mark.asyncio
async def test_apply_requires_jobseeker(async_client: AsyncClient, outbox, company_a, approved_job):
    response = await async_client.post(f"/jobs/{approved_job}/apply", files={"cv": CV})
    assert response.status_code == 401

    response = await async_client.post(
        f"/jobs/{approved_job}/apply", files={"cv": CV}, headers=auth(company_a["token"])
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_notification_failure_is_reported(async_client: AsyncClient, db, monkeypatch, seeker, approved_job):
    async def broken(**kwargs):
        raise ConnectionError("SMTP unreachable")

    monkeypatch.setattr(jobboard.services.applications, "send_application_notification", broken)

    response = await async_client.post(
        f"/jobs/{approved_job}/apply", files={"cv": CV}, headers=auth(seeker["token"])
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to send application", "error": "SMTP unreachable"}

    stored = await db.applications.find_one({"applicant_id": ObjectId(seeker["user_id"])})
    assert stored["notification_sent"] is False


@pytest.mark.asyncio
async def test_my_applications(async_client: AsyncClient, outbox, seeker, approved_job):
    await async_client.post(f"/jobs/{approved_job}/apply", files={"cv": CV}, headers=auth(seeker["token"]))

    response = await async_client.get("/applications/me", headers=auth(seeker["token"]))
    assert response.status_code == 200
    assert [a["job_id"] for a in response.json()] == [approved_job]


@pytest.mark.asyncio
async def test_unsent_notification_is_not_flagged_as_sent(
    async_client: AsyncClient, db, monkeypatch, seeker, approved_job
):
    # no mail credentials: the mailer only logs the message
    monkeypatch.setattr(jobboard.config, "MAIL_USERNAME", "")
    monkeypatch.setattr(jobboard.config, "MAIL_PASSWORD", "")

    response = await async_client.post(
        f"/jobs/{approved_job}/apply", files={"cv": CV}, headers=auth(seeker["token"])
    )

    assert response.status_code == 200
    assert response.json()["application"]["notification_sent"] is False
    stored = await db.applications.find_one({"applicant_id": ObjectId(seeker["user_id"])})
    assert stored["notification_sent"] is False
