"""
Pytest fixtures for testing.

The app's module-level database handles are swapped for an in-memory MongoDB
(mongomock-motor) and an in-memory GridFS bucket; outgoing application emails
are captured in `outbox` instead of being sent.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

import jobboard.database
import jobboard.services.applications
from jobboard.database import ensure_indexes
from jobboard.main import app as fastapi_app
from jobboard.models.job import Experience, JobCategory, Language, Location, WorkType


class InMemoryBucket:
    """Stands in for AsyncIOMotorGridFSBucket.upload_from_stream."""

    def __init__(self):
        self.files = {}

    async def upload_from_stream(self, filename, source, metadata=None):
        file_id = ObjectId()
        self.files[file_id] = {"filename": filename, "content": source.read(), "metadata": metadata}
        return file_id


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test, installed as the app's database."""
    client = AsyncMongoMockClient()
    database = client["jobboard_test"]
    await ensure_indexes(database)

    original_db = jobboard.database.db
    original_bucket = jobboard.database.fs_bucket
    jobboard.database.db = database
    jobboard.database.fs_bucket = InMemoryBucket()
    try:
        yield database
    finally:
        jobboard.database.db = original_db
        jobboard.database.fs_bucket = original_bucket


@pytest.fixture
def fs_bucket(db) -> InMemoryBucket:
    return jobboard.database.fs_bucket


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    async def capture(**kwargs):
        sent.append(kwargs)
        return True

    monkeypatch.setattr(jobboard.services.applications, "send_application_notification", capture)
    return sent


@pytest_asyncio.fixture
async def async_client(db) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def job_payload(**overrides) -> dict:
    payload = {
        "title": "Backend Developer",
        "description": "Build and run our APIs",
        "location": Location.TBILISI.value,
        "salary_range": "3000-4000",
        "work_type": WorkType.HYBRID.value,
        "experience": Experience.TWO_TO_FIVE_YEARS.value,
        "education": "Bachelor's degree",
        "languages": [Language.GEORGIAN.value, Language.ENGLISH.value],
        "job_category": JobCategory.IT_DEVELOPMENT.value,
    }
    payload.update(overrides)
    return payload


async def register_user(client: AsyncClient, email: str, role: str = "jobseeker") -> dict:
    response = await client.post("/auth/register/user", json={
        "name": "Nino",
        "surname": "Beridze",
        "birth_date": "1995-04-12",
        "phone": "+995 555 123 456",
        "email": email,
        "password": "secret123",
        "role": role,
    })
    assert response.status_code == 201, response.text
    return response.json()


async def register_company(client: AsyncClient, email: str, company_name: str = "Acme") -> dict:
    response = await client.post("/auth/register/company", json={
        "company_name": company_name,
        "email": email,
        "registrant_name": "Giorgi",
        "registrant_surname": "Kapanadze",
        "description": "We make things",
        "password": "secret123",
        "phone": "+995 555 000 111",
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def admin(async_client) -> dict:
    return await register_user(async_client, "admin@example.com", role="admin")


@pytest_asyncio.fixture
async def seeker(async_client) -> dict:
    return await register_user(async_client, "seeker@example.com")


@pytest_asyncio.fixture
async def company_a(async_client) -> dict:
    return await register_company(async_client, "hr@acme.ge", "Acme")


@pytest_asyncio.fixture
async def company_b(async_client) -> dict:
    return await register_company(async_client, "jobs@globex.ge", "Globex")


async def create_job(client: AsyncClient, company: dict, **overrides) -> str:
    response = await client.post("/jobs", json=job_payload(**overrides), headers=auth(company["token"]))
    assert response.status_code == 201, response.text
    return response.json()["job_id"]


async def set_status(client: AsyncClient, admin: dict, job_id: str, status: str):
    return await client.put(f"/jobs/{job_id}/status", json={"status": status}, headers=auth(admin["token"]))


@pytest_asyncio.fixture
async def pending_job(async_client, company_a) -> str:
    return await create_job(async_client, company_a)


@pytest_asyncio.fixture
async def approved_job(async_client, company_a, admin) -> str:
    job_id = await create_job(async_client, company_a, title="Approved Developer")
    response = await set_status(async_client, admin, job_id, "approved")
    assert response.status_code == 200, response.text
    return job_id
