import logging
from datetime import datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from pymongo.errors import DuplicateKeyError

from jobboard.database import get_db
from jobboard.models.base import to_object_id
from jobboard.models.company import Company, DEFAULT_PROFILE_PHOTO
from jobboard.models.job import JobStatus
from jobboard.models.user import Role, User
from jobboard.schemas.password_reset import MessageResponse
from jobboard.schemas.user import (
    CompanyDetailResponse,
    CompanyRegister,
    CompanyRegisterResponse,
    CompanyResponse,
    MeResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserRegisterResponse,
)
from jobboard.services.identity import ensure_admin_slot, ensure_email_available, normalize_email
from jobboard.utils.auth import CallerContext, get_current_caller, security, token_for
from jobboard.utils.errors import Internal
from jobboard.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def company_to_response(company: Company) -> dict:
    data = company.model_dump(exclude={"id"})
    data["id"] = str(company.id)
    data["user_id"] = str(company.user_id)
    data["jobs"] = [str(job_id) for job_id in company.jobs]
    return data


# ===========================
# REGISTRATION
# ===========================

# ✅ 1. REGISTER JOB-SEEKER (or the single admin)
@router.post("/register/user", response_model=UserRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserRegister):
    db = get_db()
    email = normalize_email(payload.email)

    await ensure_email_available(db, email)
    if payload.role == Role.ADMIN.value:
        await ensure_admin_slot(db)

    user = User(
        name=payload.name,
        surname=payload.surname,
        birth_date=datetime.combine(payload.birth_date, time.min),
        phone=payload.phone,
        email=email,
        password=get_password_hash(payload.password),
        role=payload.role,
        profile_photo=payload.profile_photo,
    )

    try:
        result = await db.users.insert_one(user.to_mongo())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="This email is already registered")

    logger.info("Registered %s %s", user.role, result.inserted_id)
    return {
        "message": "User registered",
        "user_id": str(result.inserted_id),
        "token": token_for(result.inserted_id, user.role),
    }


# ✅ 2. REGISTER COMPANY (user + company profile)
@router.post("/register/company", response_model=CompanyRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_company(payload: CompanyRegister):
    db = get_db()
    email = normalize_email(payload.email)

    await ensure_email_available(db, email)

    user = User(email=email, password=get_password_hash(payload.password), role=Role.COMPANY)
    try:
        user_result = await db.users.insert_one(user.to_mongo())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="This email is already registered")

    company = Company(
        company_name=payload.company_name,
        email=email,
        registrant_name=payload.registrant_name,
        registrant_surname=payload.registrant_surname,
        description=payload.description,
        phone=payload.phone,
        profile_photo=payload.profile_photo or DEFAULT_PROFILE_PHOTO,
        personal_id=payload.personal_id,
        user_id=user_result.inserted_id,
    )
    try:
        company_result = await db.companies.insert_one(company.to_mongo())
    except DuplicateKeyError:
        # don't leave a company login without a company profile behind
        await db.users.delete_one({"_id": user_result.inserted_id})
        raise HTTPException(status_code=400, detail="This email is already registered with a company")
    except Exception as exc:
        await db.users.delete_one({"_id": user_result.inserted_id})
        logger.exception("Company registration for %s failed, user rolled back", email)
        raise Internal("Company registration failed", detail=str(exc)) from exc

    logger.info("Registered company %s (user %s)", company_result.inserted_id, user_result.inserted_id)
    return {
        "message": "Company registered successfully",
        "company_id": str(company_result.inserted_id),
        "user_id": str(user_result.inserted_id),
        "token": token_for(user_result.inserted_id, Role.COMPANY),
    }


# ===========================
# SESSION
# ===========================

# ✅ 3. LOGIN
@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin):
    db = get_db()

    user = User.from_mongo(await db.users.find_one({"email": normalize_email(credentials.email)}))
    if not user or not verify_password(credentials.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {"token": token_for(user.id, user.role)}


# ✅ 4. LOGOUT (tokens are stateless; the client drops it)
@router.post("/logout", response_model=MessageResponse)
async def logout(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    if not credentials:
        raise HTTPException(status_code=400, detail="No token provided")
    return {"message": "Logged out successfully"}


# ✅ 5. CURRENT CALLER
@router.get("/me", response_model=MeResponse)
async def get_me(caller: CallerContext = Depends(get_current_caller)):
    db = get_db()

    user = User.from_mongo(await db.users.find_one({"_id": caller.object_id}))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    response = {"id": str(user.id), "role": user.role, "email": user.email}
    if user.role == Role.COMPANY.value:
        company = await db.companies.find_one({"user_id": user.id})
        if company:
            response["name"] = company["company_name"]
    else:
        response["name"] = user.display_name
    return response


# ===========================
# PUBLIC COMPANY PROFILES
# ===========================

@router.get("/companies", response_model=List[CompanyResponse])
async def list_companies():
    db = get_db()
    documents = await db.companies.find({}).to_list(500)
    companies = [Company.from_mongo(doc) for doc in documents]

    # public view: only approved job ids
    job_ids = [job_id for company in companies for job_id in company.jobs]
    approved = await db.jobs.find(
        {"_id": {"$in": job_ids}, "status": JobStatus.APPROVED.value}, {"_id": 1}
    ).to_list(len(job_ids) or 1)
    approved_ids = {job["_id"] for job in approved}

    for company in companies:
        company.jobs = [job_id for job_id in company.jobs if job_id in approved_ids]
    return [company_to_response(company) for company in companies]


@router.get("/companies/{company_id}", response_model=CompanyDetailResponse)
async def get_company(company_id: str):
    """Company profile with its approved jobs only."""
    db = get_db()

    company = Company.from_mongo(
        await db.companies.find_one({"_id": to_object_id(company_id, "company")})
    )
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    jobs = await db.jobs.find(
        {"_id": {"$in": company.jobs}, "status": JobStatus.APPROVED.value},
        {"title": 1, "description": 1},
    ).to_list(len(company.jobs) or 1)

    response = company_to_response(company)
    response["jobs"] = [
        {"id": str(job["_id"]), "title": job["title"], "description": job["description"]}
        for job in jobs
    ]
    return response
