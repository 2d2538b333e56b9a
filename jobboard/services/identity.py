import logging

from jobboard.models.user import Role
from jobboard.utils.errors import InvalidRequest

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def ensure_email_available(db, email: str) -> None:
    """An email belongs to at most one user or company record."""
    email = normalize_email(email)
    if await db.users.find_one({"email": email}, {"_id": 1}):
        raise InvalidRequest("This email is already registered")
    if await db.companies.find_one({"email": email}, {"_id": 1}):
        raise InvalidRequest("This email is already registered with a company")


async def ensure_admin_slot(db) -> None:
    if await db.users.count_documents({"role": Role.ADMIN.value}) > 0:
        logger.warning("Rejected registration of a second admin")
        raise InvalidRequest("Only one admin is allowed")
