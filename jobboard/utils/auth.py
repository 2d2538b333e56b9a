"""
Auth gate: bearer tokens in, caller context out.

`resolve_caller` is the only place a token is decoded. It never raises; a
missing or bad token simply yields the anonymous caller. The FastAPI
dependencies below build the mandatory gate and the role filter on top of it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from bson import ObjectId
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from jobboard.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from jobboard.models.user import Role
from jobboard.utils.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)

# auto_error is off so a missing header reaches resolve_caller as None
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerContext:
    id: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    @property
    def object_id(self) -> Optional[ObjectId]:
        return ObjectId(self.id) if self.id else None


ANONYMOUS = CallerContext()


def create_access_token(data: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES):
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def token_for(user_id, role) -> str:
    return create_access_token({"id": str(user_id), "role": str(Role(role).value)})


def resolve_caller(token: Optional[str]) -> CallerContext:
    if not token:
        return ANONYMOUS
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.debug("Invalid token, treating caller as anonymous: %s", exc)
        return ANONYMOUS

    user_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
        return ANONYMOUS
    if role not in {r.value for r in Role}:
        return ANONYMOUS
    return CallerContext(id=user_id, role=role)


async def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CallerContext:
    return resolve_caller(credentials.credentials if credentials else None)


async def get_current_caller(
    caller: CallerContext = Depends(get_optional_caller),
) -> CallerContext:
    if caller.is_anonymous:
        raise Unauthenticated("Could not validate credentials")
    return caller


def require_roles(*roles: Role):
    """Dependency factory: authenticated caller whose role is one of `roles`."""
    allowed = {Role(role).value for role in roles}

    async def role_filter(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
        if caller.role not in allowed:
            raise Forbidden("Denied")
        return caller

    return role_filter


admin_required = require_roles(Role.ADMIN)
company_required = require_roles(Role.COMPANY)
jobseeker_required = require_roles(Role.JOB_SEEKER)
