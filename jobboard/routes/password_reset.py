import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, HTTPException

from jobboard.config import RESET_TOKEN_EXPIRE_MINUTES
from jobboard.database import get_db
from jobboard.schemas.password_reset import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
)
from jobboard.services.identity import normalize_email
from jobboard.utils.email import send_reset_code_email
from jobboard.utils.security import generate_reset_token, get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Password Reset"])


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: ForgotPasswordRequest):
    """
    Step 1: Request password reset - a reset code is stored on the user and
    emailed. Works for job-seekers and company accounts alike.
    """
    db = get_db()
    email = normalize_email(request.email)

    user = await db.users.find_one({"email": email})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    reset_token = generate_reset_token()
    await db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {
            "reset_token": reset_token,
            "reset_token_expiry": datetime.utcnow() + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES),
        }},
    )

    try:
        await send_reset_code_email(email=email, reset_token=reset_token, name=user.get("name") or "User")
    except Exception as e:
        logger.error("Sending reset code to %s failed: %s", email, e)
        raise HTTPException(status_code=500, detail="Failed to send email. Please try again later.")

    return {"message": "Reset code sent to email"}


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest):
    """
    Step 2: Set a new password with a matching, unexpired reset code.
    """
    db = get_db()

    user = await db.users.find_one({
        "email": normalize_email(request.email),
        "reset_token": request.reset_token,
        "reset_token_expiry": {"$gt": datetime.utcnow()},
    })
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    await db.users.update_one(
        {"_id": user["_id"]},
        {
            "$set": {"password": get_password_hash(request.new_password)},
            "$unset": {"reset_token": "", "reset_token_expiry": ""},
        },
    )

    logger.info("Password reset for user %s", user["_id"])
    return {"message": "Password reset successful"}
