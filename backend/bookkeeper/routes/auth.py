"""Authentication routes: demo login, current user and two-factor setup."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from bookkeeper import demo_data
from bookkeeper.errors import BadRequestError
from bookkeeper.middleware.auth import (
    authenticate,
    create_access_token,
    demo_user,
    get_current_user,
    new_session_id,
)
from bookkeeper.services import two_factor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class EnableTwoFactorRequest(BaseModel):
    code: str | None = None
    secret: str | None = None


class DisableTwoFactorRequest(BaseModel):
    code: str | None = None


@router.post("/login")
async def login(body: LoginRequest):
    user = authenticate(body.username, body.password)
    if user is None:
        logger.warning(f"Failed login for {body.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, "error": "Invalid username or password"},
        )

    session_id = new_session_id()
    token = create_access_token(user, session_id)
    logger.info(f"User {user['username']} logged in ({session_id})")

    return {
        "success": True,
        "token": token,
        "sessionId": session_id,
        "user": user,
        "organization": demo_data.DEMO_ORGANIZATION,
    }


@router.get("/me")
async def me(current_user: dict = Depends(get_current_user)):
    return {**demo_user(), "sessionId": current_user["session_id"]}


# ---------------------------------------------------------------------------
# TWO-FACTOR AUTHENTICATION
# ---------------------------------------------------------------------------

@router.post("/setup-2fa")
async def setup_2fa(_user: dict = Depends(get_current_user)):
    setup = two_factor.generate_setup()
    return {"secret": setup["secret"], "qrCode": setup["qrCode"]}


@router.post("/enable-2fa")
async def enable_2fa(
    body: EnableTwoFactorRequest,
    current_user: dict = Depends(get_current_user),
):
    """Confirm a setup with a six-digit code.

    When the client echoes the secret it was given, the code must also be a
    valid TOTP for that secret.
    """
    if not body.code:
        raise BadRequestError("Verification code is required", success=False)

    invalid = "Invalid verification code. Please enter a 6-digit code."
    if not two_factor.is_well_formed(body.code):
        raise BadRequestError(invalid, success=False)
    if body.secret and not two_factor.verify_code(body.secret, body.code):
        raise BadRequestError(invalid, success=False)

    logger.info(f"2FA enabled for {current_user['username']}")
    return {"success": True, "message": "2FA enabled successfully"}


@router.post("/disable-2fa")
async def disable_2fa(
    body: DisableTwoFactorRequest,
    current_user: dict = Depends(get_current_user),
):
    if not body.code:
        raise BadRequestError("2FA code is required", success=False)
    if not two_factor.is_well_formed(body.code):
        raise BadRequestError("Invalid 2FA code. Please enter a 6-digit code.", success=False)

    logger.info(f"2FA disabled for {current_user['username']}")
    return {"success": True, "message": "2FA disabled successfully"}
