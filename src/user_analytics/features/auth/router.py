"""API routes for user authentication: token issue, logout and registration.

Every token request is written to login_logs, successful or not, so the
analytics reports can count logins and session durations."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from typing import Annotated, Optional

from . import schemas
from . import models
from . import security as auth_security
from . import service as auth_service

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["Authentication"],
    prefix="/auth"
)

def _client_details(request: Request) -> tuple[Optional[str], Optional[str]]:
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")

@router.post("/token", response_model=schemas.Token)
async def login_for_access_token(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
):
    ip_address, user_agent = _client_details(request)
    user = await auth_service.get_user_by_username(username=form_data.username)
    if not user or not auth_security.verify_password(form_data.password, user.hashed_password):
        await auth_service.record_login(
            form_data.username, user, success=False, ip_address=ip_address,
            user_agent=user_agent, failure_reason="bad_credentials",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        await auth_service.record_login(
            form_data.username, user, success=False, ip_address=ip_address,
            user_agent=user_agent, failure_reason="inactive",
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    login_log = await auth_service.record_login(
        user.username, user, success=True, ip_address=ip_address, user_agent=user_agent
    )
    logger.info(f"User {user.username} logged in from {ip_address or 'unknown client'}")
    access_token = auth_security.create_access_token(data={"sub": user.username, "sid": login_log.id})
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/logout", response_model=schemas.LogoutResponse)
async def logout(
    current_user: Annotated[models.User, Depends(auth_security.get_current_active_user)],
    token_data: Annotated[schemas.TokenData, Depends(auth_security.get_token_data)],
):
    if token_data.sid is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token carries no session.")
    login_log = await auth_service.close_session(current_user, token_data.sid)
    if login_log is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
    return schemas.LogoutResponse(
        logout_time=login_log.logout_time, session_duration=login_log.session_duration
    )

@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: schemas.UserCreate):
    existing_user_by_username = await auth_service.get_user_by_username(username=user_in.username)
    if existing_user_by_username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )
    existing_user_by_email = await auth_service.get_user_by_email(email=user_in.email)
    if existing_user_by_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    hashed_password = auth_security.get_password_hash(user_in.password)
    user_data_dict = user_in.model_dump(exclude={"password"})
    try:
        new_user_model = await auth_service.create_user(
            user_in=user_data_dict,
            hashed_password_val=hashed_password
        )
        return schemas.UserResponse.model_validate(new_user_model)
    except Exception as e:
        logger.error(f"Register user failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create user.",
        )
