"""
Authentication routes for register, login, logout and password change.
"""
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.api.dependencies import (
    auth_rate_limit, get_current_session, get_optional_session, get_session_token
)
from app.core.config import settings
from app.core.errors import InternalError
from app.core.sessions import SessionData, SessionManager, get_session_manager
from app.core.validation import validate_login, validate_password_change, validate_registration
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import (
    ChangePasswordRequest, LoginRequest, LoginResponse, MeResponse,
    MessageResponse, RegisterRequest, RegisterResponse, UserIdentity
)
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(
    request: Request,
    response: Response,
    manager: SessionManager,
    user: User
) -> None:
    """Replace any current session with a new one and hand the token out as a cookie."""
    manager.destroy(get_session_token(request))
    token = manager.create(user.id, user.username)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(manager.ttl.total_seconds()),
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
        path="/",
    )


@router.post("/register", response_model=RegisterResponse, dependencies=[Depends(auth_rate_limit)])
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager)
):
    """Register a new user and log them in."""
    username, password = validate_registration(payload.username, payload.password)

    try:
        user = await user_service.register_user(db, username, password)
    except SQLAlchemyError:
        logger.exception("Database error during registration")
        raise InternalError("Database error")

    _start_session(request, response, manager, user)
    return RegisterResponse(message="User registered successfully", user_id=user.id)


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(auth_rate_limit)])
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager)
):
    """Check credentials and start a session."""
    username, password = validate_login(credentials.username, credentials.password)

    try:
        user = await user_service.verify_credentials(db, username, password)
    except SQLAlchemyError:
        logger.exception("Database error during login")
        raise InternalError("Database error")

    _start_session(request, response, manager, user)
    return LoginResponse(
        message="Login successful",
        user=UserIdentity(id=user.id, username=user.username)
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager)
):
    """Destroy the current session, if any."""
    manager.destroy(get_session_token(request))
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
    )
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=MeResponse)
async def me(session=Depends(get_optional_session)):
    """Identity of the live session; 401 with ``{"user": null}`` otherwise."""
    if session is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"user": None})
    return MeResponse(user=UserIdentity(id=session.user_id, username=session.username))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    dependencies=[Depends(auth_rate_limit)]
)
async def change_password(
    payload: ChangePasswordRequest,
    session: SessionData = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Replace the password after checking the current one."""
    current_password, new_password = validate_password_change(
        payload.current_password, payload.new_password
    )

    try:
        await user_service.change_password(db, session.user_id, current_password, new_password)
    except SQLAlchemyError:
        logger.exception("Database error during password change")
        raise InternalError("Failed to update password")

    return MessageResponse(message="Password changed successfully")
