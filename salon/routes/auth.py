import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import (
    AuthProviderError,
    SupabaseAuthClient,
    end_session,
    get_auth_client,
    get_current_user,
    start_session,
    verify_access_token,
)
from ..database import get_db
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import LoginRequest, RegisterRequest, SessionResponse, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])

rate_limit_auth = create_rate_limiter(limit=10, window_seconds=300, key_prefix="auth")


def _extract_identity(payload: dict[str, Any]) -> tuple[Optional[str], Optional[str], dict]:
    """Return (auth_uid, email, user_metadata) from a Supabase session or user payload"""
    auth_user = payload.get("user") or payload
    return (
        auth_user.get("id"),
        auth_user.get("email"),
        auth_user.get("user_metadata") or {},
    )


def _find_or_create_user(
    db: Session,
    auth_uid: str,
    email: str,
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    """Resolve the local user for an auth identity, linking by email when needed"""
    user = db.query(User).filter(User.auth_uid == auth_uid).first()
    if user:
        return user

    user = db.query(User).filter(User.email == email).first()
    if user:
        logger.info(f"🔄 Linking existing user {email} to auth identity {auth_uid}")
        user.auth_uid = auth_uid
    else:
        logger.info(f"🆕 Creating new user: {email}")
        # New accounts are always clients; admins are promoted in the database
        user = User(auth_uid=auth_uid, email=email, name=name or email, phone=phone, role="client")
        db.add(user)

    try:
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"❌ Failed to store user {email}: {e}")
        raise HTTPException(status_code=409, detail="This email is already registered.") from e
    return user


@router.post("/login", response_model=SessionResponse, dependencies=[Depends(rate_limit_auth)])
async def login(
    data: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
):
    """Authenticate with the auth provider and open a session"""
    try:
        auth_session = await auth_client.sign_in_with_password(data.email, data.password)
    except AuthProviderError as e:
        logger.warning(f"⚠️ Login rejected for {data.email}: {e.message}")
        status_code = 401 if e.status_code in (400, 401) else e.status_code
        raise HTTPException(status_code=status_code, detail="Invalid credentials") from e

    access_token = auth_session.get("access_token")
    if not access_token:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    claims = verify_access_token(access_token)
    auth_uid, email, metadata = _extract_identity(auth_session)
    auth_uid = auth_uid or claims.get("sub")
    email = email or claims.get("email") or data.email

    user = _find_or_create_user(db, auth_uid, email, metadata.get("name"), metadata.get("phone"))
    session_user = start_session(request, user, access_token)
    logger.info(f"✅ User {user.id} logged in")
    return {"user": session_user}


@router.post("/register", response_model=SessionResponse, dependencies=[Depends(rate_limit_auth)])
async def register(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
):
    """Register with the auth provider, create the local profile and open a session"""
    try:
        result = await auth_client.sign_up(
            data.email, data.password, {"name": data.name, "phone": data.phone, "role": "client"}
        )
    except AuthProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    auth_uid, email, _ = _extract_identity(result)
    if not auth_uid:
        raise HTTPException(status_code=400, detail="Error registering user.")

    user = _find_or_create_user(db, auth_uid, email or data.email, data.name, data.phone)
    session_user = start_session(request, user, result.get("access_token"))
    return {"user": session_user}


@router.post("/logout", status_code=204)
async def logout(request: Request, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    """Sign out at the provider (best effort) and destroy the session"""
    access_token = request.session.get("access_token")
    if access_token:
        try:
            await auth_client.sign_out(access_token)
        except AuthProviderError as e:
            logger.warning(f"⚠️ Provider sign-out failed, clearing local session anyway: {e.message}")
    end_session(request)
    return Response(status_code=204)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update current user profile"""
    for field, value in data.model_dump(exclude_none=True).items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)
    start_session(request, current_user)
    return current_user
