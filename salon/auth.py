"""
Authentication glue.

Identity is delegated to Supabase Auth (called over HTTP with httpx); once a
user signs in, the application keeps a small user record in a signed session
cookie and resolves it to a local ``User`` row on every request.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .config import (
    SUPABASE_ANON_KEY,
    SUPABASE_JWT_AUDIENCE,
    SUPABASE_JWT_SECRET,
    SUPABASE_TIMEOUT,
    SUPABASE_URL,
)
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


class AuthProviderError(Exception):
    """Error returned by the remote auth provider; message is user-facing"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    """Pull the human readable message out of a Supabase Auth error body"""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    return (
        body.get("error_description")
        or body.get("msg")
        or body.get("message")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )


class SupabaseAuthClient:
    """Minimal client for the Supabase Auth (GoTrue) REST API"""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _post(
        self, path: str, payload: Optional[dict] = None, access_token: Optional[str] = None
    ) -> dict[str, Any]:
        if not self.base_url:
            logger.error("❌ SUPABASE_URL not configured")
            raise AuthProviderError("Authentication provider not configured", status_code=500)

        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url, json=payload or {}, headers=self._headers(access_token)
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Auth provider request failed: {e}")
            raise AuthProviderError("Authentication provider unavailable", status_code=503) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"⚠️ Auth provider rejected {path}: HTTP {response.status_code} - {message}")
            raise AuthProviderError(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Exchange credentials for a session (access token + user)"""
        return await self._post(
            "/auth/v1/token?grant_type=password", {"email": email, "password": password}
        )

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> dict[str, Any]:
        """Register a new identity; returns a session when email confirmation is off"""
        return await self._post(
            "/auth/v1/signup", {"email": email, "password": password, "data": metadata}
        )

    async def sign_out(self, access_token: str) -> None:
        await self._post("/auth/v1/logout", access_token=access_token)


def get_auth_client() -> SupabaseAuthClient:
    """Dependency injection for the auth provider client"""
    return SupabaseAuthClient(SUPABASE_URL, SUPABASE_ANON_KEY, timeout=SUPABASE_TIMEOUT)


def verify_access_token(token: str) -> dict[str, Any]:
    """
    Verify a Supabase access token (HS256, signed with the project JWT secret).

    Raises:
        HTTPException: 401 when the token is invalid or expired
    """
    if not SUPABASE_JWT_SECRET:
        logger.error("❌ SUPABASE_JWT_SECRET not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")

    try:
        return jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"⚠️ Invalid access token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token.") from e


def session_payload(user: User) -> dict[str, Any]:
    return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}


def start_session(request: Request, user: User, access_token: Optional[str] = None) -> dict[str, Any]:
    """Store the authenticated user in the session cookie"""
    payload = session_payload(user)
    request.session[SESSION_USER_KEY] = payload
    if access_token:
        request.session["access_token"] = access_token
    return payload


def end_session(request: Request) -> None:
    request.session.clear()


def get_session_user(request: Request) -> Optional[dict[str, Any]]:
    return request.session.get(SESSION_USER_KEY)


async def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Resolve the session user if there is one"""
    session_user = get_session_user(request)
    if not session_user:
        return None

    user = db.query(User).filter(User.id == session_user.get("id")).first()
    if not user:
        # Stale cookie for a deleted account
        logger.info(f"ℹ️ Session refers to missing user {session_user.get('id')}, clearing")
        end_session(request)
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get the authenticated user from the session cookie"""
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Require an admin session"""
    if not user.is_admin:
        logger.warning(f"⚠️ User {user.id} attempted an admin-only action")
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
