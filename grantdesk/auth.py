"""
Bearer ID-token authentication.

Login itself happens at the external OpenID Connect provider; this module
only verifies the signed ID token the client presents and maps its claims
onto a local user profile. ``create_access_token`` mints tokens with the
same key for local development and tests.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from grantdesk.config import Settings, get_settings
from grantdesk.db import DbClient, UserRecord
from grantdesk.dependencies import get_db_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    subject: str, settings: Settings, **claims: Any
) -> str:
    """Sign a token carrying ``sub`` plus any extra profile claims."""
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(hours=settings.auth_token_ttl_hours),
    }
    if settings.auth_issuer:
        payload["iss"] = settings.auth_issuer
    if settings.auth_audience:
        payload["aud"] = settings.auth_audience
    return jwt.encode(
        payload, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm
    )


def decode_id_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience; return the claims."""
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options={"verify_aud": settings.auth_audience is not None},
        )
    except JWTError as exc:
        logger.warning("ID token validation failed: %s", exc)
        raise _unauthorized("Invalid or expired token") from exc
    if not claims.get("sub"):
        raise _unauthorized("Invalid token payload")
    return claims


def user_from_claims(claims: dict[str, Any]) -> UserRecord:
    """Map standard OIDC claims (or their snake_case variants) to a user."""
    return UserRecord(
        id=str(claims["sub"]),
        email=claims.get("email"),
        first_name=claims.get("first_name") or claims.get("given_name"),
        last_name=claims.get("last_name") or claims.get("family_name"),
        profile_image_url=claims.get("profile_image_url") or claims.get("picture"),
    )


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    return decode_id_token(credentials.credentials, settings)


def get_current_user(
    claims: dict[str, Any] = Depends(get_current_claims),
    db: DbClient = Depends(get_db_client),
) -> UserRecord:
    """
    Resolve the caller's stored profile, creating it from the token claims
    when the authentication callback has not run yet.
    """
    user = db.get_user(str(claims["sub"]))
    if user:
        return user
    return db.upsert_user(user_from_claims(claims))
