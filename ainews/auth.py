"""
Authentication module for API access control.

Supports:
1. No auth (local development) - when AUTH_API_KEY is not configured
2. API key auth - when AUTH_API_KEY is set, via the X-API-Key header
3. Admin key for triggering aggregation, via the X-Admin-Key header
4. Caller identity for per-user lists, via the X-User-Id header
"""

import secrets
from typing import Annotated

from fastapi import Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .config import config

# Header names for the API keys
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)
ADMIN_KEY_HEADER = APIKeyHeader(name="X-Admin-Key", auto_error=False)


def verify_api_key(api_key: str | None = Security(API_KEY_HEADER)) -> str:
    """
    Verify the API key from request headers.

    If AUTH_API_KEY is not configured in the environment, authentication
    is disabled and all requests are allowed (for local development).

    Raises:
        HTTPException: If authentication is enabled and the key is missing or invalid
    """
    configured_key = config.AUTH_API_KEY

    # If no auth key is configured, skip authentication (local dev mode)
    if not configured_key:
        return ""

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Provide X-API-Key header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(api_key, configured_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


def verify_admin_key(admin_key: str | None = Security(ADMIN_KEY_HEADER)) -> str:
    """
    Verify the admin key required to trigger aggregation.

    Unlike the API key there is no dev-mode bypass: with ADMIN_API_KEY
    unset, admin operations are unavailable.

    Raises:
        HTTPException: 503 if no admin key is configured, 403 if the key is wrong
    """
    configured_key = config.ADMIN_API_KEY
    if not configured_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin operations disabled: ADMIN_API_KEY not configured",
        )

    if not admin_key or not secrets.compare_digest(admin_key, configured_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    return admin_key


def get_user_id(
    x_user_id: Annotated[int | None, Header(alias="X-User-Id")] = None,
) -> int:
    """
    Identify the caller of a per-user endpoint.

    Raises:
        HTTPException: 401 if the X-User-Id header is missing
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user. Provide X-User-Id header.",
        )
    return x_user_id
