"""
Authentication dependencies.

The cron endpoint is called by an external scheduler and authenticates
with a shared bearer secret.
"""

import secrets

from fastapi import HTTPException, Request, status

from floodwatch.config import settings


def get_bearer_token(request: Request) -> str:
    """
    Extract the bearer token from the Authorization header.

    Raises:
        HTTPException: If the header is missing or not a bearer token
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_cron_secret(request: Request) -> None:
    """
    Require `Authorization: Bearer <CRON_SECRET>`.

    When no secret is configured the cron endpoint is closed.
    """
    token = get_bearer_token(request)
    if not settings.CRON_SECRET or not secrets.compare_digest(token.encode(), settings.CRON_SECRET.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
