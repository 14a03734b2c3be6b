"""
Spacetime Backend: Route Dependencies
======================================

What:  FastAPI dependencies shared across route modules.
Who:   `get_current_user_id` guards every /memories route.
"""

from typing import Optional
from uuid import UUID

from fastapi import Header, Request

from app.exceptions import AuthenticationError
from app.services.token_service import token_service


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> UUID:
    """
    Resolve the caller's user id from `Authorization: Bearer <jwt>`.

    The id is also stored on `request.state.user_id` for logging.

    Raises:
        AuthenticationError: header missing or malformed, token invalid or expired.
    """
    token = _extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationError(message="Missing bearer token")

    user_id = token_service.user_id_from(token)
    request.state.user_id = user_id
    return user_id
