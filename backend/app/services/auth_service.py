"""
Spacetime Backend: GitHub Sign-In Service
==========================================

What:  Turns a GitHub OAuth authorization code into a Spacetime session token.
How:   Exchanges the code for a GitHub access token, reads the GitHub profile,
       finds or creates the matching User row, and signs a JWT for it.
Who:   Called by POST /register.

Flow:
    ┌──────────┐    ┌──────────────────┐    ┌───────────────┐    ┌──────────┐
    │  code    │───▶│ POST oauth/      │───▶│ GET /user     │───▶│ upsert   │──▶ JWT
    │ (client) │    │ access_token     │    │ (profile)     │    │ User row │
    └──────────┘    └──────────────────┘    └───────────────┘    └──────────┘

Resilience:
    Both GitHub calls retry with tenacity (exponential backoff with jitter)
    on transport errors and 5xx responses. 4xx responses are not retried.
    After the last attempt the error surfaces as UpstreamAuthError (502).
"""

import logging
from typing import Any, Dict, Optional

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
    before_sleep_log,
)

from app.config import settings
from app.exceptions import AuthenticationError, UpstreamAuthError
from app.models.user import User
from app.schemas.auth import TokenResponse
from app.services.token_service import token_service

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Network failures and GitHub 5xx responses are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


_github_retry = retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(settings.retry_max_attempts),
    wait=wait_exponential_jitter(
        initial=settings.retry_min_wait,
        max=settings.retry_max_wait,
        jitter=1,
    ),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class AuthService:
    """
    GitHub OAuth exchange plus user upsert.

    Args:
        transport: Optional httpx transport, used by tests to stub GitHub.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=settings.github_timeout,
            headers={"Accept": "application/json"},
        )

    @_github_retry
    async def _exchange_code(self, code: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.post(
                settings.github_oauth_url,
                params={
                    "client_id": settings.github_client_id,
                    "client_secret": settings.github_client_secret,
                    "code": code,
                },
            )
            response.raise_for_status()
            return response.json()

    @_github_retry
    async def _fetch_profile(self, access_token: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.get(
                f"{settings.github_api_url}/user",
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            return response.json()

    async def _get_or_create_user(self, db: AsyncSession, profile: Dict[str, Any]) -> User:
        """Look the user up by GitHub id, inserting a row on first sign-in."""
        github_id = int(profile["id"])
        result = await db.execute(select(User).where(User.github_id == github_id))
        user = result.scalar_one_or_none()
        if user is not None:
            return user

        login = profile.get("login") or ""
        user = User(
            github_id=github_id,
            login=login,
            name=profile.get("name") or login,
            avatar_url=profile.get("avatar_url") or "",
        )
        db.add(user)
        await db.flush()
        logger.info("Created user %s for GitHub account %s", user.id, login)
        return user

    async def register(self, db: AsyncSession, code: str) -> TokenResponse:
        """
        Complete a GitHub sign-in.

        Raises:
            AuthenticationError: GitHub rejected the code (→ 401)
            UpstreamAuthError:   GitHub unreachable or erroring (→ 502)
        """
        try:
            grant = await self._exchange_code(code)
            access_token = grant.get("access_token")
            if not access_token:
                raise AuthenticationError(
                    message="GitHub rejected the authorization code",
                    context={"github_error": grant.get("error", "unknown")},
                )
            profile = await self._fetch_profile(access_token)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                raise AuthenticationError(message="GitHub rejected the access token")
            logger.error("GitHub returned %d during sign-in", e.response.status_code)
            raise UpstreamAuthError(context={"status": e.response.status_code})
        except (httpx.HTTPError, ValueError) as e:
            logger.error("GitHub sign-in failed: %s", str(e))
            raise UpstreamAuthError(context={"error_type": type(e).__name__})

        if "id" not in profile:
            raise UpstreamAuthError(
                message="GitHub returned an unexpected profile",
                context={"keys": sorted(profile)},
            )

        user = await self._get_or_create_user(db, profile)
        token = token_service.issue(user.id, name=user.name, avatar_url=user.avatar_url)
        return TokenResponse(token=token)


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
