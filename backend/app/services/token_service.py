"""
Spacetime Backend: Session Token Service
=========================================

What:  Issues and verifies the JWTs that identify callers.
How:   PyJWT with a shared HMAC secret (settings.jwt_secret).
Who:   AuthService issues tokens on sign-in; the `get_current_user_id`
       dependency verifies them on every /memories request.

Token Claims:
    sub        User.id as a string (the only claim the API relies on)
    name       Display name, for the frontend
    avatarUrl  GitHub avatar, for the frontend
    iat / exp  Issued-at and expiry (settings.jwt_expire_days)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt

from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenService:
    """Signs and verifies session tokens."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_days: Optional[int] = None,
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_days = expire_days or settings.jwt_expire_days

    def issue(self, user_id: UUID, name: str = "", avatar_url: str = "") -> str:
        """Return a signed token whose `sub` claim is `user_id`."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "name": name,
            "avatarUrl": avatar_url,
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Returns:
            The claims dict.

        Raises:
            AuthenticationError: bad signature, expired, malformed, or no `sub`.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(message="Session token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", str(e))
            raise AuthenticationError(
                message="Invalid session token",
                context={"reason": type(e).__name__},
            )
        return claims

    def user_id_from(self, token: str) -> UUID:
        """Verify `token` and return its `sub` claim as a UUID."""
        claims = self.verify(token)
        try:
            return UUID(str(claims["sub"]))
        except ValueError:
            raise AuthenticationError(
                message="Invalid session token",
                context={"reason": "sub_not_uuid"},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
token_service = TokenService()
