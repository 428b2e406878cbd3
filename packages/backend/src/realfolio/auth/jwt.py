"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries only the user id (`{"id": ...}`) plus `iat`/`exp`; its validity is
decided entirely by signature and expiry at verification time. There is
no revocation list — a token stays valid until it expires.

The service is constructed from explicit settings so it can be unit
tested without a process environment.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from realfolio.config import Settings


class ConfigurationError(Exception):
    """Raised when the token service cannot be built (no signing secret)."""


class InvalidTokenError(Exception):
    """Raised when a token fails signature, payload or expiry checks."""


class TokenService:
    """Issues and verifies signed, time-bound identity tokens."""

    def __init__(
        self,
        secret: str,
        expires_in: timedelta = timedelta(days=30),
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ConfigurationError("JWT secret is not configured")
        self._secret = secret
        self.expires_in = expires_in
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            expires_in=settings.jwt_expire_delta,
            algorithm=settings.jwt_algorithm,
        )

    def issue(self, subject_id: str, now: Optional[datetime] = None) -> str:
        """Create a token for `subject_id`, valid for `expires_in`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return its subject id.

        Raises InvalidTokenError on a bad signature, a malformed payload or
        an elapsed expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        subject_id = payload["id"]
        if not isinstance(subject_id, str) or not subject_id:
            raise InvalidTokenError("Invalid token: malformed subject")
        return subject_id
