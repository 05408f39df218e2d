"""
Short-lived access tokens for the unauthenticated video endpoint.

A token is an HS256 JWT carrying the subject (user id), a fixed ``video``
scope and an expiry. Holding a valid token stands in for a session: the
bearer is treated as the user the token was issued to, without any further
identity check.

Expiry is strict: a token is rejected once ``now >= exp``, with no clock-skew
leeway.
"""
import binascii
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from core.exceptions import TokenExpired, TokenInvalid
from services.config_service import DEFAULT_VIDEO_TOKEN_TTL_SECONDS

log = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_SCOPE = "video"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def has_canonical_signature(token: str) -> bool:
    """True when the signature segment is the exact base64url encoding of its bytes.

    The last character of an HS256 signature carries unused bits; without this
    check two different strings could decode to the same signature.
    """
    parts = token.split(".")
    if len(parts) != 3 or not parts[2]:
        return False
    try:
        raw_segment = parts[2].encode("ascii")
        return base64url_encode(base64url_decode(raw_segment)) == raw_segment
    except (UnicodeEncodeError, binascii.Error, ValueError):
        return False


class VideoTokenService:
    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int = DEFAULT_VIDEO_TOKEN_TTL_SECONDS,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not secret_key:
            raise ValueError("A signing key is required for video tokens")
        if ttl_seconds <= 0:
            raise ValueError("Video token TTL must be positive")
        self._secret_key = secret_key
        self.ttl_seconds = ttl_seconds
        self._now = now or _utcnow

    def issue(self, user_id: UUID | str) -> str:
        """Sign a token authorising ``user_id`` to fetch videos until it expires."""
        issued_at = int(self._now().timestamp())
        claims = {
            "sub": str(user_id),
            "scope": TOKEN_SCOPE,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> str:
        """Return the user id a token was issued to.

        Raises ``TokenInvalid`` for a missing, malformed, tampered or foreign
        token and ``TokenExpired`` once its expiry has been reached.
        """
        if not token or not has_canonical_signature(token):
            raise TokenInvalid()

        try:
            # Expiry is checked below against the injected clock
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            log.info("Rejected video token: %s", exc)
            raise TokenInvalid()

        if claims.get("scope") != TOKEN_SCOPE:
            raise TokenInvalid()

        subject = claims.get("sub")
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise TokenInvalid()
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise TokenInvalid()

        if self._now().timestamp() >= expires_at:
            raise TokenExpired()

        return subject
