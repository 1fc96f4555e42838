"""
Signed token issuance and verification.

Tokens are HS512 JWTs carrying the id (``jti``), subject (``sub``),
issuer (``iss``), issued-at (``iat``) and, unless the configured lifetime
is negative, an expiry (``exp``).
"""

import base64
import binascii
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from quiz_validation.logger import logger
from quiz_validation.settings import settings


ALGORITHM = "HS512"


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidToken(TokenError):
    """Raised for malformed tokens, bad signatures or a foreign issuer."""


class ExpiredToken(TokenError):
    """Raised when a token is past its expiry."""


def decode_secret(secret: str) -> bytes:
    """
    Decode the base64 shared secret into signing key bytes.

    Raises:
        ValueError: If the secret is empty or not valid base64
    """
    if not secret:
        raise ValueError("token secret is empty")
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"token secret is not valid base64: {e}") from e


class TokenService:
    """
    Issues and verifies signed tokens.

    Example:
        service = TokenService.from_settings()
        token = service.issue("42", "user@example.com")
        service.verify_and_get_id(token)        # "42"
        service.verify_and_get_subject(token)   # "user@example.com"
    """

    def __init__(self, secret: str, issuer: str, ttl_millis: int = -1):
        """
        Args:
            secret: Base64-encoded shared signing secret
            issuer: Value written to and required in the ``iss`` claim
            ttl_millis: Token lifetime in milliseconds; negative never expires
        """
        self.issuer = issuer
        self.ttl_millis = ttl_millis
        self._key = decode_secret(secret)

    @classmethod
    def from_settings(cls, config: Optional[Dict[str, Any]] = None) -> "TokenService":
        """Build from the ``security.jwt`` settings section."""
        config = config or settings.get_nested("security.jwt", {})
        return cls(
            secret=config["secret"],
            issuer=config["issuer"],
            ttl_millis=int(config.get("ttl_millis", -1)),
        )

    def issue(self, token_id: str, subject: str, now: Optional[datetime] = None) -> str:
        """Create a signed token for an id/subject pair."""
        logger.info("Issuing token", token_id=token_id)

        now = now or datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "jti": token_id,
            "iat": now,
            "sub": subject,
            "iss": self.issuer,
        }
        if self.ttl_millis >= 0:
            claims["exp"] = now + timedelta(milliseconds=self.ttl_millis)

        return jwt.encode(claims, self._key, algorithm=ALGORITHM)

    def get_claims(self, token: str) -> Dict[str, Any]:
        """
        Verify a token and return all of its claims.

        Raises:
            ExpiredToken: If the token is past its expiry
            InvalidToken: If the token is malformed, tampered or foreign
        """
        try:
            return jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                options={"require": ["iss", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.debug("Token expired")
            raise ExpiredToken("token has expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid token", reason=str(e))
            raise InvalidToken(f"invalid token: {e}") from e

    def verify_and_get_id(self, token: str) -> str:
        return self.get_claims(token)["jti"]

    def verify_and_get_subject(self, token: str) -> str:
        return self.get_claims(token)["sub"]
