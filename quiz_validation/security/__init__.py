"""Token issuance and verification used to identify quiz respondents."""

from quiz_validation.security.token import (
    ALGORITHM,
    ExpiredToken,
    InvalidToken,
    TokenError,
    TokenService,
)

__all__ = [
    "ALGORITHM",
    "TokenService",
    "TokenError",
    "InvalidToken",
    "ExpiredToken",
]
