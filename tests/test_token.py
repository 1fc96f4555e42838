"""
Tests for TokenService: issuing and verifying signed tokens.
"""

import base64
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from quiz_validation.security import (
    ALGORITHM,
    ExpiredToken,
    InvalidToken,
    TokenService,
)
from quiz_validation.security.token import decode_secret


SECRET = base64.b64encode(b"k" * 64).decode("ascii")
OTHER_SECRET = base64.b64encode(b"z" * 64).decode("ascii")


@pytest.fixture
def service():
    return TokenService(secret=SECRET, issuer="quiz-tests", ttl_millis=60_000)


class TestIssueAndVerify:
    """Round trips through issue / verify."""

    def test_id_and_subject(self, service):
        token = service.issue("42", "ana@example.com")
        assert service.verify_and_get_id(token) == "42"
        assert service.verify_and_get_subject(token) == "ana@example.com"

    def test_keyword_arguments(self, service):
        token = service.issue(token_id="9", subject="luis")
        assert service.get_claims(token)["jti"] == "9"

    def test_claims(self, service):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        token = service.issue("42", "ana", now=now)
        claims = service.get_claims(token)

        assert claims["iss"] == "quiz-tests"
        assert claims["iat"] == int(now.timestamp())
        assert claims["exp"] == int(now.timestamp()) + 60

    def test_signed_with_hs512(self, service):
        token = service.issue("1", "s")
        assert jwt.get_unverified_header(token)["alg"] == ALGORITHM == "HS512"

    def test_negative_ttl_never_expires(self):
        service = TokenService(secret=SECRET, issuer="quiz-tests", ttl_millis=-1)
        token = service.issue("1", "s")
        assert "exp" not in service.get_claims(token)

    def test_from_settings(self):
        service = TokenService.from_settings(
            {"secret": SECRET, "issuer": "from-config", "ttl_millis": 1000}
        )
        assert service.issuer == "from-config"
        assert service.ttl_millis == 1000

    def test_from_default_settings(self):
        service = TokenService.from_settings()
        token = service.issue("7", "subject")
        assert service.verify_and_get_id(token) == "7"


class TestVerificationFailures:
    """Tokens that must be rejected."""

    def test_expired(self):
        service = TokenService(secret=SECRET, issuer="quiz-tests", ttl_millis=1000)
        issued = datetime.now(timezone.utc) - timedelta(hours=1)
        token = service.issue("1", "s", now=issued)

        with pytest.raises(ExpiredToken):
            service.verify_and_get_id(token)

    def test_wrong_secret(self, service):
        other = TokenService(secret=OTHER_SECRET, issuer="quiz-tests")
        token = other.issue("1", "s")

        with pytest.raises(InvalidToken):
            service.verify_and_get_id(token)

    def test_wrong_issuer(self, service):
        other = TokenService(secret=SECRET, issuer="someone-else")
        token = other.issue("1", "s")

        with pytest.raises(InvalidToken):
            service.verify_and_get_subject(token)

    def test_tampered_payload(self, service):
        header, _, signature = service.issue("1", "s").split(".")
        forged = base64.urlsafe_b64encode(
            b'{"jti":"2","sub":"s","iss":"quiz-tests"}'
        ).decode("ascii").rstrip("=")

        with pytest.raises(InvalidToken):
            service.get_claims(f"{header}.{forged}.{signature}")

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_malformed(self, service, token):
        with pytest.raises(InvalidToken):
            service.get_claims(token)


class TestSecret:
    """Tests for decoding the shared secret."""

    def test_decode(self):
        assert decode_secret(SECRET) == b"k" * 64

    @pytest.mark.parametrize("secret", ["", "not base64!"])
    def test_invalid(self, secret):
        with pytest.raises(ValueError):
            decode_secret(secret)
