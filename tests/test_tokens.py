"""Tests for bearer token issuance and decoding."""

from datetime import date, datetime, timedelta, timezone

import pytest
from jose import jwt

from tasktrack.config import Settings
from tasktrack.errors import AuthenticationError, ConfigurationError
from tasktrack.services.tokens import TokenClaims, TokenIssuer


def _claims() -> TokenClaims:
    return TokenClaims(user_id="u1", email="e@x.com", name="N", birth_date="1990-01-01")


class TestTokenIssuerConstruction:
    """Secret strength is checked when the issuer is built."""

    @pytest.mark.parametrize("secret", ["", "short", "x" * 31])
    def test_weak_or_missing_secret_is_fatal(self, secret):
        with pytest.raises(ConfigurationError):
            TokenIssuer(Settings(jwt_secret_key=secret))

    def test_32_character_secret_is_accepted(self):
        issuer = TokenIssuer(Settings(jwt_secret_key="x" * 32))

        assert issuer.algorithm == "HS256"
        assert issuer.lifetime == timedelta(hours=10)


class TestTokenIssue:
    """Claim set and expiry of issued tokens."""

    def test_claims_are_exactly_identity_plus_expiry(self, issuer, settings):
        issued = issuer.issue(_claims())

        payload = jwt.decode(issued.token, settings.JWT_SECRET_KEY, algorithms=["HS256"])

        assert payload == {
            "sub": "u1",
            "email": "e@x.com",
            "name": "N",
            "birthDate": "1990-01-01",
            "exp": int(issued.expires_at.timestamp()),
        }

    def test_expiry_is_issuance_plus_ten_hours(self, issuer):
        issued = issuer.issue(_claims())

        assert issued.expires_at - issued.issued_at == timedelta(hours=10)
        assert issued.issued_at.tzinfo is not None

    def test_uses_injected_utc_clock(self, settings):
        fixed = datetime(2030, 5, 1, 8, 30, 15, 999999, tzinfo=timezone.utc)
        issuer = TokenIssuer(settings, clock=lambda: fixed)

        issued = issuer.issue(_claims())

        assert issued.issued_at == fixed.replace(microsecond=0)
        assert issued.expires_at == datetime(2030, 5, 1, 18, 30, 15, tzinfo=timezone.utc)

    def test_header_declares_hs256(self, issuer):
        issued = issuer.issue(_claims())

        assert jwt.get_unverified_header(issued.token)["alg"] == "HS256"

    def test_birth_date_rendered_as_iso_string(self, issuer, make_user):
        user = make_user(id="507f1f77bcf86cd799439011", birth_date=date(1985, 12, 31))

        issued = issuer.issue(TokenClaims.from_user(user))
        payload = issuer.decode(issued.token)

        assert payload["sub"] == "507f1f77bcf86cd799439011"
        assert payload["birthDate"] == "1985-12-31"


class TestTokenDecode:
    """Signature and expiry checks used by the HTTP layer."""

    def test_round_trip(self, issuer):
        payload = issuer.decode(issuer.issue(_claims()).token)

        assert payload["sub"] == "u1"
        assert payload["email"] == "e@x.com"

    def test_expired_token_rejected(self, settings):
        past = datetime.now(timezone.utc) - timedelta(hours=11)
        issuer = TokenIssuer(settings, clock=lambda: past)
        token = issuer.issue(_claims()).token

        with pytest.raises(AuthenticationError, match="expired"):
            issuer.decode(token)

    def test_token_signed_with_other_secret_rejected(self, issuer):
        other = TokenIssuer(Settings(jwt_secret_key="another-secret-key-of-enough-length!!"))
        token = other.issue(_claims()).token

        with pytest.raises(AuthenticationError):
            issuer.decode(token)

    def test_garbage_rejected(self, issuer):
        with pytest.raises(AuthenticationError):
            issuer.decode("not.a.token")
