"""Tests for JWTService token issuance and verification."""

import time

import jwt
import pytest

from learnforge.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenExpiredError,
)
from learnforge.auth.types import Principal, Role, TokenClass

SECRET = "test-secret-key-that-is-long-enough-for-hs256"
NOW = 1_700_000_000


class FakeClock:
    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(clock):
    return JWTService(SECRET, clock=clock)


def make_principal(role: Role = Role.STUDENT) -> Principal:
    return Principal(user_id=42, email="a@x.com", role=role)


class TestRoundTrip:
    @pytest.mark.parametrize("role", list(Role))
    @pytest.mark.parametrize("token_class", list(TokenClass))
    def test_verify_returns_issued_principal(self, service, role, token_class):
        principal = make_principal(role)
        token = service.issue(principal, token_class)

        assert service.verify(token) == principal

    def test_claims_carry_identity_role_and_class(self, service):
        token = service.issue(make_principal(Role.INSTRUCTOR), TokenClass.REFRESH)
        claims = service.decode_token(token)

        assert claims.user_id == 42
        assert claims.email == "a@x.com"
        assert claims.role == "INSTRUCTOR"
        assert claims.type == "refresh"
        assert claims.iat == NOW
        assert claims.exp == NOW + JWTService.REFRESH_TOKEN_TTL

    def test_token_pair_has_both_classes(self, service):
        pair = service.generate_token_pair(make_principal())

        assert service.decode_token(pair.access_token).type == "access"
        assert service.decode_token(pair.refresh_token).type == "refresh"
        assert pair.expires_in == 15 * 60
        assert pair.token_type == "Bearer"


class TestExpiry:
    def test_access_token_valid_one_second_before_expiry(self, service, clock):
        token = service.issue(make_principal(), TokenClass.ACCESS)
        clock.now = NOW + JWTService.ACCESS_TOKEN_TTL - 1

        assert service.verify(token) is not None

    def test_access_token_invalid_at_expiry_instant(self, service, clock):
        token = service.issue(make_principal(), TokenClass.ACCESS)
        clock.now = NOW + JWTService.ACCESS_TOKEN_TTL

        assert service.verify(token) is None

    def test_refresh_token_outlives_access_token(self, service, clock):
        pair = service.generate_token_pair(make_principal())
        clock.now = NOW + JWTService.ACCESS_TOKEN_TTL + 60

        assert service.verify(pair.access_token) is None
        assert service.verify(pair.refresh_token) is not None

    def test_refresh_token_expires_after_seven_days(self, service, clock):
        token = service.issue(make_principal(), TokenClass.REFRESH)
        clock.now = NOW + 7 * 24 * 60 * 60

        assert service.verify(token) is None

    def test_clock_ahead_of_wall_time_accepts_own_tokens(self):
        # iat lies in the real future; only the service clock may judge it
        clock = FakeClock(time.time() + 3600)
        service = JWTService(SECRET, clock=clock)

        token = service.issue(make_principal(), TokenClass.ACCESS)

        assert service.verify(token) == make_principal()

    def test_nbf_claim_is_not_checked_against_wall_time(self, service):
        token = jwt.encode(
            {"sub": "42", "email": "a@x.com", "role": "STUDENT",
             "exp": NOW + 60, "nbf": int(time.time()) + 3600},
            SECRET,
            algorithm="HS256",
        )

        assert service.verify(token) is not None

    def test_decode_raises_expired(self, service, clock):
        token = service.issue(make_principal(), TokenClass.ACCESS)
        clock.now = NOW + 10_000

        with pytest.raises(TokenExpiredError):
            service.decode_token(token)


class TestInvalidTokens:
    def test_wrong_secret(self, service, clock):
        other = JWTService("another-secret-key-that-is-long-enough", clock=clock)
        token = other.issue(make_principal(), TokenClass.ACCESS)

        assert service.verify(token) is None
        with pytest.raises(InvalidTokenError):
            service.decode_token(token)

    def test_garbage(self, service):
        assert service.verify("not-a-jwt") is None
        assert service.verify("") is None

    def test_tampered_payload(self, service):
        token = service.issue(make_principal(), TokenClass.ACCESS)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload[:-2] + ("A" if payload[-2] != "A" else "B") + payload[-1], signature])

        assert service.verify(tampered) is None

    def test_unknown_role_is_rejected(self, service):
        token = jwt.encode(
            {"sub": "1", "email": "a@x.com", "role": "ADMIN", "type": "access", "iat": NOW, "exp": NOW + 60},
            SECRET,
            algorithm="HS256",
        )

        assert service.verify(token) is None

    def test_non_numeric_subject_is_rejected(self, service):
        token = jwt.encode(
            {"sub": "abc", "email": "a@x.com", "role": "STUDENT", "iat": NOW, "exp": NOW + 60},
            SECRET,
            algorithm="HS256",
        )

        assert service.verify(token) is None

    def test_missing_exp_is_rejected(self, service):
        token = jwt.encode({"sub": "1", "role": "STUDENT"}, SECRET, algorithm="HS256")

        assert service.verify(token) is None
