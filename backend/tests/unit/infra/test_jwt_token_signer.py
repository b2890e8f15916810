from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from accounts.infra.jwt import JWTTokenSigner
from accounts.services._shared.errors import InvalidTokenError
from accounts.services._shared.ports import FrozenClock


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def access(clock):
    return JWTTokenSigner(secret="access-secret", token_type="access", clock=clock)


@pytest.fixture
def refresh(clock):
    return JWTTokenSigner(secret="refresh-secret", token_type="refresh", clock=clock)


def test_issue_and_verify_round_trip(access):
    token = access.issue("42", timedelta(minutes=15))

    assert access.verify(token) == "42"


def test_tokens_are_unique_per_issue(access):
    assert access.issue("42", timedelta(minutes=1)) != access.issue("42", timedelta(minutes=1))


def test_contexts_are_not_interchangeable(access, refresh):
    access_token = access.issue("42", timedelta(minutes=15))
    refresh_token = refresh.issue("42", timedelta(days=30))

    with pytest.raises(InvalidTokenError):
        refresh.verify(access_token)
    with pytest.raises(InvalidTokenError):
        access.verify(refresh_token)


def test_same_secret_still_rejects_other_type(clock):
    a = JWTTokenSigner(secret="shared", token_type="access", clock=clock)
    r = JWTTokenSigner(secret="shared", token_type="refresh", clock=clock)

    with pytest.raises(InvalidTokenError):
        a.verify(r.issue("42", timedelta(minutes=5)))


def test_expired_token_is_rejected(access, clock):
    token = access.issue("42", timedelta(minutes=15))

    clock.advance(timedelta(minutes=15))

    with pytest.raises(InvalidTokenError):
        access.verify(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_rejected(access, token):
    with pytest.raises(InvalidTokenError):
        access.verify(token)


def test_tampered_token_is_rejected(access):
    token = access.issue("42", timedelta(minutes=15))
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    with pytest.raises(InvalidTokenError):
        access.verify(forged)


def test_other_algorithm_is_rejected(access, clock):
    now = int(clock.now().timestamp())
    token = jwt.encode(
        {"sub": "42", "type": "access", "iat": now, "exp": now + 60},
        "access-secret",
        algorithm="HS512",
    )

    with pytest.raises(InvalidTokenError):
        access.verify(token)


def test_missing_subject_is_rejected(access, clock):
    now = int(clock.now().timestamp())
    token = jwt.encode(
        {"type": "access", "iat": now, "exp": now + 60}, "access-secret", algorithm="HS256"
    )

    with pytest.raises(InvalidTokenError):
        access.verify(token)


def test_unsupported_algorithm_is_refused_at_construction():
    with pytest.raises(ValueError):
        JWTTokenSigner(secret="s", token_type="access", algorithm="none")
