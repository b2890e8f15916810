"""Authentication endpoints using the service layer."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, g

from accounts.api.deps import (
    call_service,
    json_response,
    load_json,
    rate_limited,
    require_auth,
    timing,
)
from accounts.core.container import get_session_service
from accounts.schemas import (
    RefreshTokenSchema,
    ResendSchema,
    SignInSchema,
    SignUpResultSchema,
    SignUpSchema,
    TokenPairSchema,
    VerifySchema,
    WhoAmISchema,
)
from accounts.services.sessions import (
    LogoutIn,
    RefreshIn,
    ResendIn,
    SignInIn,
    SignUpIn,
    VerifyIn,
)

bp = Blueprint("auth", __name__)

sign_up_schema = SignUpSchema()
verify_schema = VerifySchema()
resend_schema = ResendSchema()
sign_in_schema = SignInSchema()
refresh_schema = RefreshTokenSchema()
token_schema = TokenPairSchema()
sign_up_result_schema = SignUpResultSchema()
whoami_schema = WhoAmISchema()


@bp.post("/sign-up")
@rate_limited
@timing
def sign_up():
    """Register an account; an unverified one with the same email gets a new code."""

    data = load_json(sign_up_schema)
    service = get_session_service()
    result = call_service(lambda: service.sign_up(SignUpIn(**data)))
    status = HTTPStatus.CREATED if result.created else HTTPStatus.OK
    return json_response({"data": sign_up_result_schema.dump(result)}, status=status)


@bp.post("/verify")
@rate_limited
@timing
def verify():
    """Consume an emailed code and mark the account verified."""

    data = load_json(verify_schema)
    service = get_session_service()
    call_service(lambda: service.verify(VerifyIn(**data)), not_found_status=HTTPStatus.BAD_REQUEST)
    return json_response({"data": {"verified": True}})


@bp.post("/resend")
@rate_limited
@timing
def resend():
    """Send a fresh verification code to a pending account."""

    data = load_json(resend_schema)
    service = get_session_service()
    result = call_service(
        lambda: service.resend(ResendIn(**data)), not_found_status=HTTPStatus.NOT_FOUND
    )
    return json_response({"data": sign_up_result_schema.dump(result)})


@bp.post("/sign-in")
@rate_limited
@timing
def sign_in():
    """Authenticate credentials and open a session for the device."""

    data = load_json(sign_in_schema)
    service = get_session_service()
    pair = call_service(lambda: service.sign_in(SignInIn(**data)))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@rate_limited
@timing
def refresh():
    """Exchange a refresh token for a new access token (rotating when close to expiry)."""

    data = load_json(refresh_schema)
    service = get_session_service()
    pair = call_service(lambda: service.refresh(RefreshIn(**data)))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Close the session of the device owning the refresh token."""

    data = load_json(refresh_schema)
    service = get_session_service()
    call_service(lambda: service.logout(LogoutIn(**data)))
    return "", HTTPStatus.NO_CONTENT


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the identity behind the bearer access token."""

    return json_response({"data": whoami_schema.dump({"id": g.user_id})})
