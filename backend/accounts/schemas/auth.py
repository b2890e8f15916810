"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

CODE_LENGTH = 6


class SignUpSchema(Schema):
    """Input payload for account registration."""

    login = fields.String(required=True, validate=validate.Length(min=2, max=86))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, validate=validate.Length(min=8, max=86))


class VerifySchema(Schema):
    """Input payload carrying an emailed verification code."""

    code = fields.String(required=True, validate=validate.Length(equal=CODE_LENGTH))


class ResendSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=255))


class SignInSchema(Schema):
    """Input payload for authenticating a device."""

    login = fields.String(required=True, validate=validate.Length(min=2, max=86))
    password = fields.String(required=True, validate=validate.Length(min=8, max=86))
    device_id = fields.String(required=True, validate=validate.Length(min=1, max=255))


class RefreshTokenSchema(Schema):
    """Input payload for refresh and logout."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class SignUpResultSchema(Schema):
    """Response payload of sign-up and resend."""

    user_id = fields.Integer(required=True)
    created = fields.Boolean(required=True)
    verification_sent = fields.Boolean(required=True)


class WhoAmISchema(Schema):
    """Response payload exposing the authenticated user id."""

    id = fields.Integer(required=True)
