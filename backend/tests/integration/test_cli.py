from __future__ import annotations

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.verification_code import VerificationCodeFactory


def test_purge_expired_reports_deleted_rows(app, session):
    VerificationCodeFactory(expired=True)
    VerificationCodeFactory()
    RefreshTokenFactory()

    result = app.test_cli_runner().invoke(args=["accounts", "purge-expired"])

    assert result.exit_code == 0, result.output
    assert "Purge summary:" in result.output
    assert "verification_codes  deleted=1" in result.output
    assert "refresh_tokens      deleted=0" in result.output


def test_purge_expired_on_empty_store(app):
    result = app.test_cli_runner().invoke(args=["accounts", "purge-expired"])

    assert result.exit_code == 0
    assert "deleted=0" in result.output
