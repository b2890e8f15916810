"""Factory Boy definition for :class:`accounts.models.VerificationCode`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import factory
from accounts.models import VerificationCode

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class VerificationCodeFactory(BaseFactory):
    """Pending code for an unverified user, live for 15 minutes from "now"."""

    class Meta:
        model = VerificationCode
        exclude = ("user",)

    id = None
    user = factory.SubFactory(UserFactory, verified=False)
    user_id = factory.SelfAttribute("user.id")
    code = factory.Sequence(lambda n: f"c{n:05d}")
    expires_at = factory.LazyFunction(lambda: datetime.now(UTC) + timedelta(minutes=15))

    class Params:
        expired = factory.Trait(
            expires_at=factory.LazyFunction(lambda: datetime.now(UTC) - timedelta(seconds=1))
        )
