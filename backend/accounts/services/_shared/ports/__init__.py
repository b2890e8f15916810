"""
accounts.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) the session service depends on.

Modules
-------
- :mod:`token_signer`: :class:`~.TokenSigner`, one signing context per token type.
- :mod:`credential_hasher`: :class:`~.CredentialHasher`, one-way secret storage.
- :mod:`clock`: :class:`~.Clock` plus system and frozen implementations.
- :mod:`code_generator`: :class:`~.CodeGenerator` for verification codes.
- :mod:`notifier`: :class:`~.Notifier`, :class:`~.MailMessage` and an in-memory double.
- :mod:`rate_counter`: :class:`~.RateCounter` and :class:`~.RateDecision`.

Concrete adapters (PyJWT, werkzeug, SMTP, limits) live under ``accounts.infra``.
"""

from __future__ import annotations

from .clock import Clock, FrozenClock, SystemClock
from .code_generator import CodeGenerator, RandomCodeGenerator, SequenceCodeGenerator
from .credential_hasher import CredentialHasher
from .notifier import MailMessage, NotificationError, Notifier, RecordingNotifier
from .rate_counter import RateCounter, RateDecision
from .token_signer import TokenSigner

__all__ = [
    "Clock",
    "SystemClock",
    "FrozenClock",
    "CodeGenerator",
    "RandomCodeGenerator",
    "SequenceCodeGenerator",
    "CredentialHasher",
    "MailMessage",
    "NotificationError",
    "Notifier",
    "RecordingNotifier",
    "RateCounter",
    "RateDecision",
    "TokenSigner",
]
