"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from accounts.core.container import get_container
from accounts.core.errors import TooManyRequests, Unauthorized
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def load_json(schema) -> dict[str, Any]:
    """Validate the JSON body with ``schema`` (raises ``ValidationError`` → 422)."""

    return schema.load(request.get_json(silent=True) or {})


def call_service(
    fn: Callable[[], T], *, not_found_status: int = HTTPStatus.UNAUTHORIZED
) -> T:
    """Run a service call and re-raise service errors as API errors."""

    try:
        return fn()
    except ServiceError as exc:
        raise BaseService.translate_exceptions(exc, not_found_status=not_found_status) from exc


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def require_auth(func: F) -> F:
    """Ensure the request carries a valid bearer access token.

    The authenticated user id is exposed as ``g.user_id``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Unauthorized("Missing bearer token", code="not_authenticated")
        sessions = get_container().sessions
        g.user_id = call_service(lambda: sessions.authenticate_access(token.strip()))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def rate_limited(func: F) -> F:
    """Count the call against the client's window for this endpoint.

    Keys combine ``request.remote_addr`` and the endpoint name. Limiting is
    off when the container has no rate counter.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        counter = get_container().rate_counter
        if counter is not None:
            key = f"{request.endpoint}:{request.remote_addr or 'unknown'}"
            decision = counter.hit(
                key,
                int(current_app.config["AUTH_RATE_LIMIT"]),
                current_app.config["AUTH_RATE_WINDOW"],
            )
            if not decision.allowed:
                raise TooManyRequests(retry_after=decision.retry_after)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
