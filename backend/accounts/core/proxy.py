"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Parameters
    ----------
    app: flask.Flask
        Application whose WSGI pipeline should respect upstream proxy headers.

    Notes
    -----
    Controlled by ``USE_PROXYFIX``. Rate-limit keys use ``request.remote_addr``,
    so the flag must be on behind a reverse proxy and off when clients reach
    the app directly (otherwise they can spoof ``X-Forwarded-For``).
    """
    if app.config.get("USE_PROXYFIX", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)  # type: ignore[method-assign]
