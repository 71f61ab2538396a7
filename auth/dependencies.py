"""
FastAPI dependencies for authentication.
"""

from __future__ import annotations

from fastapi import Request

from auth.context import AuthContext


def get_auth_context(request: Request) -> AuthContext:
    """Return the context built by the startup hook (``app.state.auth_context``)."""
    return request.app.state.auth_context
