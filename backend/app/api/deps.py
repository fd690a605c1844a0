from __future__ import annotations

from fastapi import Header, Request


def get_actor(x_user: str | None = Header(default=None)) -> str | None:
    """Username recorded in the audit trail.

    Authentication happens in front of this service; the caller forwards
    the signed-in username in the ``X-User`` header.
    """
    return x_user


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
