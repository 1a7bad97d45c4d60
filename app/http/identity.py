"""Caller identity dependency.

Authentication happens upstream (gateway or session layer); it forwards the
authenticated user's numeric id in ``X-User-Id``. Requests without a usable
id are rejected with 401 before any survey lookup.
"""

from __future__ import annotations

from fastapi import Header, HTTPException


def current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> int:
    token = (x_user_id or "").strip()
    if not token.isdigit() or int(token) <= 0:
        raise HTTPException(
            status_code=401,
            detail={
                "title": "Unauthorized",
                "status": 401,
                "detail": "authenticated user id required",
                "code": "AUTH_USER_REQUIRED",
            },
        )
    return int(token)


__all__ = ["current_user_id"]
