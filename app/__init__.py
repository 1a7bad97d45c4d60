"""FastAPI application package for the survey question authoring service.

Exposes the application factory. Cross-cutting wiring (request ids,
problem+json handlers, migrations) lives in `app/main.py`, business logic in
`app/logic/` and route handlers in `app/routes/`.
"""

from __future__ import annotations

from app.main import create_app

__all__ = ["create_app"]
