"""APIRouter registration for the question authoring service."""

from __future__ import annotations

from fastapi import APIRouter

from app.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(questions_router, tags=["Questions"])

__all__ = ["api_router"]
