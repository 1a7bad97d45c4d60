"""Configuration utilities for the question authoring service.

This module loads application configuration with the following rules:
- Primary source: `questions_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG_FILE = Path("questions_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _as_bool(text: object) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str
    lock_timeout_seconds: float = Field(default=5.0, gt=0)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class MigrationsConfig(BaseModel):
    auto_apply: bool = Field(default=True)
    # None selects migrations/ or sqlite_migrations/ from the engine dialect
    directory: Optional[str] = Field(default=None)


class ReorderConfig(BaseModel):
    # When true, a reorder must list exactly the survey's question ids
    strict: bool = Field(default=False)


class ListingConfig(BaseModel):
    per_page: int = Field(default=15, ge=1, le=500)


class AppConfig(BaseModel):
    database: DatabaseConfig
    migrations: MigrationsConfig
    reorder: ReorderConfig
    listing: ListingConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) questions_config.json at project root
    4) Defaults suitable for local development
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DSN
    )
    lock_timeout_text = (
        _env("DATABASE_LOCK_TIMEOUT_SECONDS")
        or _read_config_file("database.lock_timeout_seconds")
        or _base("database.lock_timeout_seconds", "5")
    )

    auto_apply_text = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("migrations.auto_apply") or _base("migrations.auto_apply", "true")
    migrations_dir = _env("MIGRATIONS_DIR") or _read_config_file("migrations.directory") or _base("migrations.directory")

    strict_text = _env("REORDER_STRICT") or _read_config_file("reorder.strict") or _base("reorder.strict", "false")
    per_page_text = _env("QUESTIONS_PER_PAGE") or _read_config_file("listing.per_page") or _base("listing.per_page", "15")

    try:
        return AppConfig(
            database=DatabaseConfig(dsn=dsn, lock_timeout_seconds=float(str(lock_timeout_text).strip())),
            migrations=MigrationsConfig(auto_apply=_as_bool(auto_apply_text), directory=migrations_dir),
            reorder=ReorderConfig(strict=_as_bool(strict_text)),
            listing=ListingConfig(per_page=int(str(per_page_text).strip())),
        )
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "MigrationsConfig",
    "ReorderConfig",
    "ListingConfig",
    "load_config",
]
