"""Runtime configuration for the Chirpy service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .database import resolve_database_path


class Platform(str, Enum):
    """Deployment mode. Only ``DEV`` allows destructive admin operations."""

    DEV = "dev"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Platform":
        if value is not None and value.strip() == cls.DEV.value:
            return cls.DEV
        return cls.PRODUCTION


@dataclass(frozen=True)
class Settings:
    """Settings resolved once at startup and handed to the application factory."""

    database_path: Path
    platform: Platform = Platform.PRODUCTION
    static_dir: Path = Path(".")

    @property
    def allows_reset(self) -> bool:
        return self.platform is Platform.DEV


def resolve_static_dir(env_value: Optional[str]) -> Path:
    if env_value and env_value.strip():
        return Path(env_value.strip()).expanduser().resolve(strict=False)
    return Path.cwd()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ``.

    When ``environ`` is omitted a ``.env`` file in the working directory is
    loaded first; variables already present in the process environment win.
    """

    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    return Settings(
        database_path=resolve_database_path(environ.get("DB_URL")),
        platform=Platform.parse(environ.get("PLATFORM")),
        static_dir=resolve_static_dir(environ.get("CHIRPY_STATIC_DIR")),
    )


__all__ = ["Platform", "Settings", "load_settings", "resolve_static_dir"]
