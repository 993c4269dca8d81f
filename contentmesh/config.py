"""Centralised settings for contentmesh.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Site
    # ------------------------------------------------------------------
    site_url: str = field(
        default_factory=lambda: os.environ.get("CONTENTMESH_SITE_URL", "")
    )

    # ------------------------------------------------------------------
    # Worker pool
    # ------------------------------------------------------------------
    workers: int = field(
        default_factory=lambda: int(os.environ.get("CONTENTMESH_WORKERS", "4"))
    )

    # ------------------------------------------------------------------
    # Generation-result parsing
    # ------------------------------------------------------------------
    max_references: int = field(
        default_factory=lambda: int(os.environ.get("CONTENTMESH_MAX_REFERENCES", "8"))
    )
    max_keywords: int = field(
        default_factory=lambda: int(os.environ.get("CONTENTMESH_MAX_KEYWORDS", "40"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("CONTENTMESH_LOG_LEVEL", "INFO")
    )
    log_json: bool = field(
        default_factory=lambda: _env_bool("CONTENTMESH_LOG_JSON", "false")
    )


# Module-level singleton, import this everywhere:
#   from contentmesh.config import settings
settings = Settings()
