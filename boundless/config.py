# boundless/config.py
"""
Central configuration for the Boundless API.

Design goals:
- Always load .env from the repository root in a deterministic way
- Build one explicit Settings object at process start and inject it into the app
- Support switching notification providers (mock / webhook) via NOTIFY_PROVIDER
- Keep secrets out of logs (provide "safe" diagnostics)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


# ---------------------------------------------------------------------
# 1) Repo root discovery + .env loading
# ---------------------------------------------------------------------
def _find_repo_root(start: Path) -> Path:
    """
    Walk upwards until we find a folder that looks like the repository root.
    Markers: .env, pyproject.toml, README.md
    """
    markers = (".env", "pyproject.toml", "README.md")
    for p in [start, *start.parents]:
        if any((p / m).exists() for m in markers):
            return p
    # Fallback: assume boundless/ is directly under repo root
    return start.parents[1]


REPO_ROOT = _find_repo_root(Path(__file__).resolve())

NOTIFY_PROVIDERS = {"mock", "webhook"}


def _env_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_path(key: str) -> Optional[Path]:
    """
    Empty value -> None (in-memory store).
    Relative values are interpreted as relative to REPO_ROOT.
    """
    raw = os.getenv(key, "").strip()
    if not raw:
        return None
    p = Path(raw)
    if not p.is_absolute():
        p = REPO_ROOT / p
    return p.resolve()


# ---------------------------------------------------------------------
# 2) Settings
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    # None keeps every collection in memory
    data_root: Optional[Path] = None

    # Notification delivery
    notify_provider: str = "mock"
    notify_webhook_url: str = ""
    notify_api_token: str = field(default="", repr=False)
    notify_timeout_seconds: float = 10.0
    # Circuit breaker: open after N consecutive failures, retry after reset seconds
    notify_breaker_fail_max: int = 5
    notify_breaker_reset_seconds: float = 30.0


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment. Call once at process start.
    """
    load_dotenv(dotenv_path=env_file or REPO_ROOT / ".env", override=False)

    origins = tuple(
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    )

    settings = Settings(
        app_env=os.getenv("APP_ENV", "development").strip().lower(),
        debug=_env_bool("APP_DEBUG"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        cors_origins=origins or ("*",),
        data_root=_env_path("DATA_ROOT"),
        notify_provider=os.getenv("NOTIFY_PROVIDER", "mock").strip().lower(),
        notify_webhook_url=os.getenv("NOTIFY_WEBHOOK_URL", "").strip(),
        notify_api_token=os.getenv("NOTIFY_API_TOKEN", "").strip(),
        notify_timeout_seconds=float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "10")),
        notify_breaker_fail_max=int(os.getenv("NOTIFY_BREAKER_FAIL_MAX", "5")),
        notify_breaker_reset_seconds=float(os.getenv("NOTIFY_BREAKER_RESET_SECONDS", "30")),
    )
    validate_settings(settings)
    return settings


# ---------------------------------------------------------------------
# 3) Validation helpers
# ---------------------------------------------------------------------
def validate_settings(settings: Settings) -> None:
    """
    - mock: no requirements
    - webhook: requires NOTIFY_WEBHOOK_URL (token kept soft)
    """
    if settings.notify_provider not in NOTIFY_PROVIDERS:
        raise RuntimeError(
            f"Invalid NOTIFY_PROVIDER='{settings.notify_provider}'. Expected mock|webhook."
        )
    if settings.notify_provider == "webhook" and not settings.notify_webhook_url:
        raise RuntimeError("NOTIFY_WEBHOOK_URL is empty (NOTIFY_PROVIDER=webhook).")
    if settings.notify_breaker_fail_max < 1:
        raise RuntimeError("NOTIFY_BREAKER_FAIL_MAX must be at least 1.")


def config_diag_safe(settings: Settings) -> dict:
    """
    Safe diagnostics (no secrets).
    Served by /api/diag/config.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "app_env": settings.app_env,
        "debug": settings.debug,
        "log_level": settings.log_level,
        "cors_origins": list(settings.cors_origins),
        "data_root": str(settings.data_root) if settings.data_root else None,
        "storage": "file" if settings.data_root else "memory",
        "notify_provider": settings.notify_provider,
        "notify_webhook_url": (
            settings.notify_webhook_url if settings.notify_provider == "webhook" else None
        ),
        "notify_timeout_seconds": settings.notify_timeout_seconds,
        "notify_breaker_fail_max": settings.notify_breaker_fail_max,
        "notify_breaker_reset_seconds": settings.notify_breaker_reset_seconds,
        "has_notify_token": bool(settings.notify_api_token),
    }
