"""
SECURITY CONFIG
===============
Centralized settings loaded from environment.
"""

# FLOW:
# - Read env vars once and expose SECURITY_SETTINGS.
# WHY:
# - Centralizes security tuning per environment.
# HOW:
# - Loads the active .env file, then reads env vars into a dict.

from __future__ import annotations

import logging
import os
import secrets

import dotenv


logger = logging.getLogger("security.env")

PLACEHOLDER_SECRETS = {"", "change-this-secret", "REPLACE_WITH_SECURE_RANDOM_SECRET", "AUTO_GENERATE"}


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() == "true"


def get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in {"prod", "production"}:
        return ".env.production"
    return ".env.localhost"


def _env_path() -> str:
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(root, _env_name())


dotenv.load_dotenv(_env_path())

if get_bool("APP_ENV_LOG"):
    logger.info("Active env file: %s", _env_path())

SECURITY_SETTINGS = {
    "DATABASE_URL": get_str("DATABASE_URL", "sqlite:///./roledesk.db"),
    "SESSION_SECRET_KEY": os.getenv("SESSION_SECRET_KEY", ""),
    "SESSION_COOKIE": get_str("SESSION_COOKIE", "roledesk_session"),
    "SESSION_MAX_AGE": get_int("SESSION_MAX_AGE", 60 * 60 * 2),
    "FORCE_HTTPS": get_bool("FORCE_HTTPS", False),
    "LOG_DIR": get_str("LOG_DIR", "logs"),
    "AUDIT_ENABLED": get_bool("AUDIT_ENABLED", True),
    "SEED_PASSWORD": get_str("SEED_PASSWORD", "password"),
}


def feature_enabled(name: str, default: bool = True) -> bool:
    """Look up an ``<NAME>_ENABLED`` toggle, e.g. ``audit`` -> AUDIT_ENABLED."""
    key = f"{name.upper().replace('-', '_')}_ENABLED"
    if key in SECURITY_SETTINGS:
        return bool(SECURITY_SETTINGS[key])
    return get_bool(key, default)


def ensure_session_secret(env_name: str = "SESSION_SECRET_KEY") -> str:
    """Return the session secret, generating a process-local one when unset."""
    primary = os.getenv(env_name) or SECURITY_SETTINGS.get(env_name) or ""
    if primary not in PLACEHOLDER_SECRETS:
        return primary

    secret = secrets.token_urlsafe(64)
    os.environ[env_name] = secret
    SECURITY_SETTINGS[env_name] = secret
    logger.warning(
        "%s is not set; generated a temporary secret. Sessions will not survive a restart.",
        env_name,
    )
    return secret
