# venue_booking/config.py

"""
Application configuration with environment variable overrides.

Values are read once at import time (after loading a local ``.env``) and
exposed through the ``settings`` singleton.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _env_flag(env_var: str, default: str = "false") -> bool:
    return os.getenv(env_var, default).strip().lower() in ("1", "true", "yes", "on")


def _secret_key() -> str:
    secret = os.getenv("SECRET_KEY")
    if not secret:
        import warnings

        warnings.warn(
            "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION",
            RuntimeWarning,
            stacklevel=2,
        )
        secret = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - dev fallback only
    return secret


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection settings."""

    url: str = os.getenv("DATABASE_URL", "sqlite:///./venue_booking.db")
    echo: bool = _env_flag("DB_ECHO")


@dataclass(frozen=True)
class AuthConfig:
    """Admin token and password hashing settings."""

    secret_key: str = field(default_factory=_secret_key)
    algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = _safe_int("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
    bcrypt_rounds: int = _safe_int("BCRYPT_ROUNDS", "12")


@dataclass(frozen=True)
class PolicyDefaults:
    """Booking policy values given to newly created venues."""

    booking_advance_hours: int = _safe_int("DEFAULT_BOOKING_ADVANCE_HOURS", "0")
    cancellation_hours: int = _safe_int("DEFAULT_CANCELLATION_HOURS", "24")
    booking_advance_days: int = _safe_int("DEFAULT_BOOKING_ADVANCE_DAYS", "90")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    policy: PolicyDefaults = field(default_factory=PolicyDefaults)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.auth.access_token_expire_minutes < 1:
        raise ValueError(
            "ACCESS_TOKEN_EXPIRE_MINUTES must be >= 1, "
            f"got {config.auth.access_token_expire_minutes}"
        )
    # bcrypt accepts cost factors 4..31
    if not 4 <= config.auth.bcrypt_rounds <= 31:
        raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 31, got {config.auth.bcrypt_rounds}")

    for name, value in [
        ("DEFAULT_BOOKING_ADVANCE_HOURS", config.policy.booking_advance_hours),
        ("DEFAULT_CANCELLATION_HOURS", config.policy.cancellation_hours),
        ("DEFAULT_BOOKING_ADVANCE_DAYS", config.policy.booking_advance_days),
    ]:
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


def configure_logging(level: str) -> None:
    """Install the root handler; every record carries the current request id."""
    from venue_booking.logging_context import RequestIdFilter

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    configure_logging(config.log_level)
    logger.info("Configuration loaded (database=%s)", config.database.url.split("://", 1)[0])
    return config


# Singleton instance
settings = load_config()
