from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from app.core.errors import ConfigurationError


# Load backend/.env if it exists so local SMTP credentials and NOTIFY_EMAIL
# are available without exporting them by hand.
BASE_DIR = Path(__file__).resolve().parents[2]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _int_env(environ: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(environ.get(key, str(default)))
    except ValueError:
        return default


def _float_env(environ: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(environ.get(key, str(default)))
    except ValueError:
        return default


def _bool_env(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _optional_env(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key, "").strip()
    return value or None


@dataclass(frozen=True)
class SmtpConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    secure: bool = False
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    timeout: float = 30.0

    def describe(self) -> dict:
        """Configuration summary that is safe to log."""
        return {
            "has_host": bool(self.host) and self.host != "HOST",
            "has_user": bool(self.user),
            "has_pass": bool(self.password),
            "port": self.port,
            "secure": self.secure,
        }


@dataclass(frozen=True)
class Settings:
    PROJECT_NAME: str = "Swayog Energy API"
    API_V1_STR: str = "/api"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./swayog.db"

    SITE_NAME: str = "Swayog Energy"
    NOTIFY_EMAIL: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    SMTP: SmtpConfig = field(default_factory=SmtpConfig)

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        port = _int_env(env, "EMAIL_PORT", 587)
        smtp = SmtpConfig(
            host=env.get("EMAIL_HOST", "smtp.gmail.com").strip(),
            port=port,
            secure=_bool_env(env, "EMAIL_SECURE", port == 465),
            user=_optional_env(env, "EMAIL_USER"),
            password=_optional_env(env, "EMAIL_PASS"),
            timeout=_float_env(env, "EMAIL_TIMEOUT", 30.0),
        )

        return cls(
            PROJECT_NAME=env.get("PROJECT_NAME", cls.PROJECT_NAME),
            ENVIRONMENT=env.get("ENVIRONMENT", cls.ENVIRONMENT),
            LOG_LEVEL=env.get("LOG_LEVEL", cls.LOG_LEVEL),
            DATABASE_URL=env.get("DATABASE_URL", cls.DATABASE_URL),
            SITE_NAME=env.get("SITE_NAME", cls.SITE_NAME),
            NOTIFY_EMAIL=_optional_env(env, "NOTIFY_EMAIL"),
            EMAIL_FROM=_optional_env(env, "EMAIL_FROM"),
            SMTP=smtp,
        )


def get_receiver_email(settings: Settings) -> str | ConfigurationError:
    # NOTIFY_EMAIL is the only source for the operator mailbox.
    if not settings.NOTIFY_EMAIL:
        return ConfigurationError(
            message="Email service is not configured. Please contact the administrator.",
            setting="NOTIFY_EMAIL",
        )
    return settings.NOTIFY_EMAIL


def get_sender_email(settings: Settings) -> str | ConfigurationError:
    sender = settings.EMAIL_FROM or settings.SMTP.user
    if not sender:
        return ConfigurationError(
            message="Email service is not configured. Please contact the administrator.",
            setting="EMAIL_FROM",
        )
    return sender


def get_smtp_config(settings: Settings) -> SmtpConfig:
    return settings.SMTP
