import logging
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./reminders.db"


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _get_log_level(name: str, default: str) -> str:
    value = (os.getenv(name) or default).strip().upper()
    if not isinstance(logging.getLevelName(value), int):
        raise ValueError(
            f"{name} must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {value!r}"
        )
    return value


@dataclass(frozen=True)
class Settings:
    """Service configuration read from the environment."""
    port: int = 3000
    log_level: str = "INFO"

    # Store
    store_backend: str = "firestore"
    database_url: str = DEFAULT_DATABASE_URL
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None

    # Mail
    email_user: Optional[str] = None
    email_password: Optional[str] = None
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587

    # Trigger secrets
    api_key: Optional[str] = None
    cron_secret: Optional[str] = None

    # In-process timer
    scheduler_enabled: bool = False
    check_interval_minutes: int = 5

    @classmethod
    def from_env(cls) -> "Settings":
        private_key = os.getenv("FIREBASE_PRIVATE_KEY")
        if private_key:
            # Keys pasted into .env files carry literal "\n" sequences
            private_key = private_key.replace("\\n", "\n")

        return cls(
            port=_get_int("PORT", 3000),
            log_level=_get_log_level("LOG_LEVEL", "INFO"),
            store_backend=os.getenv("STORE_BACKEND", "firestore").strip().lower(),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID"),
            firebase_client_email=os.getenv("FIREBASE_CLIENT_EMAIL"),
            firebase_private_key=private_key,
            email_user=os.getenv("EMAIL_USER"),
            email_password=os.getenv("EMAIL_PASSWORD"),
            smtp_server=os.getenv("SMTP_SERVER", "smtp.gmail.com"),
            smtp_port=_get_int("SMTP_PORT", 587),
            api_key=os.getenv("API_KEY") or None,
            cron_secret=os.getenv("CRON_SECRET") or None,
            scheduler_enabled=_get_bool("REMINDER_SCHEDULER_ENABLED"),
            check_interval_minutes=_get_int("REMINDER_CHECK_INTERVAL_MINUTES", 5),
        )


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings.from_env()
