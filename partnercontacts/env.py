import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/partner_contacts.db"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    encryption_key: Optional[str] = None
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def load_env(env_path: Optional[Path] = None) -> None:
    """Load .env from the project root if present.
    Variables already set in the environment win.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def load_settings() -> Settings:
    """Read settings from the environment (after loading .env)."""
    load_env()
    return Settings(
        database_url=os.environ.get("PARTNER_CONTACTS_DATABASE_URL", DEFAULT_DATABASE_URL),
        encryption_key=os.environ.get("PARTNER_CONTACTS_ENCRYPTION_KEY") or None,
        log_level=os.environ.get("PARTNER_CONTACTS_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(os.environ.get("PARTNER_CONTACTS_LOG_DIR", "logs")),
    )
