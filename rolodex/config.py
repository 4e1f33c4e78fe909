"""
Runtime configuration and logging setup for Rolodex.

Settings come from environment variables (a `.env` file is loaded first).
Credentials are only ever read from the environment.

File: config.py
Created: 2026-10-12
Last Modified: 2026-10-18
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .database.common import DATA_DIR, LOCAL_DB_PATH

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

PROVIDERS = ("openai", "gemini")
SOURCES = ("jsonl", "addressbook")

# Chatty third-party loggers
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "google.genai")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class RolodexConfig:
    """Configuration for importing and tagging contacts."""

    # Storage
    db_path: Path = field(default_factory=lambda: LOCAL_DB_PATH)

    # Tagging service
    provider: str = "openai"
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # for the selected provider; None = its default
    model: Optional[str] = None  # None = provider default
    request_timeout: float = 60.0
    batch_size: int = 35

    # Contact source
    source: str = "jsonl"
    contacts_file: Path = field(default_factory=lambda: DATA_DIR / "contacts.jsonl")
    addressbook_db: Optional[Path] = None  # None = auto-discover
    page_size: int = 1000

    def __post_init__(self):
        # Ensure paths are Path objects
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)
        if isinstance(self.contacts_file, str):
            self.contacts_file = Path(self.contacts_file)
        if isinstance(self.addressbook_db, str):
            self.addressbook_db = Path(self.addressbook_db)

        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}, got {self.provider!r}")
        if self.source not in SOURCES:
            raise ValueError(f"source must be one of {SOURCES}, got {self.source!r}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "RolodexConfig":
        """Build a config from environment variables (after loading `.env`)."""
        load_dotenv(env_file)

        provider = os.environ.get("ROLODEX_PROVIDER", "openai").strip().lower()
        # TAGGING_BASE_URL and TAGGING_MODEL address the OpenAI-compatible endpoint only
        if provider == "gemini":
            api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("TAGGING_API_KEY")
            base_url = os.environ.get("GEMINI_BASE_URL")
            model = os.environ.get("GEMINI_MODEL")
        else:
            api_key = os.environ.get("TAGGING_API_KEY")
            base_url = os.environ.get("TAGGING_BASE_URL")
            model = os.environ.get("TAGGING_MODEL")

        return cls(
            db_path=Path(os.environ.get("ROLODEX_DB_PATH") or LOCAL_DB_PATH),
            provider=provider,
            api_key=api_key,
            base_url=base_url or None,
            model=model or None,
            request_timeout=_env_float("TAGGING_TIMEOUT", 60.0),
            batch_size=_env_int("ROLODEX_BATCH_SIZE", 35),
            source=os.environ.get("ROLODEX_SOURCE", "jsonl").strip().lower(),
            contacts_file=Path(os.environ.get("ROLODEX_CONTACTS_FILE") or DATA_DIR / "contacts.jsonl"),
            addressbook_db=os.environ.get("ROLODEX_ADDRESSBOOK_DB") or None,
            page_size=_env_int("ROLODEX_PAGE_SIZE", 1000),
        )

    def to_dict(self) -> dict:
        """Convert to dict for display. The API key is redacted."""
        return {
            "db_path": str(self.db_path),
            "provider": self.provider,
            "api_key": "***" if self.api_key else None,
            "base_url": self.base_url,
            "model": self.model,
            "request_timeout": self.request_timeout,
            "batch_size": self.batch_size,
            "source": self.source,
            "contacts_file": str(self.contacts_file),
            "addressbook_db": str(self.addressbook_db) if self.addressbook_db else None,
            "page_size": self.page_size,
        }


def configure_logging(verbose: bool = False, log_dir: Path = LOG_DIR) -> None:
    """Log to a dated file under `log_dir` and to stderr."""
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_dir / f"rolodex_{datetime.now().strftime('%Y-%m-%d')}.log"),
            logging.StreamHandler(),
        ],
        force=True,
    )

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
