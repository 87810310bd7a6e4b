"""
config.py — Runtime settings, read from the environment (and a project .env).

Every knob the dashboard needs lives on `Settings`; nothing else in the
package reads os.environ directly.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# BASE_DIR points to the project root (parent of sales_dashboard/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

MIB = 1024 * 1024

# ── Tables & buckets ─────────────────────────────────────────────────────────
SALES_TABLE = "sales"
FILES_TABLE = "files"
PROFILES_TABLE = "profiles"

# ── Upload policy ────────────────────────────────────────────────────────────
IMPORT_EXTENSIONS = ("csv", "xlsx")
MAX_FILE_SIZE = 50 * MIB
MAX_AVATAR_SIZE = 5 * MIB
CACHE_CONTROL = "3600"

# ── File categories (closed set; "All" is a filter value only) ──────────────
CATEGORY_ALL = "All"
CATEGORY_DEFAULT = "Other"
FILE_CATEGORIES = [
    CATEGORY_ALL,
    "Sales Report",
    "Customer Data",
    "Financial Document",
    "Product Material",
    CATEGORY_DEFAULT,
]

ROLES = ("user", "admin")
DEFAULT_ROLE = "user"


def _env_bool(name, default):
    val = os.environ.get(name)
    if val is None or val == "":
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_key: str = ""
    secret_key: str = "change-me"
    backend_timeout: float = 10.0
    realtime_enabled: bool = False
    change_poll_ms: int = 5000
    reports_bucket: str = "uploads"
    user_files_bucket: str = "user-files"
    avatar_bucket: str = "profiles"
    max_file_size: int = MAX_FILE_SIZE
    max_avatar_size: int = MAX_AVATAR_SIZE
    log_level: str = "INFO"
    port: int = 8070

    @property
    def backend_configured(self):
        """True when Supabase credentials are present and not the template placeholder."""
        return bool(self.supabase_url and self.supabase_key
                    and "YOUR_PROJECT" not in self.supabase_url)


def load_settings(env_file=None):
    """Build Settings from the environment after loading the project .env."""
    load_dotenv(env_file or os.path.join(BASE_DIR, ".env"))
    env = os.environ.get
    return Settings(
        supabase_url=env("SUPABASE_URL", ""),
        supabase_key=env("SUPABASE_KEY", ""),
        secret_key=env("SECRET_KEY", "change-me"),
        backend_timeout=float(env("BACKEND_TIMEOUT", "10")),
        realtime_enabled=_env_bool("REALTIME_ENABLED", False),
        change_poll_ms=int(env("CHANGE_POLL_MS", "5000")),
        reports_bucket=env("REPORTS_BUCKET", "uploads"),
        user_files_bucket=env("USER_FILES_BUCKET", "user-files"),
        avatar_bucket=env("AVATAR_BUCKET", "profiles"),
        max_file_size=int(env("MAX_FILE_SIZE", str(MAX_FILE_SIZE))),
        max_avatar_size=int(env("MAX_AVATAR_SIZE", str(MAX_AVATAR_SIZE))),
        log_level=env("LOG_LEVEL", "INFO"),
        port=int(env("PORT", "8070")),
    )


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
