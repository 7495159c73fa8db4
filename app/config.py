import os
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables from .env file (if present)
load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./facility_booking.db")
        self.skip_db_init = _flag("SKIP_DB_INIT")
        self.enforce_max_duration = _flag("ENFORCE_MAX_DURATION")
        self.default_page_size = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Optional account seeded on startup
        self.admin_user_id = os.getenv("ADMIN_USER_ID")
        self.admin_password = os.getenv("ADMIN_PASSWORD")
        self.admin_email = os.getenv("ADMIN_EMAIL", "")


@lru_cache
def get_settings() -> Settings:
    return Settings()
