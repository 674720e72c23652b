"""Settings shared by every environment (values come from the environment / .env)."""

import os


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ponto_db"),
}

# Apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _bool("AUTO_INIT_DB", "0")

# Tangerino time clock (read-only)
TANGERINO_API_URL = os.getenv("TANGERINO_API_URL", "https://apis.tangerino.com.br")
TANGERINO_API_TOKEN = os.getenv("TANGERINO_API_TOKEN", "")
TANGERINO_COMPANY_ID = os.getenv("TANGERINO_COMPANY_ID", "")
TANGERINO_PAGE_SIZE = int(os.getenv("TANGERINO_PAGE_SIZE", "100"))
TANGERINO_MAX_PAGES = int(os.getenv("TANGERINO_MAX_PAGES", "50"))
TANGERINO_TIMEOUT_SECONDS = float(os.getenv("TANGERINO_TIMEOUT_SECONDS", "30"))

# Chat webhook for notifications; empty means notifications are only logged.
NOTIFY_WEBHOOK_URL = os.getenv("NOTIFY_WEBHOOK_URL", "")

# Work schedule
ENTRY_TIME = os.getenv("ENTRY_TIME", "08:00")
EXIT_TIME = os.getenv("EXIT_TIME", "18:00")
SATURDAY_EXIT_TIME = os.getenv("SATURDAY_EXIT_TIME", "12:00")
LUNCH_DURATION_MINUTES = int(os.getenv("LUNCH_DURATION_MINUTES", "120"))
TOLERANCE_MINUTES = int(os.getenv("TOLERANCE_MINUTES", "10"))
ALERT_THRESHOLD_MINUTES = int(os.getenv("ALERT_THRESHOLD_MINUTES", "11"))
EXPECTED_WEEKDAY_MINUTES = int(os.getenv("EXPECTED_WEEKDAY_MINUTES", "480"))
EXPECTED_SATURDAY_MINUTES = int(os.getenv("EXPECTED_SATURDAY_MINUTES", "240"))
DEFAULT_APPRENTICE_MINUTES = int(os.getenv("DEFAULT_APPRENTICE_MINUTES", "240"))
LATE_START_CUTOFF = os.getenv("LATE_START_CUTOFF", "10:00")
LATE_PUNCH_CUTOFF = os.getenv("LATE_PUNCH_CUTOFF", "17:00")
REMINDER_LEAD_MINUTES = int(os.getenv("REMINDER_LEAD_MINUTES", "10"))
SATURDAY_EXIT_REMINDER_FOR_APPRENTICES = _bool("SATURDAY_EXIT_REMINDER_FOR_APPRENTICES", "1")

CACHE_TTL_SECONDS = {
    "byLeader": int(os.getenv("CACHE_TTL_BY_LEADER", "600")),
    "byDateRange": int(os.getenv("CACHE_TTL_BY_DATE_RANGE", "120")),
    "justifications": int(os.getenv("CACHE_TTL_JUSTIFICATIONS", "120")),
}

INGEST_MAX_WORKERS = int(os.getenv("INGEST_MAX_WORKERS", "1"))
SCHEDULER_ENABLED = _bool("SCHEDULER_ENABLED", "0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False
