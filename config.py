"""
config.py
---------
Environment (and .env) settings for the bot and both database backends,
exposed as typed module constants. Without DATABASE_URL the app runs on the
local fallback database only.
"""

import os
import re

from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── PostgreSQL: primary (online) ──────────────────────────
DATABASE_URL: str = os.getenv("DATABASE_URL") or os.getenv("DB_CONNECTION_STRING", "")

DB_SSL: bool = (
    os.getenv("DB_SSL", "false").strip().lower() == "true"
    or bool(re.search(r"sslmode=require", DATABASE_URL, re.IGNORECASE))
)

# ── PostgreSQL: local fallback ────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "national_crime_records")
DB_USER: str = os.getenv("DB_USER", "postgres")
DB_PASSWORD: str = os.getenv("DB_PASSWORD", "admin")

# ── Pooling ───────────────────────────────────────────────
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "10"))
DB_IDLE_TIMEOUT_MS: int = int(os.getenv("DB_IDLE_TIMEOUT_MS", "30000"))
DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))

# ── Exports ───────────────────────────────────────────────
EXPORT_MAX_ROWS: int = int(os.getenv("EXPORT_MAX_ROWS", "5000"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
