import os
from dotenv import load_dotenv

load_dotenv()


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Use 'postgresql+asyncpg' driver
    db_user = os.getenv("DB_USER")
    db_pass = os.getenv("DB_PASS")
    db_host = os.getenv("PG_HOST")
    db_name = os.getenv("DB_NAME")
    return f"postgresql+asyncpg://{db_user}:{db_pass}@{db_host}/{db_name}"


def _csv(value: str):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    DATABASE_URL = _build_database_url()
    DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

    # Deduplication defaults (1 minute window, anchored at the group's first record)
    DEDUP_WINDOW_MS = int(os.getenv("DEDUP_WINDOW_MS", "60000"))
    DEDUP_WINDOW_POLICY = os.getenv("DEDUP_WINDOW_POLICY", "anchor").lower()
    DEDUP_MATCH_FIELDS = _csv(os.getenv("DEDUP_MATCH_FIELDS", "gas_type,kgs,payment_method"))
    DEDUP_FUZZY_FIELD = os.getenv("DEDUP_FUZZY_FIELD") or None
    DEDUP_FUZZY_THRESHOLD = int(os.getenv("DEDUP_FUZZY_THRESHOLD", "80"))

    # Pre-insert validation only looks this far back
    VALIDATE_LOOKBACK_MS = int(os.getenv("VALIDATE_LOOKBACK_MS", "120000"))

    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Config()
