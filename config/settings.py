# config/settings.py
import os
import sys
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    DATABASE_URL: str = Field(..., validation_alias="DATABASE_URL")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(default=60, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # Search engine
    OPENSEARCH_URL: str = Field(
        default="http://localhost:9200", validation_alias="OPENSEARCH_URL"
    )
    OPENSEARCH_USERNAME: Optional[str] = Field(
        default=None, validation_alias="OPENSEARCH_USERNAME"
    )
    OPENSEARCH_PASSWORD: Optional[str] = Field(
        default=None, validation_alias="OPENSEARCH_PASSWORD"
    )
    OPENSEARCH_INDEX: str = Field(default="item", validation_alias="OPENSEARCH_INDEX")
    # Setting a model id switches scoring to neural / hybrid queries.
    OPENSEARCH_MODEL_ID: Optional[str] = Field(
        default=None, validation_alias="OPENSEARCH_MODEL_ID"
    )
    OPENSEARCH_SEARCH_PIPELINE: str = Field(
        default="nlp-search-pipeline", validation_alias="OPENSEARCH_SEARCH_PIPELINE"
    )
    OPENSEARCH_TIMEOUT_SECONDS: float = Field(
        default=10.0, validation_alias="OPENSEARCH_TIMEOUT_SECONDS"
    )

    # Paging
    PAGE_SIZE: int = Field(default=21, validation_alias="PAGE_SIZE")

    # Store of record pool
    DB_POOL_MIN: int = Field(default=1, validation_alias="DB_POOL_MIN")
    DB_POOL_MAX: int = Field(default=10, validation_alias="DB_POOL_MAX")

    # Logging knobs
    LOGGER_NAME: str = "item-search"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
