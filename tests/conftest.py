import os

# Settings are read at import time; give them something before any app import.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("DATABASE_URL", "postgresql://localhost/items")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:3000")

import pytest

from core.search_config import SearchConfig
from model.search import Cursor

from fakes import T0


@pytest.fixture
def cursor() -> Cursor:
    return Cursor(offset=0, time=T0)


@pytest.fixture
def config() -> SearchConfig:
    return SearchConfig(index="item", model_id=None, page_size=21)


@pytest.fixture
def neural_config() -> SearchConfig:
    return SearchConfig(index="item", model_id="model-abc", page_size=21)
