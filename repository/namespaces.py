# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "item-search"

RATE_LIMIT: Final[str] = f"{ROOT}:ratelimit"
