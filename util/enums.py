# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    INVALID_CURSOR = ErrorInfo("Invalid cursor", status.HTTP_400_BAD_REQUEST)
    INVALID_TIME_WINDOW = ErrorInfo(
        "Custom time window start is after its end", status.HTTP_400_BAD_REQUEST
    )
