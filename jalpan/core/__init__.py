from jalpan.core.config import settings
from jalpan.core.logging import get_logger

__all__ = [
    "settings",
    "get_logger"
]
