"""Log Entry Entity - Domain Layer"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogCategory(str, Enum):
    """Request log entry categories"""

    INFO = "info"
    REQUEST = "request"
    RESPONSE = "response"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class LogEntry:
    """A single diagnostics record. Never mutated after creation."""

    timestamp: datetime
    category: LogCategory
    message: str

    def format(self) -> str:
        """Render as ``[CATEGORY] timestamp: message``."""
        stamp = self.timestamp.strftime(TIMESTAMP_FORMAT)
        return f"[{self.category.value.upper()}] {stamp}: {self.message}"
