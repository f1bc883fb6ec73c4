"""Request Log Domain Service - Domain Layer"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Tuple, Union

from ..entity.log_entry import LogCategory, LogEntry

logger = logging.getLogger(__name__)

_LEVELS = {
    LogCategory.INFO: logging.INFO,
    LogCategory.REQUEST: logging.DEBUG,
    LogCategory.RESPONSE: logging.DEBUG,
    LogCategory.WARNING: logging.WARNING,
    LogCategory.ERROR: logging.ERROR,
}


class RequestLog:
    """Append-only, time-ordered diagnostics record

    Insertion order is display order. Entries are only removed by ``clear()``.
    There is no size cap; the log lives for one session.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """Initialize the request log

        Args:
            clock: Timestamp source (injectable for tests)
        """
        self._clock = clock
        self._entries: List[LogEntry] = []

    def append(self, category: Union[LogCategory, str], message: str) -> LogEntry:
        """Append an entry and mirror it to the standard logger"""
        entry = LogEntry(
            timestamp=self._clock(),
            category=LogCategory(category),
            message=message,
        )
        self._entries.append(entry)
        logger.log(_LEVELS[entry.category], "[%s] %s", entry.category.value, message)
        return entry

    def all(self) -> Tuple[LogEntry, ...]:
        """Snapshot of every entry in insertion order"""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def formatted(self) -> str:
        """Render every entry, separated by a blank line"""
        return "\n\n".join(entry.format() for entry in self._entries)

    def export(self, path: Union[str, Path]) -> Path:
        """Write ``formatted()`` to a UTF-8 text file

        Raises:
            OSError: the file could not be written
        """
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.formatted(), encoding="utf-8")
        return path

    def __len__(self) -> int:
        return len(self._entries)
