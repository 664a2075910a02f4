"""
Progress reporting for task runs

Executors running concurrently all report through one reporter. Each message
is written under a lock and stamped with the local wall-clock time, so lines
from different tasks never interleave.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from rich.console import Console


class ReportLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ReportEntry:
    """A single reported message"""
    timestamp: datetime
    level: ReportLevel
    message: str

    def format(self, with_timestamp: bool = True) -> str:
        if not with_timestamp:
            return self.message
        return f"[{self.timestamp.strftime('%H:%M:%S.%f')[:-3]}] {self.message}"


class ProgressReporter:
    """
    Base reporter.

    Subclasses implement ``_write``; the base class handles timestamping and
    mutual exclusion.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def info(self, message: str) -> None:
        self.emit(ReportLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.emit(ReportLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.emit(ReportLevel.ERROR, message)

    def emit(self, level: ReportLevel, message: str) -> None:
        entry = ReportEntry(timestamp=datetime.now(), level=level, message=message)
        with self._lock:
            self._write(entry)

    def _write(self, entry: ReportEntry) -> None:
        raise NotImplementedError


class ConsoleReporter(ProgressReporter):
    """Writes timestamped lines to a rich console"""

    _STYLES = {
        ReportLevel.INFO: None,
        ReportLevel.WARNING: "yellow",
        ReportLevel.ERROR: "bold red",
    }

    def __init__(self, console: Optional[Console] = None, timestamps: bool = True):
        super().__init__()
        self.console = console or Console(highlight=False)
        self.timestamps = timestamps

    def _write(self, entry: ReportEntry) -> None:
        self.console.print(
            entry.format(self.timestamps),
            style=self._STYLES[entry.level],
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


class MemoryReporter(ProgressReporter):
    """Keeps reported entries in memory, for embedding and inspection"""

    def __init__(self):
        super().__init__()
        self.entries: List[ReportEntry] = []

    def _write(self, entry: ReportEntry) -> None:
        self.entries.append(entry)

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]

    def messages_at(self, level: ReportLevel) -> List[str]:
        return [entry.message for entry in self.entries if entry.level == level]


class NullReporter(ProgressReporter):
    """Discards all messages"""

    def _write(self, entry: ReportEntry) -> None:
        pass
