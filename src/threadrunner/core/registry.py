"""
Signal registry

Maps each task id to its CompletionSignal. The registry is built in full by
the coordinator before any executor starts and never changes shape after
that, so lookups need no locking.
"""

import logging
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional

from threadrunner.core.errors import DuplicateTaskError
from threadrunner.core.models import TaskRecord
from threadrunner.core.signal import CompletionSignal

logger = logging.getLogger(__name__)


class SignalRegistry(Mapping):
    """Read-only mapping of task id -> CompletionSignal"""

    def __init__(self, signals: Dict[str, CompletionSignal]):
        self._signals = dict(signals)

    @classmethod
    def from_records(cls, records: Iterable[TaskRecord]) -> "SignalRegistry":
        """Create one unset signal per record, rejecting duplicate ids"""
        signals: Dict[str, CompletionSignal] = {}
        duplicates = []
        for record in records:
            if record.task_id in signals:
                duplicates.append(record.task_id)
                continue
            signals[record.task_id] = CompletionSignal(record.task_id)

        if duplicates:
            raise DuplicateTaskError(duplicates)

        logger.debug(f"Signal registry built with {len(signals)} signal(s)")
        return cls(signals)

    def lookup(self, task_id: str) -> Optional[CompletionSignal]:
        return self._signals.get(task_id)

    def pending(self) -> Iterable[str]:
        """Task ids whose signal has not fired yet"""
        return [task_id for task_id, signal in self._signals.items() if not signal.is_set]

    def __getitem__(self, task_id: str) -> CompletionSignal:
        return self._signals[task_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._signals)

    def __len__(self) -> int:
        return len(self._signals)

    def __repr__(self) -> str:
        return f"SignalRegistry({len(self._signals)} signals, {len(self.pending())} pending)"
