"""Threadrunner - concurrent execution of timed tasks gated on a single blocking task"""

__version__ = "0.1.0"

from threadrunner.core.coordinator import Coordinator, run_tasks
from threadrunner.core.models import RunReport, TaskOutcome, TaskRecord, TaskState
from threadrunner.core.signal import CompletionSignal, SignalResult
from threadrunner.core.registry import SignalRegistry
from threadrunner.core.executor import TaskExecutor

__all__ = [
    "Coordinator",
    "run_tasks",
    "RunReport",
    "TaskOutcome",
    "TaskRecord",
    "TaskState",
    "CompletionSignal",
    "SignalResult",
    "SignalRegistry",
    "TaskExecutor",
]
