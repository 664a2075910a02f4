"""
Core execution engine: task records, completion signals, executors and the coordinator
"""

from threadrunner.core.coordinator import Coordinator, run_tasks
from threadrunner.core.errors import (
    ErrorCode,
    ThreadRunnerError,
    TaskExecutionError,
    PredecessorFailedError,
    SignalAlreadySetError,
    DuplicateTaskError,
    TaskDefinitionError,
    TaskFileNotFoundError,
    ConfigurationError,
)
from threadrunner.core.executor import TaskExecutor
from threadrunner.core.models import RunReport, TaskOutcome, TaskRecord, TaskState
from threadrunner.core.registry import SignalRegistry
from threadrunner.core.reporter import ConsoleReporter, MemoryReporter, NullReporter, ProgressReporter
from threadrunner.core.signal import CompletionSignal, SignalResult
from threadrunner.core.work import FaultInjectingWork, SimulatedFaultError, SimulatedWork

__all__ = [
    "Coordinator",
    "run_tasks",
    "ErrorCode",
    "ThreadRunnerError",
    "TaskExecutionError",
    "PredecessorFailedError",
    "SignalAlreadySetError",
    "DuplicateTaskError",
    "TaskDefinitionError",
    "TaskFileNotFoundError",
    "ConfigurationError",
    "TaskExecutor",
    "RunReport",
    "TaskOutcome",
    "TaskRecord",
    "TaskState",
    "SignalRegistry",
    "ConsoleReporter",
    "MemoryReporter",
    "NullReporter",
    "ProgressReporter",
    "CompletionSignal",
    "SignalResult",
    "FaultInjectingWork",
    "SimulatedFaultError",
    "SimulatedWork",
]
