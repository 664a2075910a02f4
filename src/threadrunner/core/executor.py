"""
Task Executor for Threadrunner

Drives a single task through its lifecycle:

    PENDING -> WAITING (optional) -> RUNNING -> SUCCEEDED | FAILED

A task that names a blocking task waits on that task's completion signal
before running. When the blocking task failed, this task fails too without
running, and still fires its own signal so tasks further down the chain are
released. Whatever happens, the executor fires its own signal exactly once and
never raises a task fault to its caller.
"""

import asyncio
import logging
from typing import Optional

from threadrunner.core.errors import ErrorCode, PredecessorFailedError, TaskExecutionError
from threadrunner.core.models import TaskOutcome, TaskRecord, TaskState
from threadrunner.core.registry import SignalRegistry
from threadrunner.core.reporter import NullReporter, ProgressReporter, ReportLevel
from threadrunner.core.signal import CompletionSignal
from threadrunner.core.work import SimulatedWork, WorkFunction

logger = logging.getLogger(__name__)

PREDECESSOR_NOT_FOUND = "predecessor not found"


class TaskExecutor:
    """Runs one TaskRecord against a shared SignalRegistry"""

    def __init__(
        self,
        record: TaskRecord,
        registry: SignalRegistry,
        reporter: Optional[ProgressReporter] = None,
        work: Optional[WorkFunction] = None,
    ):
        self.record = record
        self.registry = registry
        self.reporter = reporter or NullReporter()
        self.work = work or SimulatedWork()
        self.outcome = TaskOutcome(task_id=record.task_id)
        self.signal: CompletionSignal = registry[record.task_id]

    @property
    def task_id(self) -> str:
        return self.record.task_id

    @property
    def state(self) -> TaskState:
        return self.outcome.state

    async def run(self) -> TaskOutcome:
        """Run the task to a terminal state and return its outcome"""
        try:
            predecessor = self._find_predecessor()
            if predecessor is not None:
                self._transition(TaskState.WAITING)
                self._report(
                    ReportLevel.INFO,
                    f"Task {self.task_id} waiting for {predecessor.task_id} to complete...",
                )
                result = await predecessor.wait()
                if result.failed:
                    self._cascade_failure(predecessor.task_id, result.cause)
                    return self.outcome

            await self._execute()

        except asyncio.CancelledError:
            # Not a task fault, but waiters must still be released
            self._fail(TaskExecutionError(self.task_id, asyncio.CancelledError("task cancelled")))
            raise
        except Exception as e:
            self._fail(TaskExecutionError(self.task_id, e))
            self._report(ReportLevel.ERROR, f"Task {self.task_id} ERROR: {e}")

        return self.outcome

    def _find_predecessor(self) -> Optional[CompletionSignal]:
        blocking_task = self.record.blocking_task
        if blocking_task is None:
            return None

        signal = self.registry.lookup(blocking_task)
        if signal is None:
            self._report(
                ReportLevel.WARNING,
                f"Warning: Blocking task {blocking_task} not found for {self.task_id}",
            )
            self.outcome.warnings.append(f"{PREDECESSOR_NOT_FOUND}: {blocking_task}")
            logger.warning(
                f"[{ErrorCode.PREDECESSOR_NOT_FOUND.value}] Task {self.task_id} blocks on "
                f"unknown task {blocking_task}; starting unblocked"
            )
        return signal

    async def _execute(self) -> None:
        loop = asyncio.get_running_loop()

        self._transition(TaskState.RUNNING)
        self.outcome.started_at = loop.time()
        self._report(ReportLevel.INFO, f"Task {self.task_id} Starting")

        await self.work(self.record)

        self.outcome.finished_at = loop.time()
        self._transition(TaskState.SUCCEEDED)
        self._report(ReportLevel.INFO, f"Task {self.task_id} Completed")
        self.signal.set_success()

    def _cascade_failure(self, predecessor_id: str, cause: BaseException) -> None:
        error = PredecessorFailedError(self.task_id, predecessor_id, cause)
        self._fail(error)
        self._report(ReportLevel.ERROR, f"Task {self.task_id} skipped: {error}")

    def _fail(self, cause: BaseException) -> None:
        if self.outcome.started_at is not None and self.outcome.finished_at is None:
            self.outcome.finished_at = asyncio.get_running_loop().time()

        self.outcome.cause = cause
        self._transition(TaskState.FAILED)
        if not self.signal.is_set:
            self.signal.set_failure(cause)

    def _report(self, level: ReportLevel, message: str) -> None:
        # Progress output must never stop a task from reaching a terminal state
        try:
            self.reporter.emit(level, message)
        except Exception as e:
            logger.warning(f"Task {self.task_id}: progress report failed: {e!r}")

    def _transition(self, state: TaskState) -> None:
        logger.debug(f"Task {self.task_id}: {self.outcome.state.value} -> {state.value}")
        self.outcome.state = state

    def __repr__(self) -> str:
        return f"TaskExecutor({self.task_id!r}, state={self.state.value})"
