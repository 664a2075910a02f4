"""
Work performed by a running task

A task's work is an async callable taking its TaskRecord. The default
SimulatedWork sleeps for the task's duration without blocking the event loop;
FaultInjectingWork makes selected tasks fail, to exercise failure cascades.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from threadrunner.core.models import TaskRecord

logger = logging.getLogger(__name__)

WorkFunction = Callable[[TaskRecord], Awaitable[None]]


class SimulatedFaultError(RuntimeError):
    """Raised by FaultInjectingWork for tasks selected to fail"""


class SimulatedWork:
    """Sleep for the task's declared duration, scaled by ``time_scale``"""

    def __init__(self, time_scale: float = 1.0):
        if time_scale < 0:
            raise ValueError("time_scale must be non-negative")
        self.time_scale = time_scale

    async def __call__(self, record: TaskRecord) -> None:
        seconds = record.duration * self.time_scale
        logger.debug(f"Task {record.task_id} sleeping for {seconds:.3f}s")
        await asyncio.sleep(seconds)


class FaultInjectingWork:
    """Wraps another work function and fails the named tasks"""

    def __init__(
        self,
        failing_tasks: Iterable[str],
        inner: Optional[WorkFunction] = None,
    ):
        self.failing_tasks = set(failing_tasks)
        self.inner = inner or SimulatedWork()

    async def __call__(self, record: TaskRecord) -> None:
        # Failing tasks still do their work, so the failure lands after the duration
        await self.inner(record)
        if record.task_id in self.failing_tasks:
            raise SimulatedFaultError(f"Injected failure in task {record.task_id}")
