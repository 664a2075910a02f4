"""
Coordinator for Threadrunner

Builds the signal registry for a set of task records, launches one executor
per record concurrently and waits on all of them before reporting the elapsed
wall-clock time. Because every executor is guaranteed to reach a terminal
state, a run always completes and returns a report; individual task failures
are part of that report, not exceptions.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from threadrunner.core.executor import TaskExecutor
from threadrunner.core.models import RunReport, TaskRecord
from threadrunner.core.registry import SignalRegistry
from threadrunner.core.reporter import NullReporter, ProgressReporter
from threadrunner.core.work import SimulatedWork, WorkFunction

logger = logging.getLogger(__name__)


class Coordinator:
    """
    Runs a finite set of task records to completion.

    Usage:
        coordinator = Coordinator(reporter=ConsoleReporter())
        report = await coordinator.run(records)
    """

    def __init__(
        self,
        reporter: Optional[ProgressReporter] = None,
        work: Optional[WorkFunction] = None,
        time_scale: float = 1.0,
    ):
        self.reporter = reporter or NullReporter()
        self.work = work or SimulatedWork(time_scale)
        self.records: List[TaskRecord] = []
        self.registry: Optional[SignalRegistry] = None
        self.executors: List[TaskExecutor] = []

    def initialize(self, records: Sequence[TaskRecord]) -> SignalRegistry:
        """
        Create one unset completion signal per record.

        Must happen before any executor starts, so every predecessor lookup
        finds its signal even if that task has not been scheduled yet.

        Raises:
            DuplicateTaskError: if two records share an id
        """
        records = list(records)
        self.registry = SignalRegistry.from_records(records)
        self.records = records
        self.executors = []
        logger.info(f"Initialized {len(records)} task(s)")
        return self.registry

    async def run(self, records: Optional[Sequence[TaskRecord]] = None) -> RunReport:
        """
        Run every task concurrently and wait for all of them to finish.

        When ``records`` is given the coordinator is (re)initialized with
        them first; otherwise the records passed to ``initialize`` are used.
        Signals are one-shot, so a repeated run starts from a fresh registry.
        """
        if records is not None or self.registry is None or self.executors:
            self.initialize(records if records is not None else self.records)

        self.executors = [
            TaskExecutor(record, self.registry, reporter=self.reporter, work=self.work)
            for record in self.records
        ]

        start = time.perf_counter()
        try:
            self.reporter.info("Starting parallel task execution...")
        except Exception as e:
            logger.warning(f"Progress report failed: {e!r}")

        # Executors never raise task faults; gather is the join barrier
        await asyncio.gather(*(executor.run() for executor in self.executors))

        elapsed = time.perf_counter() - start
        report = RunReport(
            elapsed_seconds=elapsed,
            outcomes={executor.task_id: executor.outcome for executor in self.executors},
        )

        logger.info(
            f"Run finished in {elapsed:.3f}s: "
            f"{len(report.succeeded)} succeeded, {len(report.failed)} failed"
        )
        return report


def run_tasks(
    records: Sequence[TaskRecord],
    reporter: Optional[ProgressReporter] = None,
    work: Optional[WorkFunction] = None,
    time_scale: float = 1.0,
) -> RunReport:
    """Synchronous entry point: run the records on a fresh event loop"""
    coordinator = Coordinator(reporter=reporter, work=work, time_scale=time_scale)
    coordinator.initialize(records)
    return asyncio.run(coordinator.run())
