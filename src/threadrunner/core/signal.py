"""
One-shot completion signals

A CompletionSignal is written once by the task that owns it and read by any
number of waiting tasks. The terminal value is a tagged SignalResult rather
than a raised exception, so waiters decide explicitly what to do with a
predecessor's failure.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from threadrunner.core.errors import SignalAlreadySetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalResult:
    """Terminal value of a completion signal"""
    succeeded: bool
    cause: Optional[BaseException] = None

    @classmethod
    def success(cls) -> "SignalResult":
        return cls(succeeded=True)

    @classmethod
    def failure(cls, cause: BaseException) -> "SignalResult":
        return cls(succeeded=False, cause=cause)

    @property
    def failed(self) -> bool:
        return not self.succeeded

    def unwrap(self) -> None:
        """Re-raise the recorded failure cause, if any"""
        if self.cause is not None:
            raise self.cause


class CompletionSignal:
    """
    Single-writer, multi-reader one-shot event.

    The result is stored before the underlying event is set, and both happen
    in the same event-loop step, so every waiter released by the transition
    observes the same terminal value.
    """

    def __init__(self, task_id: str):
        self.task_id = task_id
        self._event = asyncio.Event()
        self._result: Optional[SignalResult] = None

    @property
    def is_set(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[SignalResult]:
        """The terminal value, or None while unset"""
        return self._result

    async def wait(self) -> SignalResult:
        """Suspend until the signal fires, then return its terminal value"""
        if self._result is None:
            await self._event.wait()
        return self._result

    def set_success(self) -> None:
        self._set(SignalResult.success())

    def set_failure(self, cause: BaseException) -> None:
        self._set(SignalResult.failure(cause))

    def _set(self, result: SignalResult) -> None:
        if self._result is not None:
            raise SignalAlreadySetError(self.task_id)
        self._result = result
        self._event.set()
        logger.debug(f"Signal {self.task_id} set ({'success' if result.succeeded else 'failure'})")

    def __repr__(self) -> str:
        if self._result is None:
            state = "unset"
        elif self._result.succeeded:
            state = "success"
        else:
            state = f"failure: {self._result.cause}"
        return f"CompletionSignal({self.task_id!r}, {state})"
