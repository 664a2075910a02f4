"""
Error taxonomy for Threadrunner

Every error raised by the runner carries an ErrorCode so callers (and the CLI)
can report failures consistently. Task failures never escape an executor as
exceptions; they are stored on the task's completion signal and surface as
data in the run report.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for the runner"""

    # Execution errors (2000-2999)
    TASK_EXECUTION_FAILED = "TR2001"
    SIGNAL_ALREADY_SET = "TR2010"

    # Dependency errors (3000-3999)
    DUPLICATE_TASK_ID = "TR3001"
    PREDECESSOR_NOT_FOUND = "TR3010"
    PREDECESSOR_FAILED = "TR3011"

    # Task definition errors (4000-4999)
    TASK_DEFINITION_INVALID = "TR4001"
    TASK_FILE_NOT_FOUND = "TR4002"
    TASK_FILE_FORMAT_UNSUPPORTED = "TR4003"

    # Configuration errors (5000-5999)
    CONFIGURATION_INVALID = "TR5001"


class ThreadRunnerError(Exception):
    """Base exception for Threadrunner with structured error information"""

    code: ErrorCode = ErrorCode.TASK_EXECUTION_FAILED

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        data: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.data = data or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization"""
        return {
            "error_code": self.code.value,
            "error_type": type(self).__name__,
            "message": self.message,
            "data": self.data,
            "cause": str(self.cause) if self.cause is not None else None,
        }

    def __str__(self) -> str:
        return self.message


class TaskExecutionError(ThreadRunnerError):
    """A task's own work raised an unexpected fault"""

    code = ErrorCode.TASK_EXECUTION_FAILED

    def __init__(self, task_id: str, cause: BaseException):
        super().__init__(
            str(cause) or type(cause).__name__,
            data={"task_id": task_id, "fault_type": type(cause).__name__},
            cause=cause,
        )
        self.task_id = task_id


class PredecessorFailedError(ThreadRunnerError):
    """
    A task was skipped because the task it blocks on failed.

    The predecessor's own cause is kept on ``cause`` (and ``__cause__``), so a
    chain of cascaded failures can be walked back to the task that actually
    faulted.
    """

    code = ErrorCode.PREDECESSOR_FAILED

    def __init__(self, task_id: str, predecessor_id: str, cause: BaseException):
        super().__init__(
            f"predecessor failed: {cause}",
            data={"task_id": task_id, "predecessor_id": predecessor_id},
            cause=cause,
        )
        self.task_id = task_id
        self.predecessor_id = predecessor_id

    @property
    def root_cause(self) -> BaseException:
        """The first non-cascaded failure along the chain"""
        cause = self.cause
        while isinstance(cause, PredecessorFailedError):
            cause = cause.cause
        return cause

    @property
    def failure_chain(self):
        """Task ids from this task back to the one that faulted"""
        chain = [self.task_id]
        node = self
        while isinstance(node.cause, PredecessorFailedError):
            node = node.cause
            chain.append(node.task_id)
        chain.append(node.predecessor_id)
        return chain


class SignalAlreadySetError(ThreadRunnerError):
    """A completion signal was written twice"""

    code = ErrorCode.SIGNAL_ALREADY_SET

    def __init__(self, task_id: str):
        super().__init__(
            f"Completion signal for task '{task_id}' is already set",
            data={"task_id": task_id},
        )
        self.task_id = task_id


class DuplicateTaskError(ThreadRunnerError):
    """Two task records share the same identity"""

    code = ErrorCode.DUPLICATE_TASK_ID

    def __init__(self, task_ids):
        ids = sorted(set(task_ids))
        super().__init__(
            f"Duplicate task id(s): {', '.join(ids)}",
            data={"task_ids": ids},
        )
        self.task_ids = ids


class TaskDefinitionError(ThreadRunnerError):
    """A task definition could not be turned into a valid task record"""

    code = ErrorCode.TASK_DEFINITION_INVALID


class TaskFileNotFoundError(TaskDefinitionError):
    """The task definition file does not exist"""

    code = ErrorCode.TASK_FILE_NOT_FOUND

    def __init__(self, file_path: str):
        super().__init__(
            f"Task file '{file_path}' not found.",
            data={"file_path": file_path},
        )
        self.file_path = file_path


class ConfigurationError(ThreadRunnerError):
    """Invalid runner configuration"""

    code = ErrorCode.CONFIGURATION_INVALID
