"""
Core data models for Threadrunner

TaskRecord is the immutable, validated description of one task. TaskOutcome
and RunReport carry the results of a run back to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskState(Enum):
    """Task lifecycle state"""
    PENDING = "pending"
    WAITING = "waiting"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TaskRecord(BaseModel):
    """One unit of simulated, time-bounded work"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    task_id: str = Field(alias="id", min_length=1)
    duration: int = Field(ge=0, description="Simulated work length in seconds")
    blocking_task: Optional[str] = Field(default=None, description="Task that must finish first")

    @field_validator("task_id")
    @classmethod
    def _strip_task_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("task id must not be empty")
        return value

    @field_validator("blocking_task", mode="before")
    @classmethod
    def _normalize_blocking_task(cls, value: Any) -> Optional[str]:
        # Blank predecessor means no dependency
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def has_dependency(self) -> bool:
        return self.blocking_task is not None


@dataclass
class TaskOutcome:
    """Terminal result of one task in a run"""
    task_id: str
    state: TaskState = TaskState.PENDING
    cause: Optional[BaseException] = None
    warnings: List[str] = field(default_factory=list)
    started_at: Optional[float] = None  # loop time when Running began
    finished_at: Optional[float] = None  # loop time when Running ended

    @property
    def succeeded(self) -> bool:
        return self.state == TaskState.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.state == TaskState.FAILED

    @property
    def ran(self) -> bool:
        """Whether the task ever entered its Running phase"""
        return self.started_at is not None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.cause) if self.cause is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "state": self.state.value,
            "error": self.error_message,
            "error_code": getattr(getattr(self.cause, "code", None), "value", None),
            "warnings": list(self.warnings),
            "ran": self.ran,
        }


@dataclass
class RunReport:
    """Aggregate result of one coordinator run"""
    elapsed_seconds: float
    outcomes: Dict[str, TaskOutcome] = field(default_factory=dict)

    @property
    def succeeded(self) -> List[str]:
        return [task_id for task_id, o in self.outcomes.items() if o.succeeded]

    @property
    def failed(self) -> List[str]:
        return [task_id for task_id, o in self.outcomes.items() if o.failed]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "total_tasks": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "tasks": [o.to_dict() for o in self.outcomes.values()],
        }
