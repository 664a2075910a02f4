"""
Task Loader

Turns task definition files into validated TaskRecords. Three formats are
supported:

- delimited text (``.csv``, ``.txt``): one task per line as
  ``id,seconds[,blocking_id]``; blank lines and lines starting with ``#``
  are skipped
- YAML (``.yaml``, ``.yml``) and JSON (``.json``): a mapping with a
  ``tasks`` list of ``{id, duration, blocking_task}`` entries

Malformed lines are skipped and reported as diagnostics rather than aborting
the load, so one bad line does not prevent the rest of the file from running.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from threadrunner.core.errors import (
    ErrorCode,
    TaskDefinitionError,
    TaskFileNotFoundError,
)
from threadrunner.core.models import TaskRecord

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".csv", ".txt", ""}
YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


@dataclass
class LoadDiagnostic:
    """A note about one line or entry of a task file"""
    line_number: int
    message: str
    source: str = ""
    is_warning: bool = False

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"


@dataclass
class TaskLoadResult:
    """Records parsed from a task file plus what was skipped and why"""
    records: List[TaskRecord] = field(default_factory=list)
    diagnostics: List[LoadDiagnostic] = field(default_factory=list)
    source: Optional[str] = None

    @property
    def warnings(self) -> List[LoadDiagnostic]:
        return [d for d in self.diagnostics if d.is_warning]


def load_tasks_from_file(file_path: Union[str, Path]) -> TaskLoadResult:
    """Load task records from a text, YAML or JSON file"""
    path = Path(file_path)
    if not path.exists():
        raise TaskFileNotFoundError(str(file_path))

    suffix = path.suffix.lower()
    logger.info(f"Reading tasks from: {path.resolve()}")

    if suffix in YAML_SUFFIXES or suffix in JSON_SUFFIXES:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) if suffix in YAML_SUFFIXES else json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise TaskDefinitionError(
                    f"Could not parse task file '{file_path}': {e}",
                    data={"file_path": str(file_path)},
                    cause=e,
                ) from e
        result = load_tasks_from_dict(data or {})
    elif suffix in TEXT_SUFFIXES:
        lines = path.read_text(encoding="utf-8").splitlines()
        logger.info(f"Read {len(lines)} line(s) from file")
        result = parse_task_lines(lines)
    else:
        raise TaskDefinitionError(
            f"Unsupported task file format: {path.suffix}",
            code=ErrorCode.TASK_FILE_FORMAT_UNSUPPORTED,
            data={"file_path": str(file_path)},
        )

    result.source = str(path)
    return result


def parse_task_lines(lines: Iterable[str]) -> TaskLoadResult:
    """Parse ``id,seconds[,blocking_id]`` lines into task records"""
    result = TaskLoadResult()

    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            logger.debug(f"Line {line_number}: skipped (empty or comment)")
            continue

        parts = [part.strip() for part in line.split(",")]
        if len(parts) < 2:
            result.diagnostics.append(LoadDiagnostic(
                line_number=line_number,
                source=line,
                message=f"Skipped: not enough parts (need at least 2, got {len(parts)})",
            ))
            continue

        try:
            duration = int(parts[1])
        except ValueError:
            result.diagnostics.append(LoadDiagnostic(
                line_number=line_number,
                source=line,
                message=f"Warning: invalid duration '{parts[1]}' in line: {line}",
                is_warning=True,
            ))
            continue

        record = _build_record(
            {"id": parts[0], "duration": duration, "blocking_task": parts[2] if len(parts) > 2 else None},
            line_number,
            line,
            result,
        )
        if record is not None:
            logger.debug(
                f"Line {line_number}: added task {record.task_id}, {record.duration}s, "
                f"blocking: {record.blocking_task or 'None'}"
            )

    return result


def load_tasks_from_dict(data: Dict[str, Any]) -> TaskLoadResult:
    """
    Load task records from a parsed YAML/JSON mapping.

    Accepts ``duration`` or ``seconds`` for the run time and
    ``blocking_task``, ``blocked_by`` or ``depends_on`` for the predecessor.
    """
    if not isinstance(data, dict):
        raise TaskDefinitionError("Task file must contain a mapping with a 'tasks' list")

    entries = data.get("tasks", [])
    if not isinstance(entries, list):
        raise TaskDefinitionError("'tasks' must be a list")

    result = TaskLoadResult()
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            result.diagnostics.append(LoadDiagnostic(
                line_number=index,
                source=repr(entry),
                message="Skipped: task entry must be a mapping",
            ))
            continue

        fields = {
            "id": entry.get("id", entry.get("name")),
            "duration": entry.get("duration", entry.get("seconds")),
            "blocking_task": entry.get(
                "blocking_task", entry.get("blocked_by", entry.get("depends_on"))
            ),
        }
        _build_record(fields, index, repr(entry), result)

    return result


def _build_record(
    fields: Dict[str, Any],
    line_number: int,
    source: str,
    result: TaskLoadResult,
) -> Optional[TaskRecord]:
    try:
        record = TaskRecord.model_validate(fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        result.diagnostics.append(LoadDiagnostic(
            line_number=line_number,
            source=source,
            message=f"Warning: invalid task definition ({problems})",
            is_warning=True,
        ))
        return None

    result.records.append(record)
    return record


def find_duplicate_ids(records: Iterable[TaskRecord]) -> List[str]:
    counts = Counter(record.task_id for record in records)
    return sorted(task_id for task_id, count in counts.items() if count > 1)


def find_missing_predecessors(records: Iterable[TaskRecord]) -> Dict[str, str]:
    """Map task id -> blocking task id for predecessors that do not exist"""
    records = list(records)
    known = {record.task_id for record in records}
    return {
        record.task_id: record.blocking_task
        for record in records
        if record.blocking_task is not None and record.blocking_task not in known
    }


def find_dependency_cycles(records: Iterable[TaskRecord]) -> List[List[str]]:
    """
    Find blocking chains that loop back on themselves.

    Each task has at most one predecessor, so following predecessors from
    any task either ends or enters exactly one cycle. Each cycle is returned
    once, starting from its first task in input order.
    """
    blocked_by = {}
    order = []
    for record in records:
        if record.task_id not in blocked_by:
            order.append(record.task_id)
        blocked_by[record.task_id] = record.blocking_task

    cycles: List[List[str]] = []
    seen = set()
    for task_id in order:
        path: List[str] = []
        on_path = set()
        current = task_id
        while current is not None and current in blocked_by and current not in seen:
            if current in on_path:
                cycles.append(path[path.index(current):])
                break
            path.append(current)
            on_path.add(current)
            current = blocked_by[current]
        seen.update(path)

    return cycles


def validate_tasks(records: List[TaskRecord]) -> List[str]:
    """
    Validate a set of task records and return a list of errors.

    Missing predecessors are not errors (such tasks start unblocked), but
    duplicate ids and blocking cycles are: duplicates are refused by the
    coordinator and cycles never finish.
    """
    errors = []

    if not records:
        errors.append("No tasks defined")
        return errors

    for task_id in find_duplicate_ids(records):
        errors.append(f"Duplicate task id: {task_id}")

    for cycle in find_dependency_cycles(records):
        if len(cycle) == 1:
            errors.append(f"Task {cycle[0]}: cannot block on itself")
        else:
            errors.append(f"Circular dependency: {' -> '.join(cycle + [cycle[0]])}")

    return errors
