from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional
import re

class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"

class ProjectStatus(Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"

# Leading integer of an id ("12" -> 12, "12b" -> 12, "x" -> no match)
LEADING_INT_PATTERN = re.compile(r'^\s*([+-]?\d+)')

def numeric_id(task_id: str) -> int:
    """Return the integer value of a task id, or 0 when it has none."""
    match = LEADING_INT_PATTERN.match(task_id)
    if not match:
        return 0
    return int(match.group(1))

def _unique(ids: List[str]) -> List[str]:
    seen = set()
    result = []
    for task_id in ids:
        if task_id not in seen:
            seen.add(task_id)
            result.append(task_id)
    return result

class BaseRecordModel(BaseModel):
    """Base for models persisted as a single JSON document."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Dump to plain JSON types using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, text: str):
        return cls.model_validate_json(text)

class Task(BaseRecordModel):
    """A unit of work inside a project."""

    id: str = Field(description="Project-unique id, the next unused positive integer as a string")
    subject: str = Field(description="Free text description of the task")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current status of the task")
    blocked_by: List[str] = Field(
        default_factory=list,
        alias="blockedBy",
        description="Ids of tasks that must complete before this task leaves blocked"
    )
    blocks: List[str] = Field(
        default_factory=list,
        description="Ids of tasks listing this task in their blockedBy"
    )
    notes: str = Field(default="", description="Free text notes")

    @field_validator('blocked_by', 'blocks')
    @classmethod
    def dedupe_edges(cls, v):
        return _unique(v)

class Project(BaseRecordModel):
    """A named collection of tasks. The whole project is persisted as one record."""

    name: str = Field(
        validation_alias=AliasChoices("name", "project"),
        description="Unique project name, also the storage key"
    )
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE, description="Lifecycle status of the project")
    created: date = Field(default_factory=date.today, description="Day the project was created")
    updated: date = Field(default_factory=date.today, description="Day the project was last saved")
    tasks: List[Task] = Field(
        default_factory=list,
        description="Tasks in creation order"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Project name must not be empty")
        return v

    def find_task(self, task_id: str) -> Optional[Task]:
        """Find a task by id."""
        return next((t for t in self.tasks if t.id == task_id), None)

    def next_task_id(self) -> str:
        """The id a newly created task receives; ids are never reused."""
        highest = max((numeric_id(t.id) for t in self.tasks), default=0)
        return str(max(highest, 0) + 1)

    def tasks_with_status(self, status: TaskStatus) -> List[Task]:
        return [t for t in self.tasks if t.status == status]

    def completed_count(self) -> int:
        return len(self.tasks_with_status(TaskStatus.COMPLETED))
