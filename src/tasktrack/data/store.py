"""
TaskStore - saves and loads the task collection as a single blob.

Each task is flattened into a ``TaskRecord`` tagged with its variant. Fields
that do not belong to the variant are stored as null.
"""
from datetime import date, datetime
from typing import Iterable, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError

from tasktrack.logs import get_logger
from tasktrack.models import PersonalTask, ShoppingItem, ShoppingTask, Task, TaskCategory, WorkTask
from tasktrack.recovery import InvalidDataError, LoadFailedError, SaveFailedError, TaskError
from .blobs import BlobStore
from .io import DATA_JSON, decode, encode
from .validate import validate_blob

log = get_logger("data.store")

class ShoppingItemRecord(BaseModel):
    id: UUID
    name: str
    quantity: int
    estimated_price: float
    is_purchased: bool
    is_urgent: bool

    @classmethod
    def from_item(cls, item: ShoppingItem) -> 'ShoppingItemRecord':
        return cls(**item.model_dump())

    def to_item(self) -> ShoppingItem:
        return ShoppingItem(**self.model_dump())

class TaskRecord(BaseModel):
    """Serialized form of one task."""

    id: UUID = Field(description="Unique identifier for the task")
    title: str = Field(description="Title of the task")
    description: str = Field(description="Description of the task")
    is_completed: bool = Field(description="Whether the task is done")
    created_at: datetime = Field(description="When the task was created")
    category: str = Field(description="Category display name")
    task_type: Literal["personal", "work", "shopping"] = Field(description="Task variant")
    personal_note: Optional[str] = Field(default=None, description="Personal tasks only")
    assignee: Optional[str] = Field(default=None, description="Work tasks only")
    deadline: Optional[date] = Field(default=None, description="Work tasks only")
    budget: Optional[float] = Field(default=None, description="Shopping tasks only")
    shopping_items: Optional[List[ShoppingItemRecord]] = Field(default=None, description="Shopping tasks only")

    @classmethod
    def from_task(cls, task: Task) -> 'TaskRecord':
        common = dict(
            id=task.id,
            title=task.title,
            description=task.description,
            is_completed=task.is_completed,
            created_at=task.created_at,
            category=task.category.value,
            task_type=task.task_type,
        )
        match task:
            case PersonalTask():
                return cls(**common, personal_note=task.personal_note)
            case WorkTask():
                return cls(**common, assignee=task.assignee, deadline=task.deadline)
            case ShoppingTask():
                items = [ShoppingItemRecord.from_item(item) for item in task.items]
                return cls(**common, budget=task.budget, shopping_items=items)
        raise InvalidDataError(f"Cannot serialize {type(task).__name__}")

    def to_task(self) -> Task:
        common = dict(
            id=self.id,
            title=self.title,
            description=self.description,
            is_completed=self.is_completed,
            created_at=self.created_at,
        )
        match self.task_type:
            case "personal":
                task = PersonalTask(**common, personal_note=self.personal_note or "")
            case "work":
                task = WorkTask(**common, deadline=self.deadline, assignee=self.assignee or "")
            case "shopping":
                items = [record.to_item() for record in self.shopping_items or []]
                task = ShoppingTask(**common, items=items, budget=self.budget or 0.0)
        if TaskCategory.parse(self.category) != task.category:
            log.debug(f"Record {self.id} has category '{self.category}', using {task.category.value}")
        return task

class TaskStore:
    """Persists the task collection in a blob store under a fixed key."""

    KEY = "SavedTasks"

    def __init__(self, blobs: BlobStore, key: Optional[str] = None, data_format: int = DATA_JSON):
        self.blobs = blobs
        self.key = key or TaskStore.KEY
        self.data_format = data_format

    def exists(self) -> bool:
        """Check whether a blob is stored under the key."""
        try:
            return self.blobs.read(self.key) is not None
        except (TaskError, OSError) as e:
            raise LoadFailedError(f"{LoadFailedError.description}: {e}") from e

    def save(self, tasks: Iterable[Task]) -> None:
        """
        Write all tasks as one blob, replacing the previous one.

        Raises:
            SaveFailedError: If a task cannot be serialized or the write fails.
        """
        try:
            data = [TaskRecord.from_task(task).model_dump(mode="json") for task in tasks]
            payload = encode(self.data_format, data)
            self.blobs.write(self.key, payload)
        except (TaskError, ValidationError, OSError, ValueError, TypeError) as e:
            log.error(f"Could not save tasks under '{self.key}': {e}")
            raise SaveFailedError(f"{SaveFailedError.description}: {e}") from e
        log.info(f"Saved {len(data)} tasks under '{self.key}'")

    def load(self) -> List[Task]:
        """
        Read the tasks back from the blob.

        Records that cannot be turned back into a task are skipped.

        Raises:
            LoadFailedError: If there is no blob, or it is not a list of records.
        """
        try:
            payload = self.blobs.read(self.key)
        except (TaskError, OSError) as e:
            raise LoadFailedError(f"{LoadFailedError.description}: {e}") from e
        if payload is None:
            raise LoadFailedError(f"{LoadFailedError.description}: nothing saved under '{self.key}'")

        try:
            data = decode(self.data_format, payload)
        except TaskError as e:
            log.error(f"Saved tasks under '{self.key}' are unreadable: {e}")
            raise LoadFailedError(f"{LoadFailedError.description}: {e}") from e
        if not validate_blob(data):
            raise LoadFailedError(f"{LoadFailedError.description}: '{self.key}' is not a list of task records")

        tasks: List[Task] = []
        seen = set()
        for index, raw in enumerate(data):
            try:
                task = TaskRecord.model_validate(raw).to_task()
            except (ValidationError, InvalidDataError) as e:
                log.warning(f"Skipping unreadable task record #{index}: {e}")
                continue
            if task.id in seen:
                log.warning(f"Skipping duplicate task record #{index} ({task.id})")
                continue
            seen.add(task.id)
            tasks.append(task)

        log.info(f"Loaded {len(tasks)} of {len(data)} task records from '{self.key}'")
        return tasks
