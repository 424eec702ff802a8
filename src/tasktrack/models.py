from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID, uuid4

from tasktrack.recovery import InvalidDataError

class TaskCategory(Enum):
    PERSONAL = "Personal"
    WORK = "Work"
    SHOPPING = "Shopping"

    @property
    def icon(self) -> str:
        """Icon name used by list views."""
        match self:
            case TaskCategory.PERSONAL:
                return "person.fill"
            case TaskCategory.WORK:
                return "briefcase.fill"
            case TaskCategory.SHOPPING:
                return "cart.fill"

    @classmethod
    def parse(cls, value: str) -> 'TaskCategory':
        """Look up a category by its display string, falling back to Personal."""
        try:
            return cls(value)
        except ValueError:
            return cls.PERSONAL

class TaskPriority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def color(self) -> str:
        match self:
            case TaskPriority.LOW:
                return "green"
            case TaskPriority.MEDIUM:
                return "yellow"
            case TaskPriority.HIGH:
                return "red"

class ShoppingItem(BaseModel):
    """A single entry on a shopping list."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, frozen=True, description="Unique identifier for the item")
    name: str = Field(description="What to buy")
    quantity: int = Field(default=1, ge=0, description="How many to buy")
    estimated_price: float = Field(default=0.0, ge=0, description="Estimated price per unit")
    is_purchased: bool = Field(default=False, description="Whether the item has been bought")
    is_urgent: bool = Field(default=False, description="Whether the item is needed soon")

class TaskBase(BaseModel):
    """Fields and behaviour shared by every task variant.

    Behaviour that differs per variant is written once here as a match over
    the concrete variant; the variants themselves only add fields.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, frozen=True, description="Unique identifier for the task")
    title: str = Field(description="Short title of the task")
    description: str = Field(default="", description="Longer description of the task")
    is_completed: bool = Field(default=False, description="Whether the task is done")
    created_at: datetime = Field(default_factory=datetime.now, frozen=True, description="When the task was created")

    @property
    def category(self) -> TaskCategory:
        match self:
            case PersonalTask():
                return TaskCategory.PERSONAL
            case WorkTask():
                return TaskCategory.WORK
            case ShoppingTask():
                return TaskCategory.SHOPPING
        raise InvalidDataError(f"Unknown task variant: {type(self).__name__}")

    def complete(self) -> None:
        """Mark the task as completed. Shopping tasks also mark every item purchased."""
        match self:
            case ShoppingTask(items=items):
                for item in items:
                    item.is_purchased = True
        self.is_completed = True

    def get_display_info(self) -> str:
        """One-line summary of the task."""
        info = f"{self.title} - {self.category.value}"
        match self:
            case PersonalTask(personal_note=note):
                return f"{info} - Personal Note: {note}"
            case WorkTask(deadline=deadline, assignee=assignee):
                deadline_str = _format_date(deadline) if deadline else "No deadline"
                return f"{info} - Deadline: {deadline_str}, Assignee: {assignee}"
            case ShoppingTask(items=items, budget=budget):
                return (f"{info} - Items: {len(items)} ({self.purchased_count} purchased), "
                        f"Budget: ${budget:.2f}")
        return info

    def get_priority(self, as_of: Optional[date] = None) -> TaskPriority:
        """
        Derive the priority of the task from its variant data.

        Args:
            as_of: The day deadlines are measured from; defaults to today.

        Returns:
            The derived priority. It is never stored.
        """
        match self:
            case PersonalTask(personal_note=note):
                return TaskPriority.MEDIUM if note else TaskPriority.LOW
            case WorkTask(deadline=None):
                return TaskPriority.LOW
            case WorkTask(deadline=deadline):
                days_until_deadline = (deadline - (as_of or date.today())).days
                if days_until_deadline <= 1:
                    return TaskPriority.HIGH
                elif days_until_deadline <= 7:
                    return TaskPriority.MEDIUM
                return TaskPriority.LOW
            case ShoppingTask(items=items):
                if any(item.is_urgent and not item.is_purchased for item in items):
                    return TaskPriority.HIGH
                return TaskPriority.MEDIUM if items else TaskPriority.LOW
        raise InvalidDataError(f"Unknown task variant: {type(self).__name__}")

class PersonalTask(TaskBase):
    task_type: Literal["personal"] = Field(default="personal", frozen=True)
    personal_note: str = Field(default="", description="Free-text personal note")

class WorkTask(TaskBase):
    task_type: Literal["work"] = Field(default="work", frozen=True)
    deadline: Optional[date] = Field(default=None, description="Day the work is due")
    assignee: str = Field(default="", description="Who the work is assigned to")

class ShoppingTask(TaskBase):
    task_type: Literal["shopping"] = Field(default="shopping", frozen=True)
    budget: float = Field(default=0.0, ge=0, description="Money available for the trip")
    items: List[ShoppingItem] = Field(default_factory=list, description="Items to buy, in order")

    @property
    def purchased_count(self) -> int:
        return sum(1 for item in self.items if item.is_purchased)

    @property
    def estimated_total(self) -> float:
        """Sum of quantity times estimated price over all items."""
        return sum(item.quantity * item.estimated_price for item in self.items)

    def add_item(self, name: str, quantity: int = 1, estimated_price: float = 0.0,
                 is_urgent: bool = False) -> ShoppingItem:
        item = ShoppingItem(name=name, quantity=quantity, estimated_price=estimated_price, is_urgent=is_urgent)
        self.items.append(item)
        return item

Task = Annotated[Union[PersonalTask, WorkTask, ShoppingTask], Field(discriminator="task_type")]

def _format_date(value: date) -> str:
    return f"{value:%b} {value.day}, {value.year}"

class TaskEdit(BaseModel):
    """Field changes for an existing task. ``None`` leaves a field untouched."""

    title: Optional[str] = None
    description: Optional[str] = None

class PersonalTaskEdit(TaskEdit):
    personal_note: Optional[str] = None

class WorkTaskEdit(TaskEdit):
    deadline: Optional[date] = None
    clear_deadline: bool = False
    assignee: Optional[str] = None

class ShoppingTaskEdit(TaskEdit):
    budget: Optional[float] = Field(default=None, ge=0)
    items: Optional[List[ShoppingItem]] = None

def apply_edit(task: Task, edit: TaskEdit) -> Task:
    """
    Return a copy of ``task`` with the changes in ``edit`` applied.

    The copy keeps the identity, creation time and variant of the original.

    Raises:
        InvalidDataError: If the edit does not belong to the task's variant.
    """
    match (task, edit):
        case (PersonalTask(), PersonalTaskEdit()) | (WorkTask(), WorkTaskEdit()) | (ShoppingTask(), ShoppingTaskEdit()):
            pass
        case _:
            raise InvalidDataError(f"{type(edit).__name__} cannot edit a {task.category.value} task")

    changes = edit.model_dump(exclude_none=True, exclude={"clear_deadline"})
    if isinstance(edit, WorkTaskEdit) and edit.clear_deadline:
        changes["deadline"] = None
    return type(task).model_validate({**task.model_dump(), **changes})
