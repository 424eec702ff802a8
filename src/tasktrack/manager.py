"""
TaskManager - owns the task collection and the filtered view shown to users.

Every mutation validates its input first, then changes the collection,
persists it and recomputes the filtered view before returning. Persistence
problems never undo a mutation; they are reported on the error channel
(``error_message`` / ``show_error``) instead of being raised.
"""
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from tasktrack.data.store import TaskStore
from tasktrack.logs import get_logger
from tasktrack.models import (
    PersonalTask,
    ShoppingItem,
    ShoppingTask,
    Task,
    TaskCategory,
    TaskEdit,
    WorkTask,
    apply_edit,
)
from tasktrack.recovery import (
    EmptyTitleError,
    InvalidDataError,
    LoadFailedError,
    SaveFailedError,
    TaskError,
    TaskNotFoundError,
)

log = get_logger("manager")


class TaskManager:
    """In-memory task collection with category and completion filters."""

    def __init__(self, store: Optional[TaskStore] = None, load: bool = True):
        self.store = store
        self.tasks: List[Task] = []
        self.filtered_tasks: List[Task] = []
        self.selected_category: Optional[TaskCategory] = None
        self.show_completed_tasks: bool = True
        self.error_message: str = ""
        self.show_error: bool = False
        self.last_error: Optional[TaskError] = None

        if not load:
            return
        if store is None:
            self.load_sample_tasks()
        else:
            self.load_tasks()

    # -------------------- lookups --------------------
    def _index_of(self, task_id: UUID) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError(f"Task not found: {task_id}")

    def get_task(self, task_id: UUID) -> Task:
        return self.tasks[self._index_of(task_id)]

    # -------------------- task operations --------------------
    def add_task(self, task: Task) -> None:
        if not task.title:
            raise EmptyTitleError()
        if any(existing.id == task.id for existing in self.tasks):
            raise InvalidDataError(f"A task with id {task.id} already exists")

        self.tasks.append(task)
        log.debug(f"Added {task.category.value} task {task.id}")
        self.save_tasks()
        self.apply_filters()

    def delete_task(self, task_id: UUID) -> None:
        index = self._index_of(task_id)

        del self.tasks[index]
        log.debug(f"Deleted task {task_id}")
        self.save_tasks()
        self.apply_filters()

    def update_task(self, updated_task: Task) -> None:
        """Replace the task sharing ``updated_task``'s id, keeping its position."""
        index = self._index_of(updated_task.id)

        self.tasks[index] = updated_task
        log.debug(f"Updated task {updated_task.id}")
        self.save_tasks()
        self.apply_filters()

    def edit_task(self, task_id: UUID, edit: TaskEdit) -> Task:
        """
        Apply variant specific field changes to a task.

        Raises:
            TaskNotFoundError: If no task has the id.
            InvalidDataError: If the edit is for a different variant.
        """
        edited = apply_edit(self.get_task(task_id), edit)
        self.update_task(edited)
        return edited

    def toggle_task_completion(self, task_id: UUID) -> None:
        task = self.tasks[self._index_of(task_id)]

        if task.is_completed:
            # Un-completing leaves variant state (e.g. purchased items) as is
            task.is_completed = False
        else:
            task.complete()

        log.debug(f"Task {task_id} completed: {task.is_completed}")
        self.save_tasks()
        self.apply_filters()

    # -------------------- persistence --------------------
    def save_tasks(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.tasks)
        except SaveFailedError as e:
            self.handle_error(e)

    def load_tasks(self) -> Optional[LoadFailedError]:
        """
        Replace the collection with the stored tasks.

        When loading fails the sample tasks are used instead and the error is
        reported on the error channel and returned.
        """
        if self.store is None:
            self.load_sample_tasks()
            return None
        try:
            self.tasks = self.store.load()
        except LoadFailedError as e:
            log.warning(f"Falling back to sample tasks: {e}")
            self.load_sample_tasks()
            self.handle_error(e)
            return e
        self.apply_filters()
        return None

    # -------------------- filtering --------------------
    def apply_filters(self) -> None:
        filtered = self.tasks

        if self.selected_category is not None:
            filtered = [task for task in filtered if task.category == self.selected_category]

        if not self.show_completed_tasks:
            filtered = [task for task in filtered if not task.is_completed]

        self.filtered_tasks = list(filtered)
        log.debug(f"Filtered {len(self.tasks)} tasks down to {len(self.filtered_tasks)} "
                  f"(category: {self.selected_category.value if self.selected_category else 'All'}, "
                  f"show completed: {self.show_completed_tasks})")

    def filter_by_category(self, category: Optional[TaskCategory]) -> None:
        self.selected_category = category
        self.apply_filters()

    def set_show_completed(self, show: bool) -> None:
        self.show_completed_tasks = show
        self.apply_filters()

    def refresh_filters(self) -> None:
        self.apply_filters()

    # -------------------- error channel --------------------
    def handle_error(self, error: TaskError) -> None:
        self.last_error = error
        self.error_message = str(error)
        self.show_error = True
        log.error(f"{type(error).__name__}: {error}")

    def dismiss_error(self) -> None:
        self.show_error = False

    # -------------------- sample data --------------------
    def load_sample_tasks(self) -> None:
        personal_task = PersonalTask(
            title="Morning Exercise",
            description="30 minutes jogging in the park",
            personal_note="Remember to stretch before and after",
        )

        work_task = WorkTask(
            title="Complete Project Report",
            description="Finish the quarterly analysis report",
            deadline=date.today() + timedelta(days=2),
            assignee="John Doe",
        )

        shopping_task = ShoppingTask(
            title="Weekly Groceries",
            description="Buy groceries for the week",
            items=[
                ShoppingItem(name="Milk", quantity=2, estimated_price=5.0),
                ShoppingItem(name="Bread", quantity=1, estimated_price=3.0, is_urgent=True),
                ShoppingItem(name="Eggs", quantity=12, estimated_price=4.0),
            ],
            budget=50.0,
        )

        self.tasks = [personal_task, work_task, shopping_task]
        self.apply_filters()
        log.info(f"Sample tasks loaded: {len(self.tasks)}")
