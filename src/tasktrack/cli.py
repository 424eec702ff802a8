"""
Command Line Interface for tasktrack.
"""

import json
import click
from pathlib import Path
from .version import VERSION
from .logs import setup_logging
from .data import DATA_JSON, DATA_YAML, FileBlobStore, TaskRecord, TaskStore
from .data.validate import generate_schema
from .manager import TaskManager
from .models import (
    PersonalTask,
    PersonalTaskEdit,
    ShoppingItem,
    ShoppingTask,
    ShoppingTaskEdit,
    TaskCategory,
    WorkTask,
    WorkTaskEdit,
)
from .recovery import InvalidDataError, TaskError, TaskNotFoundError

CATEGORY_CHOICE = click.Choice([c.value for c in TaskCategory], case_sensitive=False)
DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])
FORMATS = {"json": (DATA_JSON, ".json"), "yaml": (DATA_YAML, ".yml")}


def _fail(error: TaskError):
    click.echo(f"❌ {error}", err=True)
    click.echo(f"💡 {error.recovery_suggestion}", err=True)
    raise click.exceptions.Exit(1)


def _open_manager(ctx: click.Context) -> TaskManager:
    store: TaskStore = ctx.obj
    manager = TaskManager(store)
    if manager.show_error:
        click.echo(f"⚠️  {manager.error_message}", err=True)
        try:
            unreadable = store.exists()
        except TaskError:
            unreadable = True
        if unreadable:
            click.echo("💡 Showing sample tasks. The next change will replace the stored tasks.", err=True)
        else:
            click.echo("💡 Showing sample tasks. Run 'tasktrack init' to start saving them.", err=True)
        manager.dismiss_error()
    return manager


def _check_saved(manager: TaskManager):
    if manager.show_error:
        _fail(manager.last_error)


def _resolve_task(manager: TaskManager, task_id: str):
    """Find a task by full id or unique id prefix."""
    prefix = task_id.strip().lower()
    matches = [t for t in manager.tasks if str(t.id).startswith(prefix)] if prefix else []
    if not matches:
        raise TaskNotFoundError(f"Task not found: {task_id}")
    if len(matches) > 1:
        raise InvalidDataError(f"Task id '{task_id}' is ambiguous ({len(matches)} matches)")
    return matches[0]


def _reject_options(category: TaskCategory, **options):
    """Refuse options that do not apply to the task's category."""
    for name, value in options.items():
        if value is not None and value is not False:
            raise InvalidDataError(f"--{name} does not apply to {category.value} tasks")


@click.group()
@click.version_option(version=VERSION, prog_name="tasktrack")
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), envvar='TASKTRACK_DATA_DIR',
              help='Where tasks are saved (default: ~/.local/share/tasktrack/data)')
@click.option('--format', 'data_format', type=click.Choice(list(FORMATS)), default='json',
              help='Encoding of the saved tasks')
@click.pass_context
def main(ctx, data_dir, data_format):
    """
    tasktrack - personal, work and shopping tasks in one list.
    """
    setup_logging(data_dir / "logs" if data_dir else None)
    data_type, suffix = FORMATS[data_format]
    ctx.obj = TaskStore(FileBlobStore(data_dir, suffix=suffix), data_format=data_type)


@main.command()
@click.pass_obj
def init(store: TaskStore):
    """Start saving tasks, beginning with the sample tasks."""
    try:
        if store.exists():
            click.echo("❌ Tasks already initialized")
            return
        manager = TaskManager(store, load=False)
        manager.load_sample_tasks()
        manager.save_tasks()
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    click.echo(f"✅ Saved {len(manager.tasks)} sample tasks")


@main.command(name="list")
@click.option('--category', type=CATEGORY_CHOICE, help='Only show tasks of this category')
@click.option('--hide-completed', is_flag=True, help='Hide completed tasks')
@click.option('-v', '--verbose', is_flag=True, help='Show descriptions and shopping items')
@click.pass_context
def list_tasks(ctx, category, hide_completed, verbose):
    """List tasks."""
    manager = _open_manager(ctx)
    manager.filter_by_category(TaskCategory(category) if category else None)
    manager.set_show_completed(not hide_completed)

    if not manager.filtered_tasks:
        click.echo("📭 No tasks found")
        return

    for task in manager.filtered_tasks:
        mark = "✅" if task.is_completed else "⬜"
        priority = task.get_priority()
        click.echo(f"{mark} {str(task.id)[:8]}  [{priority.value:<6}] {task.get_display_info()}")
        if verbose:
            if task.description:
                click.echo(f"      {task.description}")
            if isinstance(task, ShoppingTask):
                for item in task.items:
                    bought = "x" if item.is_purchased else " "
                    urgent = " (urgent)" if item.is_urgent else ""
                    click.echo(f"      [{bought}] {item.quantity} x {item.name} @ ${item.estimated_price:.2f}{urgent}")


@main.command()
@click.argument('title')
@click.option('--category', type=CATEGORY_CHOICE, default=TaskCategory.PERSONAL.value, show_default=True)
@click.option('-d', '--description', default="", help='Longer description')
@click.option('--note', help='Personal note (Personal tasks)')
@click.option('--assignee', help='Assignee (Work tasks)')
@click.option('--deadline', type=DATE_TYPE, help='Deadline as YYYY-MM-DD (Work tasks)')
@click.option('--budget', type=float, help='Budget (Shopping tasks)')
@click.pass_context
def add(ctx, title, category, description, note, assignee, deadline, budget):
    """Add a new task."""
    manager = _open_manager(ctx)
    category = TaskCategory(category)
    try:
        match category:
            case TaskCategory.PERSONAL:
                _reject_options(category, assignee=assignee, deadline=deadline, budget=budget)
                task = PersonalTask(title=title, description=description, personal_note=note or "")
            case TaskCategory.WORK:
                _reject_options(category, note=note, budget=budget)
                task = WorkTask(title=title, description=description,
                                deadline=deadline.date() if deadline else None, assignee=assignee or "")
            case TaskCategory.SHOPPING:
                _reject_options(category, note=note, assignee=assignee, deadline=deadline)
                if budget is not None and budget < 0:
                    raise InvalidDataError("Budget cannot be negative")
                task = ShoppingTask(title=title, description=description, budget=budget or 0.0)
        manager.add_task(task)
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    click.echo(f"✅ Added {category.value} task {str(task.id)[:8]}: {title}")


@main.command()
@click.argument('task_id')
@click.option('--title', help='New title')
@click.option('-d', '--description', help='New description')
@click.option('--note', help='New personal note (Personal tasks)')
@click.option('--assignee', help='New assignee (Work tasks)')
@click.option('--deadline', type=DATE_TYPE, help='New deadline as YYYY-MM-DD (Work tasks)')
@click.option('--clear-deadline', is_flag=True, help='Remove the deadline (Work tasks)')
@click.option('--budget', type=float, help='New budget (Shopping tasks)')
@click.pass_context
def edit(ctx, task_id, title, description, note, assignee, deadline, clear_deadline, budget):
    """Edit the fields of a task. The category never changes."""
    manager = _open_manager(ctx)
    try:
        task = _resolve_task(manager, task_id)
        match task:
            case PersonalTask():
                _reject_options(task.category, assignee=assignee, deadline=deadline,
                                **{"clear-deadline": clear_deadline}, budget=budget)
                changes = PersonalTaskEdit(title=title, description=description, personal_note=note)
            case WorkTask():
                _reject_options(task.category, note=note, budget=budget)
                changes = WorkTaskEdit(title=title, description=description, assignee=assignee,
                                       deadline=deadline.date() if deadline else None,
                                       clear_deadline=clear_deadline)
            case ShoppingTask():
                _reject_options(task.category, note=note, assignee=assignee, deadline=deadline,
                                **{"clear-deadline": clear_deadline})
                if budget is not None and budget < 0:
                    raise InvalidDataError("Budget cannot be negative")
                changes = ShoppingTaskEdit(title=title, description=description, budget=budget)
        edited = manager.edit_task(task.id, changes)
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    click.echo(f"✏️  Updated: {edited.get_display_info()}")


@main.command()
@click.argument('task_id')
@click.pass_context
def toggle(ctx, task_id):
    """Mark a task completed, or not completed again."""
    manager = _open_manager(ctx)
    try:
        task = _resolve_task(manager, task_id)
        manager.toggle_task_completion(task.id)
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    state = "completed" if task.is_completed else "not completed"
    click.echo(f"✅ {task.title} is {state}")


@main.command()
@click.argument('task_id')
@click.pass_context
def delete(ctx, task_id):
    """Delete a task."""
    manager = _open_manager(ctx)
    try:
        task = _resolve_task(manager, task_id)
        manager.delete_task(task.id)
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    click.echo(f"🗑️  Deleted {task.title}")


@main.group()
def item():
    """Manage shopping list items."""
    pass


@item.command(name="add")
@click.argument('task_id')
@click.argument('name')
@click.option('-q', '--quantity', type=click.IntRange(min=0), default=1, show_default=True)
@click.option('-p', '--price', type=click.FloatRange(min=0), default=0.0, show_default=True,
              help='Estimated price per unit')
@click.option('--urgent', is_flag=True, help='Needed soon')
@click.pass_context
def add_item(ctx, task_id, name, quantity, price, urgent):
    """Add an item to a shopping task."""
    manager = _open_manager(ctx)
    try:
        task = _resolve_task(manager, task_id)
        if not isinstance(task, ShoppingTask):
            raise InvalidDataError(f"Items can only be added to Shopping tasks, not {task.category.value}")
        new_item = ShoppingItem(name=name, quantity=quantity, estimated_price=price, is_urgent=urgent)
        manager.edit_task(task.id, ShoppingTaskEdit(items=[*task.items, new_item]))
        _check_saved(manager)
    except TaskError as e:
        _fail(e)
    click.echo(f"🛒 Added {quantity} x {name} to {task.title}")


@main.command()
def schema():
    """Print the JSON schema of a saved task record."""
    click.echo(json.dumps(generate_schema(TaskRecord), indent=2))


if __name__ == "__main__":
    main()
