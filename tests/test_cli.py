"""Tests for the command line interface."""

import json
import pytest
from pathlib import Path
from click.testing import CliRunner

from tasktrack.cli import main
from tasktrack.data import DATA_YAML, FileBlobStore, TaskStore
from tasktrack.models import PersonalTask, ShoppingTask, WorkTask


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def run(data_dir):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main, ["--data-dir", str(data_dir), *args])

    return _run


def _saved(data_dir: Path):
    return TaskStore(FileBlobStore(data_dir)).load()


class TestInit:
    """Test the init command."""

    def test_init_saves_sample_tasks(self, run, data_dir):
        result = run("init")
        assert result.exit_code == 0
        assert "Saved 3 sample tasks" in result.output
        assert [type(t) for t in _saved(data_dir)] == [PersonalTask, WorkTask, ShoppingTask]

    def test_init_twice(self, run, data_dir):
        run("init")
        ids = [t.id for t in _saved(data_dir)]
        result = run("init")
        assert "already initialized" in result.output
        assert [t.id for t in _saved(data_dir)] == ids

    def test_init_yaml(self, data_dir):
        result = CliRunner().invoke(main, ["--data-dir", str(data_dir), "--format", "yaml", "init"])
        assert result.exit_code == 0
        assert (data_dir / "SavedTasks.yml").exists()
        assert len(TaskStore(FileBlobStore(data_dir, suffix=".yml"), data_format=DATA_YAML).load()) == 3


class TestList:
    """Test the list command."""

    def test_list_without_saved_tasks_shows_samples(self, run):
        result = run("list")
        assert result.exit_code == 0
        assert "Morning Exercise" in result.output
        assert "Failed to load tasks" in result.output

    def test_missing_tasks_suggest_init(self, run):
        """Test the init hint is shown when nothing has been saved yet."""
        result = run("list")
        assert "Run 'tasktrack init'" in result.output
        assert "next change will replace" not in result.output

    def test_corrupt_tasks_warn_about_replacement(self, run, data_dir):
        """Test a corrupt save does not point at init, which would refuse to run."""
        data_dir.mkdir(parents=True)
        (data_dir / "SavedTasks.json").write_bytes(b"{corrupt")

        result = run("list")
        assert result.exit_code == 0
        assert "Morning Exercise" in result.output
        assert "next change will replace the stored tasks" in result.output
        assert "tasktrack init" not in result.output

        assert "already initialized" in run("init").output

    def test_list_by_category(self, run):
        run("init")
        result = run("list", "--category", "work")
        assert result.exit_code == 0
        assert "Complete Project Report" in result.output
        assert "[Medium]" in result.output
        assert "Morning Exercise" not in result.output

    def test_list_verbose_shows_items(self, run):
        run("init")
        result = run("list", "--category", "Shopping", "-v")
        assert "12 x Eggs" in result.output
        assert "(urgent)" in result.output


class TestMutations:
    """Test commands that change tasks."""

    def test_add_work_task(self, run, data_dir):
        run("init")
        result = run("add", "Write tests", "--category", "Work", "--assignee", "Ana", "--deadline", "2030-01-02")
        assert result.exit_code == 0
        task = _saved(data_dir)[-1]
        assert isinstance(task, WorkTask)
        assert task.assignee == "Ana"
        assert str(task.deadline) == "2030-01-02"

    def test_add_empty_title(self, run, data_dir):
        run("init")
        result = run("add", "")
        assert result.exit_code == 1
        assert "Task title cannot be empty" in result.output
        assert len(_saved(data_dir)) == 3

    def test_add_rejects_other_variant_options(self, run):
        run("init")
        result = run("add", "Milk run", "--category", "Shopping", "--assignee", "Ana")
        assert result.exit_code == 1
        assert "--assignee does not apply to Shopping tasks" in result.output

    def test_toggle_by_prefix(self, run, data_dir):
        run("init")
        shopping = _saved(data_dir)[2]
        result = run("toggle", str(shopping.id)[:8])
        assert result.exit_code == 0
        saved = _saved(data_dir)[2]
        assert saved.is_completed is True
        assert all(item.is_purchased for item in saved.items)

        hidden = run("list", "--hide-completed")
        assert "Weekly Groceries" not in hidden.output

    def test_toggle_unknown(self, run):
        run("init")
        result = run("toggle", "zzzz")
        assert result.exit_code == 1
        assert "Task not found" in result.output

    def test_edit_and_delete(self, run, data_dir):
        run("init")
        personal = _saved(data_dir)[0]

        result = run("edit", str(personal.id), "--note", "Drink water")
        assert result.exit_code == 0
        assert _saved(data_dir)[0].personal_note == "Drink water"

        result = run("edit", str(personal.id), "--budget", "10")
        assert result.exit_code == 1

        result = run("delete", str(personal.id))
        assert result.exit_code == 0
        assert personal.id not in [t.id for t in _saved(data_dir)]

    def test_item_add(self, run, data_dir):
        run("init")
        shopping, work = _saved(data_dir)[2], _saved(data_dir)[1]

        result = run("item", "add", str(shopping.id), "Apples", "-q", "6", "-p", "0.5", "--urgent")
        assert result.exit_code == 0
        items = _saved(data_dir)[2].items
        assert [i.name for i in items] == ["Milk", "Bread", "Eggs", "Apples"]
        assert items[-1].is_urgent is True

        result = run("item", "add", str(work.id), "Stapler")
        assert result.exit_code == 1


def test_schema(run):
    result = run("schema")
    assert result.exit_code == 0
    schema = json.loads(result.stdout)
    assert "task_type" in schema["properties"]
