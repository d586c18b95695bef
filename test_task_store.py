import pytest
import sqlite3
from unittest.mock import MagicMock
from database import get_connection, get_db_path
from models import Task, ValidationError, StorageError
from queries import CREATE_TASKS_TABLE, INSERT_TASK, GET_ALL_TASKS, UPDATE_TASK, DELETE_TASK
from task_store import TaskStore

@pytest.fixture
def store(tmp_path):
    """A store backed by a fresh database file in a temporary directory."""
    return TaskStore(str(tmp_path / "todo_test.db"))

# --- Tests for database.py ---

def test_get_db_path_from_env(monkeypatch):
    """Tests that get_db_path reads DB_PATH from the environment."""
    monkeypatch.setenv("DB_PATH", "custom.db")
    assert get_db_path() == "custom.db"

def test_get_db_path_default(monkeypatch):
    """Tests that get_db_path falls back to todo.db."""
    monkeypatch.delenv("DB_PATH", raising=False)
    assert get_db_path() == "todo.db"

def test_get_db_path_empty(monkeypatch):
    monkeypatch.setenv("DB_PATH", "  ")
    with pytest.raises(ValueError) as excinfo:
        get_db_path()
    assert "empty" in str(excinfo.value)

def test_get_connection_valid_path(tmp_path):
    """Tests that get_connection returns a connection object with a valid path."""
    conn = get_connection(str(tmp_path / "conn.db"))
    assert isinstance(conn, sqlite3.Connection)
    conn.close()

# --- Tests for queries.py ---

def test_query_definitions():
    """Ensures that the query constants target the tasks table."""
    for query in (CREATE_TASKS_TABLE, INSERT_TASK, GET_ALL_TASKS, UPDATE_TASK, DELETE_TASK):
        assert isinstance(query, str)
        assert "tasks" in query
    assert "ORDER BY id ASC" in GET_ALL_TASKS

# --- Tests for task_store.py ---

def test_ensure_schema_creates_table(store):
    """Tests that constructing a store creates the tasks table."""
    conn = get_connection(store.db_path)
    try:
        table = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='tasks';").fetchone()
    finally:
        conn.close()
    assert table is not None
    assert table[0] == 'tasks'

def test_ensure_schema_is_idempotent(store):
    store.create("Keep me")
    store.ensure_schema()
    TaskStore(store.db_path)
    assert [t.title for t in store.list_all()] == ["Keep me"]

def test_list_all_empty(store):
    assert store.list_all() == []
    assert store.count() == 0

def test_create_task(store):
    """Tests that a created task gets an id and shows up in list and lookup."""
    task = store.create("Buy milk")
    assert task.id > 0
    assert task.title == "Buy milk"
    assert task.completed is False
    assert store.list_all() == [task]
    assert store.get_by_id(task.id) == task

def test_create_trims_title(store):
    task = store.create("  Walk the dog  ")
    assert task.title == "Walk the dog"
    assert store.get_by_id(task.id).title == "Walk the dog"

@pytest.mark.parametrize("title", ["", "   ", None])
def test_create_rejects_blank_title(store, title):
    """Tests that blank titles are rejected before any row is written."""
    with pytest.raises(ValidationError, match="Title is required"):
        store.create(title)
    assert store.count() == 0

def test_get_by_id_missing(store):
    assert store.get_by_id(999) is None

def test_update_task(store):
    """Tests that update overwrites title and completed."""
    task = store.create("X")
    assert store.update(Task(id=task.id, title="Y", completed=True)) is True
    assert store.get_by_id(task.id) == Task(id=task.id, title="Y", completed=True)

def test_update_missing_task_does_not_insert(store):
    store.create("Only one")
    assert store.update(Task(id=999, title="Ghost", completed=True)) is False
    assert store.count() == 1
    assert store.get_by_id(999) is None

def test_update_rejects_blank_title(store):
    task = store.create("Original")
    with pytest.raises(ValidationError):
        store.update(Task(id=task.id, title="  ", completed=True))
    assert store.get_by_id(task.id).title == "Original"

def test_delete_task(store):
    """Tests that delete removes exactly the matching row."""
    first = store.create("First")
    second = store.create("Second")
    assert store.delete(first.id) is True
    assert store.get_by_id(first.id) is None
    assert store.list_all() == [second]

def test_delete_missing_task(store):
    store.create("Stay")
    assert store.delete(999) is False
    assert store.count() == 1

def test_deleted_id_is_not_reused(store):
    first = store.create("First")
    second = store.create("Second")
    store.delete(second.id)
    third = store.create("Third")
    assert third.id > second.id > first.id

def test_list_all_ascending_without_duplicates(store):
    created = [store.create(f"Task {i}") for i in range(5)]
    store.delete(created[1].id)
    store.update(Task(id=created[3].id, title="Changed", completed=True))
    store.create("Last")
    ids = [t.id for t in store.list_all()]
    assert ids == sorted(ids)
    assert len(ids) == len(set(ids)) == 5

def test_create_falls_back_to_last_insert_rowid(mocker):
    """Tests that create reads last_insert_rowid() when the cursor has no lastrowid."""
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_conn.cursor.return_value = mock_cursor
    mock_cursor.lastrowid = None
    mock_cursor.execute.return_value = mock_cursor
    mock_cursor.fetchone.return_value = (7,)
    mocker.patch("task_store.get_connection", return_value=mock_conn)

    store = TaskStore("unused.db", ensure_schema=False)
    task = store.create("Fallback")

    assert task == Task(id=7, title="Fallback", completed=False)
    mock_cursor.execute.assert_any_call("SELECT last_insert_rowid();")
    mock_conn.commit.assert_called_once()
    mock_conn.close.assert_called_once()

def test_create_without_any_id_raises(mocker):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_conn.cursor.return_value = mock_cursor
    mock_cursor.lastrowid = None
    mock_cursor.execute.return_value = mock_cursor
    mock_cursor.fetchone.return_value = (None,)
    mocker.patch("task_store.get_connection", return_value=mock_conn)

    store = TaskStore("unused.db", ensure_schema=False)
    with pytest.raises(StorageError, match="no ID generated"):
        store.create("Nothing")
    mock_conn.rollback.assert_called_once()
    mock_conn.commit.assert_not_called()
    mock_conn.close.assert_called_once()

def test_unreachable_database_raises_storage_error(tmp_path):
    """Tests that a path in a missing directory surfaces as StorageError."""
    with pytest.raises(StorageError):
        TaskStore(str(tmp_path / "missing" / "todo.db"))

def test_statement_failure_raises_storage_error(store, mocker):
    mock_conn = MagicMock()
    mock_conn.execute.side_effect = sqlite3.OperationalError("database is locked")
    mocker.patch("task_store.get_connection", return_value=mock_conn)
    with pytest.raises(StorageError, match="database is locked"):
        store.list_all()
    mock_conn.close.assert_called_once()
