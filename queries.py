CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    completed BOOLEAN
);
"""

INSERT_TASK = "INSERT INTO tasks (title, completed) VALUES (?, ?);"
LAST_INSERT_ID = "SELECT last_insert_rowid();"
GET_ALL_TASKS = "SELECT id, title, completed FROM tasks ORDER BY id ASC;"
GET_TASK_BY_ID = "SELECT id, title, completed FROM tasks WHERE id = ?;"
COUNT_TASKS = "SELECT COUNT(*) FROM tasks;"
UPDATE_TASK = "UPDATE tasks SET title = ?, completed = ? WHERE id = ?;"
DELETE_TASK = "DELETE FROM tasks WHERE id = ?;"
