import sqlite3
import logging
from database import get_connection
from models import Task, StorageError, validate_title
from queries import (
    CREATE_TASKS_TABLE, INSERT_TASK, LAST_INSERT_ID, GET_ALL_TASKS,
    GET_TASK_BY_ID, COUNT_TASKS, UPDATE_TASK, DELETE_TASK
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite access for the tasks table.

    Every method opens its own connection and closes it before returning,
    so one instance can be shared between request threads.
    """
    def __init__(self, db_path, ensure_schema=True):
        self.db_path = db_path
        if ensure_schema:
            self.ensure_schema()

    def _connect(self):
        try:
            return get_connection(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Could not open database {self.db_path}: {str(e)}")
            raise StorageError(str(e))

    def ensure_schema(self):
        """Create the tasks table if it does not exist yet."""
        conn = self._connect()
        try:
            conn.execute(CREATE_TASKS_TABLE)
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to create tasks table: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

    def count(self):
        conn = self._connect()
        try:
            (total,) = conn.execute(COUNT_TASKS).fetchone()
            return int(total)
        except sqlite3.Error as e:
            logger.error(f"Error counting tasks: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

    def list_all(self):
        """Return every task ordered by ascending id."""
        conn = self._connect()
        try:
            rows = conn.execute(GET_ALL_TASKS).fetchall()
            return [Task.from_row(row) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Error fetching tasks: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

    def get_by_id(self, task_id):
        """Return the task with this id, or None if there is no such row."""
        conn = self._connect()
        try:
            row = conn.execute(GET_TASK_BY_ID, (task_id,)).fetchone()
            return Task.from_row(row) if row else None
        except sqlite3.Error as e:
            logger.error(f"Error fetching task {task_id}: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

    def create(self, title):
        """
        Insert a new, not yet completed task and return it with its generated id.

        The id is taken from the cursor; if the driver did not report one,
        last_insert_rowid() is read on the same connection before it closes.
        """
        title = validate_title(title)
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(INSERT_TASK, (title, False))
            task_id = cursor.lastrowid
            if not task_id:
                row = cursor.execute(LAST_INSERT_ID).fetchone()
                task_id = row[0] if row else None
            if not task_id:
                conn.rollback()
                raise StorageError("Failed to create task, no ID generated")
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error adding task: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

        logger.info(f"Task created: ID {task_id}, Title: {title}")
        return Task(id=int(task_id), title=title, completed=False)

    def update(self, task):
        """Overwrite title and completed for task.id. Returns False if no row matched."""
        title = validate_title(task.title)
        conn = self._connect()
        try:
            cursor = conn.execute(UPDATE_TASK, (title, bool(task.completed), task.id))
            conn.commit()
            updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error updating task {task.id}: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

        if updated:
            logger.info(f"Task updated: ID {task.id}")
        return updated

    def delete(self, task_id):
        """Remove the task with this id. Returns False if no row matched."""
        conn = self._connect()
        try:
            cursor = conn.execute(DELETE_TASK, (task_id,))
            conn.commit()
            deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error deleting task {task_id}: {str(e)}")
            raise StorageError(str(e))
        finally:
            conn.close()

        if deleted:
            logger.info(f"Task ID {task_id} deleted")
        return deleted
