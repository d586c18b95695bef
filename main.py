import os
import sys
import argparse
from database import get_db_path
from models import Task, ValidationError, StorageError
from task_store import TaskStore

SAMPLE_TASKS = ["Learn Python", "Build TODO app"]

def init_db(db_path):
    """Create the tasks table and insert the sample tasks if the table is empty."""
    store = TaskStore(db_path)
    if store.count() > 0:
        print("Tasks table already has data, skipping sample tasks.")
        return []

    print("Inserting sample tasks...")
    inserted = [store.create(title) for title in SAMPLE_TASKS]
    print("Inserted tasks:")
    for task in inserted:
        print(f"- {task.id}: {task.title}")
    print(f"Database initialization complete. {db_path} is ready.")
    return inserted

def serve(db_path):
    from app import app, HOST, PORT, logger

    TaskStore(db_path, ensure_schema=False).ensure_schema()
    app.config["DB_PATH"] = db_path
    logger.info(f"Starting server on http://{HOST}:{PORT} with database {db_path}")
    app.run(host=HOST, port=PORT, debug=os.getenv("FLASK_DEBUG") == "1")

def show_menu(store):
    while True:
        print("\nTask Manager Menu:")
        print("1. Add Task")
        print("2. View All Tasks")
        print("3. Update Task")
        print("4. Delete Task")
        print("5. Exit")

        choice = input("Enter choice: ")

        try:
            if choice == '1':
                task = store.create(input("Title: "))
                print(f"Task added successfully with ID {task.id}.")

            elif choice == '2':
                tasks = store.list_all()
                if not tasks:
                    print("No tasks yet.")
                for task in tasks:
                    status = "x" if task.completed else " "
                    print(f"[{status}] {task.id}: {task.title}")

            elif choice == '3':
                task_id = int(input("Task ID to update: "))
                title = input("New Title: ")
                completed = input("Completed (0 for No, 1 for Yes): ").strip() == '1'
                if store.update(Task(id=task_id, title=title, completed=completed)):
                    print("Task updated successfully.")
                else:
                    print("Task not found.")

            elif choice == '4':
                task_id = int(input("Task ID to delete: "))
                if store.delete(task_id):
                    print("Task deleted successfully.")
                else:
                    print("Task not found.")

            elif choice == '5':
                print("Goodbye!")
                break

            else:
                print("Invalid choice. Try again.")

        except ValidationError as e:
            print(f"Invalid input: {e}")
        except ValueError as e:
            print(f"Invalid input: {e}")
        except StorageError as e:
            print(f"Database error: {e}")

def main(argv=None):
    parser = argparse.ArgumentParser(description="To-do task manager backed by SQLite")
    parser.add_argument("--db", default=None, help="SQLite database file (defaults to DB_PATH from .env)")
    parser.add_argument("command", choices=["init-db", "serve", "menu"], nargs="?", default="menu")
    args = parser.parse_args(argv)
    db_path = args.db or get_db_path()

    try:
        if args.command == "init-db":
            print("Initializing database...")
            init_db(db_path)
        elif args.command == "serve":
            serve(db_path)
        else:
            show_menu(TaskStore(db_path))
    except StorageError as e:
        print(f"Failed to initialize database: {e}", file=sys.stderr)
        return 2
    return 0

if __name__ == "__main__":
    sys.exit(main())
