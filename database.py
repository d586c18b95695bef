import sqlite3
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = "todo.db"

def get_db_path():
    """Read the database location from the environment (.env), falling back to todo.db."""
    db_path = os.getenv("DB_PATH", DEFAULT_DB_PATH)
    if not db_path.strip():
        raise ValueError("Database path in environment variables (.env) is empty")
    return db_path

def get_connection(db_path=None):
    """Open a new connection to the SQLite database file."""
    return sqlite3.connect(db_path or get_db_path(), timeout=30.0)
