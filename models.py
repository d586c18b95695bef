import re
from dataclasses import dataclass, asdict

TASK_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
MIN_TASK_ID = -2**31
MAX_TASK_ID = 2**31 - 1


class ValidationError(Exception):
    """Custom exception for malformed client input."""
    pass

class NotFoundError(Exception):
    """Custom exception for a task id with no matching row."""
    pass

class StorageError(Exception):
    """Custom exception for database connection and statement failures."""
    pass


@dataclass
class Task:
    """A single to-do item as stored in the tasks table."""
    id: int
    title: str
    completed: bool = False

    @classmethod
    def from_row(cls, row):
        """Build a Task from an (id, title, completed) row."""
        return cls(id=int(row[0]), title=row[1], completed=bool(row[2]))

    def to_dict(self):
        return asdict(self)


def validate_title(title):
    """Return the trimmed title, raising ValidationError if it is missing or blank."""
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()

def parse_task_id(raw):
    """Parse a path segment into a task id: optional sign, ASCII digits, signed 32-bit range."""
    if not isinstance(raw, str) or not TASK_ID_PATTERN.fullmatch(raw):
        raise ValidationError("Invalid task ID")
    task_id = int(raw)
    if not MIN_TASK_ID <= task_id <= MAX_TASK_ID:
        raise ValidationError("Invalid task ID")
    return task_id
