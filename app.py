import os
import json
import logging
from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from database import get_db_path
from models import Task, ValidationError, NotFoundError, StorageError, validate_title, parse_task_id
from task_store import TaskStore

def get_log_level():
    """Map LOG_LEVEL from the environment to a logging level, falling back to INFO for unknown names."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO

# Configure logging to show only basic info in terminal
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s [%(levelname)s] %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configuration
app.config['DB_PATH'] = get_db_path()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5000"))

# Helper functions
def get_store():
    """Build a store for the configured database; the table is created if missing."""
    return TaskStore(app.config['DB_PATH'])

def read_json_body():
    """Parse the request body as a JSON object. Returns None for an empty body or JSON null."""
    raw = request.get_data(as_text=True)
    if not raw.strip():
        return None
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError):
        raise ValidationError("Invalid JSON")
    if body is not None and not isinstance(body, dict):
        raise ValidationError("Invalid JSON")
    return body

def task_id_from_path(subpath):
    """Extract the task id from whatever follows /tasks/ in the URL."""
    segment = subpath.rstrip('/')
    if not segment or '/' in segment:
        raise ValidationError("Invalid path")
    return parse_task_id(segment)

# Error handlers
@app.errorhandler(ValidationError)
def handle_validation_error(e):
    logger.warning(f"Rejected {request.method} {request.path}: {str(e)}")
    return jsonify({'error': str(e)}), 400

@app.errorhandler(NotFoundError)
def handle_not_found(e):
    logger.warning(f"{request.method} {request.path}: {str(e)}")
    return jsonify({'error': str(e)}), 404

@app.errorhandler(StorageError)
def handle_storage_error(e):
    logger.error(f"Database error on {request.method} {request.path}: {str(e)}")
    return jsonify({'error': f'Database error: {str(e)}'}), 500

@app.errorhandler(HTTPException)
def handle_http_error(e):
    return jsonify({'error': e.name}), e.code

# API Endpoints
@app.route('/tasks', methods=['GET'])
@app.route('/tasks/', methods=['GET'])
def list_tasks():
    """List all tasks in id order."""
    logger.info("Listing all tasks")
    tasks = get_store().list_all()
    return jsonify([task.to_dict() for task in tasks]), 200

@app.route('/tasks/<path:subpath>', methods=['GET'])
def get_task(subpath):
    """Retrieve a single task by ID."""
    task_id = task_id_from_path(subpath)
    logger.info(f"Fetching task ID {task_id}")
    task = get_store().get_by_id(task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return jsonify(task.to_dict()), 200

@app.route('/tasks', methods=['POST'])
@app.route('/tasks/', methods=['POST'])
def create_task():
    """Create a new task from a JSON body with a title."""
    body = read_json_body()
    title = validate_title((body or {}).get('title'))
    task = get_store().create(title)
    return jsonify(task.to_dict()), 201

@app.route('/tasks', methods=['PUT', 'DELETE'])
@app.route('/tasks/', methods=['PUT', 'DELETE'])
def missing_task_id():
    raise ValidationError("Task ID is required")

@app.route('/tasks/<path:subpath>', methods=['PUT'])
def update_task(subpath):
    """Overwrite the title and completed flag of an existing task."""
    task_id = task_id_from_path(subpath)
    body = read_json_body()
    if body is None:
        raise ValidationError("Invalid request body")

    completed = body.get('completed', False)
    if not isinstance(completed, bool):
        raise ValidationError("Invalid request body")
    title = body.get('title')
    if title is not None and not isinstance(title, str):
        raise ValidationError("Invalid request body")

    # The id in the path always wins over one in the body
    incoming = Task(id=task_id, title=validate_title(title), completed=completed)
    store = get_store()
    if not store.update(incoming):
        raise NotFoundError("Task not found")
    updated = store.get_by_id(task_id)
    if updated is None:
        raise NotFoundError("Task not found")
    return jsonify(updated.to_dict()), 200

@app.route('/tasks/<path:subpath>', methods=['DELETE'])
def delete_task(subpath):
    """Delete a task by ID."""
    task_id = task_id_from_path(subpath)
    logger.info(f"Deleting task ID {task_id}")
    if not get_store().delete(task_id):
        raise NotFoundError("Task not found")
    return jsonify({'message': 'Task deleted successfully'}), 200

if __name__ == '__main__':
    logger.info(f"Starting server on http://{HOST}:{PORT}")
    app.run(host=HOST, port=PORT, debug=os.getenv("FLASK_DEBUG") == "1")
