import logging

from ..models.requests import TodoCreateRequest, TodoUpdateRequest, parse_body
from ..models.todo import TodoRepository, serialize_todo

logger = logging.getLogger(__name__)

NOT_FOUND = {'error': 'Todo not found'}


def list_todos():
    result = TodoRepository().list()
    if not result.ok:
        logger.error("Error fetching todos: %s", result.message)
        return result.to_response('Failed to fetch todos')
    return [serialize_todo(row) for row in result.value], 200


def create_todo(data):
    title = data.get('title') if isinstance(data, dict) else None
    if not isinstance(title, str) or not title.strip():
        return {'error': 'Title is required'}, 400

    body, errors = parse_body(TodoCreateRequest, data)
    if errors:
        return {'error': ', '.join(errors)}, 400

    result = TodoRepository().create(body.title)
    if not result.ok:
        logger.error("Error creating todo: %s", result.message)
        return result.to_response('Failed to create todo')
    return serialize_todo(result.value), 201


def get_todo(todo_id):
    result = TodoRepository().get(todo_id)
    if not result.ok:
        logger.error("Error fetching todo %s: %s", todo_id, result.message)
        return result.to_response('Failed to fetch todo')
    if not result.value:
        return NOT_FOUND, 404
    return serialize_todo(result.value), 200


def update_todo(todo_id, data):
    body, errors = parse_body(TodoUpdateRequest, data)
    if errors:
        return {'error': ', '.join(errors)}, 400

    result = TodoRepository().update(todo_id, body.changes())
    if not result.ok:
        logger.error("Error updating todo %s: %s", todo_id, result.message)
        return result.to_response('Failed to update todo')
    if not result.value:
        return NOT_FOUND, 404
    return serialize_todo(result.value), 200


def delete_todo(todo_id):
    result = TodoRepository().delete(todo_id)
    if not result.ok:
        logger.error("Error deleting todo %s: %s", todo_id, result.message)
        return result.to_response('Failed to delete todo')
    if not result.value:
        return NOT_FOUND, 404
    return {'message': 'Todo deleted successfully'}, 200
