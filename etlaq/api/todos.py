from flask import Blueprint, jsonify, request
from ..services.todo_service import list_todos, create_todo, get_todo, update_todo, delete_todo
from ..utils.limiter import limiter, rate_limit

todos_bp = Blueprint('todos', __name__)


@todos_bp.route('/todos', methods=['GET'])
@limiter.limit(rate_limit)
def index():
    response, status = list_todos()
    return jsonify(response), status


@todos_bp.route('/todos', methods=['POST'])
@limiter.limit(rate_limit)
def create():
    response, status = create_todo(request.get_json(silent=True))
    return jsonify(response), status


@todos_bp.route('/todos/<todo_id>', methods=['GET'])
@limiter.limit(rate_limit)
def show(todo_id):
    response, status = get_todo(todo_id)
    return jsonify(response), status


@todos_bp.route('/todos/<todo_id>', methods=['PUT'])
@limiter.limit(rate_limit)
def update(todo_id):
    response, status = update_todo(todo_id, request.get_json(silent=True))
    return jsonify(response), status


@todos_bp.route('/todos/<todo_id>', methods=['DELETE'])
@limiter.limit(rate_limit)
def destroy(todo_id):
    response, status = delete_todo(todo_id)
    return jsonify(response), status
