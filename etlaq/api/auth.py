from flask import Blueprint, request, jsonify
from ..services.auth_service import login_user, register_user, get_current_user
from ..utils.auth import token_required
from ..utils.limiter import limiter, rate_limit

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/auth/login', methods=['POST'])
@limiter.limit(rate_limit)
def login():
    data = request.get_json(silent=True)
    response, status = login_user(data)
    return jsonify(response), status


@auth_bp.route('/auth/register', methods=['POST'])
@limiter.limit(rate_limit)
def register():
    data = request.get_json(silent=True)
    response, status = register_user(data)
    return jsonify(response), status


@auth_bp.route('/auth/me', methods=['GET'])
@limiter.limit(rate_limit)
@token_required
def me():
    response, status = get_current_user()
    return jsonify(response), status
