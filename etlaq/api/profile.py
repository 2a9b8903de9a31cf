from flask import Blueprint, jsonify, request
from ..utils.auth import token_required
from ..services.auth_service import get_profile, update_profile
from ..utils.limiter import limiter, rate_limit

profile_bp = Blueprint('profile', __name__)


@profile_bp.route('/protected/profile', methods=['GET'])
@limiter.limit(rate_limit)
@token_required
def profile():
    response, status = get_profile()
    return jsonify(response), status


@profile_bp.route('/protected/profile', methods=['PUT'])
@limiter.limit(rate_limit)
@token_required
def update():
    response, status = update_profile(request.get_json(silent=True))
    return jsonify(response), status
