from flask import Blueprint, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge
from ..utils.auth import token_required
from ..services.upload_service import handle_upload, handle_delete, reject_oversized_upload
from ..utils.limiter import limiter, rate_limit

upload_bp = Blueprint('upload', __name__)


@upload_bp.route('/upload', methods=['POST'])
@limiter.limit(rate_limit)
@token_required
def upload():
    try:
        file = request.files.get('file')
        folder = request.form.get('folder') or 'uploads'
    except RequestEntityTooLarge:
        response, status = reject_oversized_upload()
        return jsonify(response), status
    response, status = handle_upload(file, folder)
    return jsonify(response), status


@upload_bp.route('/upload/<path:public_id>', methods=['DELETE'])
@limiter.limit(rate_limit)
@token_required
def delete(public_id):
    response, status = handle_delete(public_id)
    return jsonify(response), status
