from flask import Blueprint, jsonify, request, current_app
from ..services.grab_service import is_studio_configured, build_grab_request, forward_to_studio
from ..utils.result import UPSTREAM
from ..utils.sse import relay, sse_response

grab_bp = Blueprint('grab', __name__)


@grab_bp.route('/grab', methods=['POST'])
def grab():
    if current_app.config.get('ENVIRONMENT') != 'development':
        return jsonify({'error': 'This endpoint is only available in development mode'}), 403

    if not is_studio_configured():
        current_app.logger.error("React-grab proxy is missing STUDIO_CHAT_ID or STUDIO_API_URL")
        return jsonify({
            'error': 'React-grab integration not configured',
            'details': 'STUDIO_CHAT_ID or STUDIO_API_URL not set'
        }), 503

    grab_request = build_grab_request(request.get_json(silent=True), current_app.config['STUDIO_CHAT_ID'])
    if grab_request is None:
        return jsonify({'error': 'Invalid request body'}), 400

    result = forward_to_studio(grab_request)
    if not result.ok:
        error = 'Studio request failed' if result.kind == UPSTREAM else 'Proxy error'
        return jsonify({'error': error, 'details': result.message}), result.status
    return sse_response(relay(result.value))
