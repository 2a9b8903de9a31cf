from flask import Blueprint, jsonify, request
from ..utils.auth import token_required
from ..services.chat_service import (
    is_openrouter_configured, parse_chat_request, open_chat_stream, create_chat_completion
)
from ..utils.limiter import limiter, rate_limit
from ..utils.sse import relay, sse_response

ai_bp = Blueprint('ai', __name__)


@ai_bp.route('/ai/chat', methods=['POST'])
@limiter.limit(rate_limit)
@token_required
def chat():
    if not is_openrouter_configured():
        return jsonify({'error': 'خدمة الذكاء الاصطناعي غير مفعّلة'}), 503

    chat_request, error = parse_chat_request(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400

    if chat_request.stream:
        result = open_chat_stream(chat_request)
        if not result.ok:
            response, status = result.to_response()
            return jsonify(response), status
        return sse_response(relay(result.value))

    result = create_chat_completion(chat_request)
    response, status = result.to_response() if not result.ok else (result.value, 200)
    return jsonify(response), status
