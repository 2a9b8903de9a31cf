"""
Development bridge between a react-grab client and the Etlaq studio.

Runs as its own process (``python run_bridge.py``) on port 4567:

    GET  /health              status and whether the studio chat id is set
    POST /agent               stream a grab request as Server-Sent Events
    POST /abort/<session_id>  cancel an in-flight /agent stream

In ``forward`` mode /agent relays the studio's stream; in ``echo`` mode it
answers with a single ``agent`` event carrying the request for the caller to
relay further.
"""
import logging
import uuid

from flask import Blueprint, Flask, current_app, jsonify, request, stream_with_context
from flask_cors import CORS
import requests

from ..config.config import Config
from ..models.requests import AgentRequest, parse_body
from ..services.grab_service import forward_to_studio
from ..utils.sse import iter_upstream, sse_event, sse_response
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

bridge_bp = Blueprint('bridge', __name__)


def get_registry() -> SessionRegistry:
    return current_app.extensions['bridge_sessions']


@bridge_bp.route('/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'ok',
        'provider': 'etlaq-studio',
        'chatId': 'configured' if current_app.config.get('STUDIO_CHAT_ID') else 'missing',
        'sessions': len(get_registry()),
    })


@bridge_bp.route('/abort/<session_id>', methods=['POST'])
def abort(session_id):
    get_registry().abort(session_id)
    return jsonify({'aborted': True})


@bridge_bp.route('/agent', methods=['POST'])
def agent():
    forward = current_app.config.get('BRIDGE_MODE', 'forward') == 'forward'
    if forward and not current_app.config.get('STUDIO_CHAT_ID'):
        return jsonify({
            'error': 'STUDIO_CHAT_ID not configured',
            'message': 'React-grab integration not available'
        }), 503

    body, errors = parse_body(AgentRequest, request.get_json(silent=True))
    if errors:
        logger.warning("Rejected agent request: %s", '; '.join(errors))
        return jsonify({'error': 'Invalid request body'}), 400

    registry = get_registry()
    session = registry.register(body.session_id or str(uuid.uuid4()))
    logger.info("New session: %s (component: %s, prompt: %s)", session.session_id,
                body.context.get('componentName'), body.resolved_prompt()[:100])

    stream = _forward_stream if forward else _echo_stream
    return sse_response(stream_with_context(stream(registry, session, body)))


def _echo_stream(registry, session, body):
    try:
        yield sse_event({
            'type': 'agent',
            'sessionId': session.session_id,
            'context': body.context,
            'prompt': body.resolved_prompt(),
        })
        yield sse_event({'type': 'complete', 'sessionId': session.session_id})
    finally:
        registry.remove(session.session_id, session)


def _forward_stream(registry, session, body):
    try:
        result = forward_to_studio({
            'chatId': current_app.config['STUDIO_CHAT_ID'],
            'context': body.context,
            'prompt': body.resolved_prompt(),
        })
        if not result.ok:
            if not session.cancelled.is_set():
                yield sse_event({'type': 'error', 'error': result.message})
            return

        upstream = result.value
        session.attach(upstream)
        try:
            yield from iter_upstream(upstream, session.cancelled)
        except (requests.RequestException, OSError, AttributeError) as e:
            # An abort closes the upstream under the relay loop; that is not an error
            if not session.cancelled.is_set():
                logger.error("Session %s stream failed: %s", session.session_id, e)
                yield sse_event({'type': 'error', 'error': str(e)})
            return
        finally:
            upstream.close()

        if not session.cancelled.is_set():
            yield sse_event({'type': 'complete', 'sessionId': session.session_id})
    finally:
        registry.remove(session.session_id, session)


def create_bridge_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    CORS(app, methods=['GET', 'POST', 'OPTIONS'])

    app.extensions['bridge_sessions'] = SessionRegistry(ttl=app.config.get('BRIDGE_SESSION_TTL', 600))
    app.register_blueprint(bridge_bp)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    return app
