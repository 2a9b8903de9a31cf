import logging
from functools import wraps

from flask import request, jsonify, g
from werkzeug.exceptions import HTTPException

from .security import extract_token_from_header, verify_token

logger = logging.getLogger(__name__)

AUTH_REQUIRED = 'التوثيق مطلوب'
SESSION_EXPIRED = 'الجلسة منتهية. يرجى تسجيل الدخول مرة أخرى'
UNEXPECTED_ERROR = 'حدث خطأ غير متوقع'


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = extract_token_from_header(request.headers.get('Authorization'))
        if not token:
            return jsonify({'error': AUTH_REQUIRED}), 401

        payload = verify_token(token)
        if payload is None:
            return jsonify({'error': SESSION_EXPIRED}), 401

        g.user = payload
        g.user_id = payload.user_id
        try:
            return f(*args, **kwargs)
        except HTTPException:
            raise
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return jsonify({'error': UNEXPECTED_ERROR}), 500
    return decorated


def token_optional(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = extract_token_from_header(request.headers.get('Authorization'))
        g.user = verify_token(token) if token else None
        g.user_id = g.user.user_id if g.user else None
        return f(*args, **kwargs)
    return decorated
