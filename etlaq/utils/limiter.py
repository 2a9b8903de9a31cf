from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask import jsonify, current_app

# Define limiter at module level (without app)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100 per minute"],
    storage_uri="memory://"
)


def rate_limit():
    return current_app.config.get('RATE_LIMIT', '100 per minute')


def init_limiter(app):
    limiter.init_app(app)

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({'error': 'طلبات كثيرة. يرجى الانتظار ثم المحاولة مرة أخرى'}), 429

    return limiter
