from flask import Flask, jsonify
from flask_cors import CORS
from .config.config import Config
from .utils.database import init_db, init_app as init_database
from .utils.limiter import init_limiter
from .api.auth import auth_bp
from .api.profile import profile_bp
from .api.todos import todos_bp
from .api.upload import upload_bp
from .api.ai import ai_bp
from .api.grab import grab_bp


def configure_logging(app):
    import logging
    from logging.handlers import RotatingFileHandler
    import os

    # Production logging setup
    if not app.debug and not app.testing:
        log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'logs')
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(os.path.join(log_dir, 'app.log'), maxBytes=10*1024*1024, backupCount=5)
        file_handler.setLevel(logging.INFO)
        formatter = logging.Formatter('[%(asctime)s] %(levelname)s in %(module)s: %(message)s')
        file_handler.setFormatter(formatter)
        app.logger.addHandler(file_handler)
        # Service modules log through their own loggers under the package name
        logging.getLogger('etlaq').addHandler(file_handler)
        logging.getLogger('etlaq').setLevel(logging.INFO)
        app.logger.setLevel(logging.INFO)
        app.logger.info('Production logging is enabled.')


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return jsonify({'error': 'حجم الطلب يتجاوز الحد المسموح'}), 413

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.error("Unhandled error: %s", e)
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get('JWT_SECRET'):
        raise RuntimeError('Please define the JWT_SECRET environment variable inside .env')

    configure_logging(app)

    # Enable CORS for all routes
    CORS(app)

    init_database(app)
    if app.config.get('INIT_DB'):
        with app.app_context():
            init_db()
            app.logger.info("Database initialized.")

    init_limiter(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(profile_bp, url_prefix='/api')
    app.register_blueprint(todos_bp, url_prefix='/api')
    app.register_blueprint(upload_bp, url_prefix='/api')
    app.register_blueprint(ai_bp, url_prefix='/api')
    app.register_blueprint(grab_bp, url_prefix='/api')
    app.logger.info("Backend is running.")

    return app
