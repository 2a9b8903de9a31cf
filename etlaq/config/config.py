import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default):
    return os.getenv(name, default).lower() in ('true', '1', 't')


class Config:
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_EXPIRES_IN_DAYS = int(os.getenv('JWT_EXPIRES_IN_DAYS', 7))
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))
    DB_CONFIG = {
        'host': os.getenv('DB_HOST'),
        'user': os.getenv('DB_USER'),
        'password': os.getenv('DB_PASSWORD'),
        'database': os.getenv('DB_NAME')
    }
    INIT_DB = _flag('INIT_DB', 'True')
    BACKEND_URL = os.getenv('BACKEND_URL', 'localhost')
    BACKEND_PORT = int(os.getenv('BACKEND_PORT', 5000))
    DEBUG = _flag('DEBUG', 'True')
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')

    # Must stay above the 10MB upload limit
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'True')
    RATE_LIMIT = os.getenv('RATE_LIMIT', '100 per minute')

    OPENROUTER_API_KEY = os.getenv('OPENROUTER_API_KEY', '')
    OPENROUTER_BASE_URL = os.getenv('OPENROUTER_BASE_URL', 'https://openrouter.ai/api/v1')
    OPENROUTER_DEFAULT_MODEL = os.getenv('OPENROUTER_DEFAULT_MODEL', 'openai/gpt-3.5-turbo')
    APP_URL = os.getenv('APP_URL', 'http://localhost:3000')
    APP_TITLE = os.getenv('APP_TITLE', 'Etlaq App')

    CLOUDINARY_CLOUD_NAME = os.getenv('CLOUDINARY_CLOUD_NAME', '')
    CLOUDINARY_API_KEY = os.getenv('CLOUDINARY_API_KEY', '')
    CLOUDINARY_API_SECRET = os.getenv('CLOUDINARY_API_SECRET', '')

    STUDIO_API_URL = os.getenv('STUDIO_API_URL', 'https://studio.etlaq.sa')
    STUDIO_CHAT_ID = os.getenv('STUDIO_CHAT_ID', '')

    BRIDGE_HOST = os.getenv('BRIDGE_HOST', 'localhost')
    BRIDGE_PORT = int(os.getenv('BRIDGE_PORT', 4567))
    BRIDGE_MODE = os.getenv('BRIDGE_MODE', 'forward')
    BRIDGE_SESSION_TTL = int(os.getenv('BRIDGE_SESSION_TTL', 600))

    UPSTREAM_CONNECT_TIMEOUT = float(os.getenv('UPSTREAM_CONNECT_TIMEOUT', 10))
    UPSTREAM_READ_TIMEOUT = float(os.getenv('UPSTREAM_READ_TIMEOUT', 120))
