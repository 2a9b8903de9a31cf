from flask import current_app

from .result import Err, UPSTREAM


def upstream_timeout():
    config = current_app.config
    return (config.get('UPSTREAM_CONNECT_TIMEOUT', 10), config.get('UPSTREAM_READ_TIMEOUT', 120))


def upstream_error(response, fallback):
    """Turn a non-OK upstream response into an Err carrying its message.

    Providers answer with ``{"error": {"message": ...}}`` or ``{"error": "..."}``.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get('error') if isinstance(body, dict) else None
    message = error.get('message') if isinstance(error, dict) else error
    return Err(UPSTREAM, message or f'{fallback}: {response.status_code}')
