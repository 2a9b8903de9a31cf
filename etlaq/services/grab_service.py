import logging

import requests
from flask import current_app

from ..models.requests import GrabRequest, parse_body
from ..utils.result import Ok, Err, UPSTREAM, UNCONFIGURED, PROXY
from ..utils.upstream import upstream_timeout

logger = logging.getLogger(__name__)


def is_studio_configured():
    config = current_app.config
    return bool(config.get('STUDIO_CHAT_ID') and config.get('STUDIO_API_URL'))


def build_grab_request(data, chat_id):
    """Body for the studio's grab endpoint, or None for a malformed request."""
    body, errors = parse_body(GrabRequest, data)
    if errors:
        return None
    return {'chatId': chat_id, 'context': body.context, 'prompt': body.prompt}


def forward_to_studio(grab_request, timeout=None):
    """Open a streaming POST to the studio. Ok holds the live response."""
    if not is_studio_configured():
        return Err(UNCONFIGURED, 'STUDIO_CHAT_ID or STUDIO_API_URL not set')

    timeout = timeout or upstream_timeout()
    logger.info("Forwarding grab request for chat %s (component: %s)",
                grab_request['chatId'], grab_request['context'].get('componentName'))
    try:
        response = requests.post(
            f"{current_app.config['STUDIO_API_URL']}/api/grab",
            json=grab_request,
            stream=True,
            timeout=timeout
        )
    except requests.RequestException as e:
        logger.error("Studio request failed: %s", e)
        return Err(PROXY, str(e))

    if not response.ok:
        details = response.text
        response.close()
        logger.error("Studio error %s: %s", response.status_code, details)
        return Err(UPSTREAM, details, response.status_code)
    return Ok(response)
