import logging

import requests
from flask import current_app
from pydantic import ValidationError

from ..models.requests import ChatRequest, validation_messages
from ..utils.result import Ok, Err, UPSTREAM, UNCONFIGURED
from ..utils.upstream import upstream_error, upstream_timeout

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000

MESSAGES_REQUIRED = 'الرسائل مطلوبة'
INVALID_MESSAGES = 'صيغة الرسائل غير صحيحة'


def is_openrouter_configured():
    return bool(current_app.config.get('OPENROUTER_API_KEY'))


def parse_chat_request(data):
    """Validate a chat body. Returns (ChatRequest, None) or (None, message)."""
    if not isinstance(data, dict):
        return None, INVALID_MESSAGES
    messages = data.get('messages')
    if not isinstance(messages, list) or not messages:
        return None, MESSAGES_REQUIRED

    try:
        return ChatRequest.model_validate(data), None
    except ValidationError as e:
        errors = validation_messages(e)
        logger.info("Rejected chat request: %s", '; '.join(errors))
        if any(err['loc'][:1] == ('messages',) for err in e.errors()):
            return None, INVALID_MESSAGES
        return None, ', '.join(errors)


def _headers():
    config = current_app.config
    return {
        'Content-Type': 'application/json',
        'Authorization': f"Bearer {config['OPENROUTER_API_KEY']}",
        'HTTP-Referer': config.get('APP_URL', 'http://localhost:3000'),
        'X-Title': config.get('APP_TITLE', 'Etlaq App'),
    }


def _payload(chat, stream):
    config = current_app.config
    return {
        'model': chat.model or config.get('OPENROUTER_DEFAULT_MODEL', 'openai/gpt-3.5-turbo'),
        'messages': [message.model_dump() for message in chat.messages],
        'temperature': chat.temperature if chat.temperature is not None else DEFAULT_TEMPERATURE,
        'max_tokens': chat.max_tokens or DEFAULT_MAX_TOKENS,
        'stream': stream,
    }


def _post(chat, stream):
    if not is_openrouter_configured():
        return Err(UNCONFIGURED, 'OpenRouter API key not configured')

    url = f"{current_app.config['OPENROUTER_BASE_URL']}/chat/completions"
    try:
        response = requests.post(
            url,
            json=_payload(chat, stream),
            headers=_headers(),
            stream=stream,
            timeout=upstream_timeout()
        )
    except requests.RequestException as e:
        logger.error("OpenRouter request failed: %s", e)
        return Err(UPSTREAM, 'OpenRouter request failed')

    if not response.ok:
        err = upstream_error(response, 'OpenRouter request failed')
        response.close()
        logger.warning("OpenRouter returned %s: %s", response.status_code, err.message)
        return err
    return Ok(response)


def create_chat_completion(chat):
    result = _post(chat, stream=False)
    if not result.ok:
        return result
    try:
        return Ok(result.value.json())
    except ValueError:
        return Err(UPSTREAM, 'OpenRouter returned an invalid response')


def open_chat_stream(chat):
    """Open the upstream stream. Ok holds the live response, ready to relay."""
    return _post(chat, stream=True)
