"""Server-Sent Events helpers shared by the chat proxy, the grab proxy and the bridge."""
import json
import logging

import requests
from flask import Response

logger = logging.getLogger(__name__)

# Connection is hop-by-hop and left to the WSGI server
SSE_HEADERS = {
    'Cache-Control': 'no-cache',
}


def sse_event(payload):
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n".encode('utf-8')


def iter_upstream(upstream, cancelled=None):
    """Yield the raw upstream body, stopping early once ``cancelled`` is set."""
    for chunk in upstream.iter_content(chunk_size=None):
        if cancelled is not None and cancelled.is_set():
            return
        if chunk:
            yield chunk


def relay(upstream, cancelled=None):
    """Yield the upstream body unchanged, chunk by chunk.

    A transport failure ends the stream with a single error event. When
    ``cancelled`` is given and set, the relay stops quietly.
    """
    try:
        yield from iter_upstream(upstream, cancelled)
    except (requests.RequestException, OSError, AttributeError) as e:
        # Closing the upstream from another thread surfaces here as well
        if cancelled is not None and cancelled.is_set():
            return
        logger.warning("Upstream stream failed: %s", e)
        yield sse_event({'type': 'error', 'error': str(e)})
    finally:
        upstream.close()


def sse_response(body):
    return Response(body, mimetype='text/event-stream', headers=SSE_HEADERS)


def parse_sse_chunk(chunk):
    """Pull the delta text out of a chat-completion SSE chunk.

    Returns None once the ``[DONE]`` marker is seen and an empty string when
    the chunk carries no content.
    """
    for line in chunk.split('\n'):
        if not line.startswith('data: '):
            continue
        data = line[len('data: '):]
        if data == '[DONE]':
            return None
        try:
            parsed = json.loads(data)
        except ValueError:
            continue
        if not isinstance(parsed, dict):
            return ''
        choices = parsed.get('choices')
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ''
        delta = choices[0].get('delta')
        content = delta.get('content') if isinstance(delta, dict) else None
        return content if isinstance(content, str) else ''
    return ''
