"""
Generic JSON client with a timeout and bounded retries.

Client errors (4xx) and timeouts fail immediately; anything else is retried
after ``retry_delay * (attempt + 1)`` seconds.

Example:
    todos = api_client.get('https://example.com/api/todos', retries=2)
"""
import logging
import time

import requests

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(self, message, status=None, code=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


def _error_from(response):
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get('error') or body.get('message') or f'Request failed with status {response.status_code}'
    return ApiClientError(message, response.status_code, body.get('code'))


def api_request(method, url, timeout=30, retries=0, retry_delay=1.0, session=None, **kwargs):
    http = session or requests
    last_error = None

    for attempt in range(retries + 1):
        try:
            response = http.request(method, url, timeout=timeout, **kwargs)
            if not response.ok:
                raise _error_from(response)
            return response.json()
        except ApiClientError as e:
            if e.status and 400 <= e.status < 500:
                raise
            last_error = e
        except requests.Timeout:
            raise ApiClientError('Request timeout', 408, 'TIMEOUT')
        except (requests.RequestException, ValueError) as e:
            last_error = ApiClientError(str(e) or 'Request failed', 500)

        if attempt < retries:
            delay = retry_delay * (attempt + 1)
            logger.warning("Attempt %s/%s for %s %s failed (%s). Retrying in %.1fs",
                           attempt + 1, retries + 1, method, url, last_error, delay)
            time.sleep(delay)

    raise last_error or ApiClientError('Request failed', 500)


def get(url, **kwargs):
    return api_request('GET', url, **kwargs)


def post(url, data, **kwargs):
    return api_request('POST', url, json=data, **kwargs)


def put(url, data, **kwargs):
    return api_request('PUT', url, json=data, **kwargs)


def delete(url, **kwargs):
    return api_request('DELETE', url, **kwargs)
