"""
Shared test doubles: a test config, in-memory repositories with the same
Ok/Err contract as the MySQL ones, and a stand-in for ``requests.Response``.
"""
import json
import os
import sys
import uuid
from datetime import datetime, timedelta

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from etlaq.config.config import Config
from etlaq.utils.result import Ok, Err, CONFLICT, STORE
from etlaq.utils.security import TokenPayload, generate_token

SECRET = 'test-secret'


class UnitTestConfig(Config):
    TESTING = True
    DEBUG = False
    JWT_SECRET = SECRET
    BCRYPT_ROUNDS = 4
    INIT_DB = False
    RATELIMIT_ENABLED = False
    ENVIRONMENT = 'development'
    OPENROUTER_API_KEY = ''
    OPENROUTER_BASE_URL = 'https://openrouter.test/api/v1'
    CLOUDINARY_CLOUD_NAME = ''
    CLOUDINARY_API_KEY = ''
    CLOUDINARY_API_SECRET = ''
    STUDIO_API_URL = 'https://studio.test'
    STUDIO_CHAT_ID = ''
    BRIDGE_MODE = 'forward'
    BRIDGE_SESSION_TTL = 600


def auth_header(user_id='user-1', email='amal@example.com', name='Amal', **kwargs):
    token = generate_token(TokenPayload(user_id, email, name), secret=SECRET, **kwargs)
    return {'Authorization': f'Bearer {token}'}


class _Clock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0)

    def tick(self):
        self.now += timedelta(milliseconds=1)
        return self.now


class FakeUserRepository:
    def __init__(self):
        self.rows = {}
        self.clock = _Clock()
        self.fail = False

    def _guard(self):
        return Err(STORE, 'store unavailable') if self.fail else None

    def find_by_id(self, user_id):
        return self._guard() or Ok(self.rows.get(user_id))

    def find_by_email(self, email):
        if self.fail:
            return self._guard()
        return Ok(next((row for row in self.rows.values() if row['email'] == email.lower()), None))

    def create(self, email, password_hash, name):
        if self.fail:
            return self._guard()
        if any(row['email'] == email for row in self.rows.values()):
            return Err(CONFLICT, 'User with this email already exists')
        now = self.clock.tick()
        row = {'id': str(uuid.uuid4()), 'email': email, 'password_hash': password_hash,
               'name': name, 'created_at': now, 'updated_at': now}
        self.rows[row['id']] = row
        return Ok(row)

    def update_name(self, user_id, name):
        if self.fail:
            return self._guard()
        row = self.rows.get(user_id)
        if row is None:
            return Ok(None)
        row.update(name=name, updated_at=self.clock.tick())
        return Ok(row)


class FakeTodoRepository:
    def __init__(self):
        self.rows = {}
        self.clock = _Clock()
        self.fail = False

    def list(self):
        if self.fail:
            return Err(STORE, 'store unavailable')
        return Ok(sorted(self.rows.values(), key=lambda row: row['created_at'], reverse=True))

    def get(self, todo_id):
        if self.fail:
            return Err(STORE, 'store unavailable')
        return Ok(self.rows.get(todo_id))

    def create(self, title, completed=False):
        if self.fail:
            return Err(STORE, 'store unavailable')
        now = self.clock.tick()
        row = {'id': str(uuid.uuid4()), 'title': title, 'completed': int(completed),
               'created_at': now, 'updated_at': now}
        self.rows[row['id']] = row
        return Ok(dict(row))

    def update(self, todo_id, changes):
        if self.fail:
            return Err(STORE, 'store unavailable')
        row = self.rows.get(todo_id)
        if row is None:
            return Ok(None)
        row.update({k: v for k, v in changes.items() if k in ('title', 'completed')})
        row['updated_at'] = self.clock.tick()
        return Ok(dict(row))

    def delete(self, todo_id):
        if self.fail:
            return Err(STORE, 'store unavailable')
        return Ok(self.rows.pop(todo_id, None) is not None)


class FakeResponse:
    """Enough of requests.Response for the proxy code paths."""

    def __init__(self, status_code=200, body=None, chunks=None, text=None, fail_after=None):
        self.status_code = status_code
        self._body = body
        self._chunks = chunks or []
        self._text = text
        self._fail_after = fail_after
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._body) if self._body is not None else ''

    def json(self):
        if self._body is None:
            raise ValueError('No JSON body')
        return self._body

    def iter_content(self, chunk_size=None):
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise requests.ConnectionError('connection reset')
            yield chunk

    def close(self):
        self.closed = True
