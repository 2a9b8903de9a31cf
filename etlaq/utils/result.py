"""Explicit success/failure values for store and provider calls.

Repositories and provider clients hand back ``Ok`` or ``Err`` instead of
raising, so each service decides how a failure maps onto a response.
"""
from dataclasses import dataclass
from typing import Any, ClassVar

VALIDATION = 'validation'
UNAUTHORIZED = 'unauthorized'
NOT_FOUND = 'not_found'
CONFLICT = 'conflict'
UPSTREAM = 'upstream'
UNCONFIGURED = 'unconfigured'
STORE = 'store'
PROXY = 'proxy'

_STATUS = {
    VALIDATION: 400,
    UNAUTHORIZED: 401,
    NOT_FOUND: 404,
    CONFLICT: 409,
    UPSTREAM: 502,
    UNCONFIGURED: 503,
    STORE: 500,
    PROXY: 500,
}


@dataclass(frozen=True)
class Ok:
    value: Any = None
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    kind: str
    message: str = ''
    status: int = 0
    ok: ClassVar[bool] = False

    def __post_init__(self):
        if not self.status:
            object.__setattr__(self, 'status', _STATUS.get(self.kind, 500))

    def to_response(self, message=None):
        return {'error': message or self.message}, self.status
