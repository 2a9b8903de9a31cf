from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from flask import current_app, has_app_context

BEARER_PREFIX = 'Bearer '


@dataclass(frozen=True)
class TokenPayload:
    """Identity carried by a bearer token: userId, email and name."""
    user_id: str
    email: str
    name: str

    def to_claims(self):
        return {'userId': self.user_id, 'email': self.email, 'name': self.name}

    @classmethod
    def from_claims(cls, claims):
        return cls(user_id=claims['userId'], email=claims['email'], name=claims['name'])


def _config(key, default=None):
    if not has_app_context():
        return default
    return current_app.config.get(key, default)


def _secret(secret):
    secret = secret or _config('JWT_SECRET')
    if not secret:
        raise RuntimeError('JWT_SECRET is not configured')
    return secret


def hash_password(password, rounds=None):
    rounds = rounds or _config('BCRYPT_ROUNDS', 12)
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds)).decode('utf-8')


def verify_password(password, hashed):
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except (ValueError, TypeError, AttributeError):
        return False


def generate_token(payload, secret=None, expires_in=None):
    secret = _secret(secret)
    expires_in = expires_in or timedelta(days=_config('JWT_EXPIRES_IN_DAYS', 7))
    now = datetime.now(timezone.utc)
    claims = payload.to_claims()
    claims.update({'iat': now, 'exp': now + expires_in})
    return jwt.encode(claims, secret, algorithm='HS256')


def verify_token(token, secret=None):
    """Return the TokenPayload for a valid token, None for anything else."""
    secret = _secret(secret)
    try:
        claims = jwt.decode(token, secret, algorithms=['HS256'], options={'require': ['exp']})
        return TokenPayload.from_claims(claims)
    except (jwt.PyJWTError, KeyError, TypeError):
        return None


def extract_token_from_header(auth_header):
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX):] or None
