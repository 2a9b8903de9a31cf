import logging
from datetime import datetime, timezone

from flask import g

from ..models.requests import RegisterRequest, LoginRequest, ProfileUpdateRequest, parse_body
from ..models.user import UserRepository, public_user
from ..utils.result import CONFLICT
from ..utils.security import TokenPayload, hash_password, verify_password, generate_token

logger = logging.getLogger(__name__)


def _issue_token(user):
    return generate_token(TokenPayload(user_id=user['id'], email=user['email'], name=user['name']))


def register_user(data):
    if not isinstance(data, dict) or not all(data.get(key) for key in ('email', 'password', 'name')):
        return {'error': 'Email, password, and name are required'}, 400

    body, errors = parse_body(RegisterRequest, data)
    if errors:
        return {'error': ', '.join(errors)}, 400

    users = UserRepository()
    existing = users.find_by_email(body.email)
    if not existing.ok:
        return existing.to_response('Internal server error')
    if existing.value:
        return {'error': 'User with this email already exists'}, 409

    created = users.create(body.email, hash_password(body.password), body.name)
    if not created.ok:
        if created.kind == CONFLICT:
            return created.to_response()
        logger.error("Registration failed for %s: %s", body.email, created.message)
        return created.to_response('Internal server error')

    user = created.value
    logger.info("Registered user %s", user['id'])
    return {
        'message': 'User created successfully',
        'token': _issue_token(user),
        'user': public_user(user)
    }, 201


def login_user(data):
    body, errors = parse_body(LoginRequest, data)
    if errors:
        return {'error': 'البريد الإلكتروني وكلمة المرور مطلوبان'}, 400

    found = UserRepository().find_by_email(body.email)
    if not found.ok:
        logger.error("Login lookup failed: %s", found.message)
        return found.to_response('حدث خطأ غير متوقع')

    user = found.value
    if not user or not verify_password(body.password, user['password_hash']):
        return {'error': 'البريد الإلكتروني أو كلمة المرور غير صحيحة'}, 401

    return {
        'message': 'تم تسجيل الدخول بنجاح',
        'token': _issue_token(user),
        'user': public_user(user)
    }, 200


def get_current_user():
    found = UserRepository().find_by_id(g.user_id)
    if not found.ok:
        logger.error("Fetching user %s failed: %s", g.user_id, found.message)
        return found.to_response('حدث خطأ غير متوقع')
    if not found.value:
        return {'error': 'المستخدم غير موجود'}, 404

    user = public_user(found.value, with_timestamps=True)
    user.pop('updatedAt')
    return {'user': user}, 200


def get_profile():
    found = UserRepository().find_by_id(g.user_id)
    if not found.ok:
        return found.to_response('Internal server error')
    if not found.value:
        return {'error': 'User not found'}, 404

    return {
        'message': 'Protected route accessed successfully',
        'user': public_user(found.value, with_timestamps=True),
        'timestamp': datetime.now(timezone.utc).isoformat()
    }, 200


def update_profile(data):
    if not isinstance(data, dict) or not isinstance(data.get('name'), str) or not data['name'].strip():
        return {'error': 'Name is required'}, 400

    body, errors = parse_body(ProfileUpdateRequest, data)
    if errors:
        return {'error': ', '.join(errors)}, 400

    updated = UserRepository().update_name(g.user_id, body.name)
    if not updated.ok:
        logger.error("Profile update for %s failed: %s", g.user_id, updated.message)
        return updated.to_response('Internal server error')
    if not updated.value:
        return {'error': 'User not found'}, 404

    return {
        'message': 'Profile updated successfully',
        'user': public_user(updated.value, with_timestamps=True)
    }, 200
