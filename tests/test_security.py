"""
Etlaq Test Suite: Credential codec
==================================
Password hashing, bearer token signing/verification, header parsing and the
auth decorators.

Usage:
    python -m pytest tests/test_security.py -v
"""
import unittest
from datetime import timedelta

import jwt
from flask import Flask, g, jsonify

from fakes import SECRET, auth_header
from etlaq.utils.auth import token_required, token_optional
from etlaq.utils.security import (
    TokenPayload, hash_password, verify_password, generate_token, verify_token,
    extract_token_from_header,
)


class TestPasswordHashing(unittest.TestCase):

    def test_hash_is_not_plaintext(self):
        hashed = hash_password('secret123', rounds=4)
        self.assertNotEqual(hashed, 'secret123')
        self.assertTrue(hashed.startswith('$2'))

    def test_verify_matching_password(self):
        hashed = hash_password('secret123', rounds=4)
        self.assertTrue(verify_password('secret123', hashed))

    def test_verify_wrong_password(self):
        hashed = hash_password('secret123', rounds=4)
        self.assertFalse(verify_password('secret124', hashed))

    def test_verify_malformed_hash_returns_false(self):
        self.assertFalse(verify_password('secret123', 'not-a-bcrypt-hash'))
        self.assertFalse(verify_password('secret123', None))


class TestTokens(unittest.TestCase):

    def setUp(self):
        self.payload = TokenPayload(user_id='u-1', email='amal@example.com', name='Amal')

    def test_roundtrip_preserves_identity(self):
        token = generate_token(self.payload, secret=SECRET)
        self.assertEqual(verify_token(token, secret=SECRET), self.payload)

    def test_claims_carry_seven_day_expiry(self):
        token = generate_token(self.payload, secret=SECRET)
        claims = jwt.decode(token, SECRET, algorithms=['HS256'])
        self.assertEqual(claims['userId'], 'u-1')
        self.assertEqual(claims['exp'] - claims['iat'], 7 * 24 * 3600)

    def test_wrong_secret_rejected(self):
        token = generate_token(self.payload, secret=SECRET)
        self.assertIsNone(verify_token(token, secret='other-secret'))

    def test_tampered_token_rejected(self):
        token = generate_token(self.payload, secret=SECRET)
        header, body, signature = token.split('.')
        forged = jwt.encode({'userId': 'admin', 'email': 'x@y.com', 'name': 'x'}, 'guess', algorithm='HS256')
        self.assertIsNone(verify_token('.'.join([header, forged.split('.')[1], signature]), secret=SECRET))

    def test_expired_token_rejected(self):
        token = generate_token(self.payload, secret=SECRET, expires_in=timedelta(seconds=-1))
        self.assertIsNone(verify_token(token, secret=SECRET))

    def test_missing_claims_rejected(self):
        token = jwt.encode({'userId': 'u-1', 'exp': 9999999999}, SECRET, algorithm='HS256')
        self.assertIsNone(verify_token(token, secret=SECRET))

    def test_token_without_expiry_rejected(self):
        token = jwt.encode(self.payload.to_claims(), SECRET, algorithm='HS256')
        self.assertIsNone(verify_token(token, secret=SECRET))

    def test_explicit_secret_needs_no_app(self):
        token = generate_token(self.payload, secret=SECRET)
        claims = jwt.decode(token, SECRET, algorithms=['HS256'])
        self.assertEqual(claims['exp'] - claims['iat'], 7 * 24 * 3600)

    def test_missing_secret_outside_app(self):
        with self.assertRaises(RuntimeError):
            generate_token(self.payload)

    def test_secret_and_expiry_read_from_app_config(self):
        app = Flask(__name__)
        app.config.update(JWT_SECRET='app-secret', JWT_EXPIRES_IN_DAYS=1)
        with app.app_context():
            token = generate_token(self.payload)
            self.assertEqual(verify_token(token), self.payload)
        claims = jwt.decode(token, 'app-secret', algorithms=['HS256'])
        self.assertEqual(claims['exp'] - claims['iat'], 24 * 3600)

    def test_garbage_rejected(self):
        self.assertIsNone(verify_token('not.a.token', secret=SECRET))
        self.assertIsNone(verify_token('', secret=SECRET))


class TestHeaderExtraction(unittest.TestCase):

    def test_bearer_value(self):
        self.assertEqual(extract_token_from_header('Bearer abc.def'), 'abc.def')

    def test_missing_header(self):
        self.assertIsNone(extract_token_from_header(None))
        self.assertIsNone(extract_token_from_header(''))

    def test_other_schemes_rejected(self):
        self.assertIsNone(extract_token_from_header('Basic dXNlcjpwYXNz'))
        self.assertIsNone(extract_token_from_header('abc.def'))
        self.assertIsNone(extract_token_from_header('Bearer '))


class TestMiddleware(unittest.TestCase):

    def setUp(self):
        app = Flask(__name__)
        app.config['JWT_SECRET'] = SECRET

        @app.route('/required')
        @token_required
        def required():
            return jsonify({'userId': g.user_id, 'email': g.user.email})

        @app.route('/optional')
        @token_optional
        def optional():
            return jsonify({'userId': g.user_id})

        @app.route('/boom')
        @token_required
        def boom():
            raise RuntimeError('kaboom')

        self.client = app.test_client()

    def test_required_sets_user(self):
        response = self.client.get('/required', headers=auth_header())
        self.assertEqual(response.get_json(), {'userId': 'user-1', 'email': 'amal@example.com'})

    def test_required_without_header(self):
        response = self.client.get('/required')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['error'], 'التوثيق مطلوب')

    def test_required_with_expired_token(self):
        response = self.client.get('/required', headers=auth_header(expires_in=timedelta(seconds=-1)))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['error'], 'الجلسة منتهية. يرجى تسجيل الدخول مرة أخرى')

    def test_view_failure_becomes_500(self):
        response = self.client.get('/boom', headers=auth_header())
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()['error'], 'حدث خطأ غير متوقع')

    def test_optional_never_rejects(self):
        self.assertEqual(self.client.get('/optional').get_json(), {'userId': None})
        self.assertEqual(self.client.get('/optional', headers={'Authorization': 'Bearer junk'}).get_json(),
                         {'userId': None})
        self.assertEqual(self.client.get('/optional', headers=auth_header()).get_json(), {'userId': 'user-1'})


if __name__ == '__main__':
    unittest.main()
