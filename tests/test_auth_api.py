"""
Tests for the /api/auth endpoints and the bearer-token guard.

Run with:
    python -m pytest tests/test_auth_api.py
"""
import datetime
import unittest

import jwt

from gametracker.config import TestingConfig
from tests.base import ApiTestCase


class TestRegister(ApiTestCase):

    def test_register_returns_token_and_user(self):
        token, user = self.register('alice', 'Alice@Example.com ')
        self.assertTrue(token)
        self.assertEqual(user['username'], 'alice')
        self.assertEqual(user['email'], 'alice@example.com')
        self.assertEqual(user['stats'], {'totalGames': 0, 'completedGames': 0, 'averageRating': 0.0})

    def test_password_is_stored_hashed(self):
        self.register('alice', password='secret123')
        doc = self.database.users.find_one({'username': 'alice'})
        self.assertNotEqual(doc['password'], 'secret123')
        self.assertTrue(self.auth_service.verify_password('secret123', doc['password']))

    def test_duplicate_username_rejected(self):
        self.register('alice')
        resp = self.client.post('/api/auth/register', json={
            'username': 'alice', 'email': 'other@example.com', 'password': 'secret123',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'User already exists')

    def test_duplicate_email_rejected(self):
        self.register('alice', 'shared@example.com')
        resp = self.client.post('/api/auth/register', json={
            'username': 'bob', 'email': 'SHARED@example.com', 'password': 'secret123',
        })
        self.assertEqual(resp.status_code, 400)

    def test_validation_reports_first_error(self):
        resp = self.client.post('/api/auth/register', json={
            'username': 'al', 'email': 'al@example.com', 'password': 'secret123',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('username:'))

    def test_short_password_rejected(self):
        resp = self.client.post('/api/auth/register', json={
            'username': 'alice', 'email': 'alice@example.com', 'password': '123',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('password:'))

    def test_multibyte_password_over_bcrypt_limit(self):
        # 30 characters, 120 bytes once encoded
        resp = self.client.post('/api/auth/register', json={
            'username': 'alice', 'email': 'alice@example.com', 'password': '\U0001F600' * 30,
        })
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('password:'))
        self.assertIsNone(self.database.users.find_one({'username': 'alice'}))

    def test_password_at_byte_limit_accepted(self):
        token, _ = self.register('alice', password='x' * 72)
        self.assertTrue(token)

    def test_missing_body_rejected(self):
        resp = self.client.post('/api/auth/register', data='not json', content_type='text/plain')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Request body is required')


class TestLogin(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register('alice', password='secret123')

    def test_login_with_valid_credentials(self):
        resp = self.client.post('/api/auth/login', json={
            'email': 'ALICE@example.com', 'password': 'secret123',
        })
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data['user']['username'], 'alice')
        me = self.client.get('/api/auth/me', headers=self.auth(data['token']))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.get_json()['user']['username'], 'alice')

    def test_wrong_password(self):
        resp = self.client.post('/api/auth/login', json={
            'email': 'alice@example.com', 'password': 'wrong-password',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Invalid credentials')

    def test_overlong_password(self):
        resp = self.client.post('/api/auth/login', json={
            'email': 'alice@example.com', 'password': 'x' * 100,
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Invalid credentials')

    def test_verify_password_rejects_overlong_candidate(self):
        hashed = self.auth_service.hash_password('secret123')
        self.assertFalse(self.auth_service.verify_password('secret123' + 'x' * 100, hashed))

    def test_unknown_email(self):
        resp = self.client.post('/api/auth/login', json={
            'email': 'nobody@example.com', 'password': 'secret123',
        })
        self.assertEqual(resp.status_code, 400)


class TestBearerGuard(ApiTestCase):

    def test_missing_header(self):
        resp = self.client.get('/api/games/library')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['error'], 'No token, authorization denied')

    def test_garbage_token(self):
        resp = self.client.get('/api/games/library', headers=self.auth('not-a-jwt'))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['error'], 'Token is not valid')

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({'user_id': '65a000000000000000000001'}, 'other-secret', algorithm='HS256')
        resp = self.client.get('/api/users/profile', headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_expired_token(self):
        _, user = self.register('alice')
        token = jwt.encode({
            'user_id': user['id'],
            'exp': datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(minutes=1),
        }, TestingConfig.JWT_SECRET, algorithm='HS256')
        resp = self.client.get('/api/users/profile', headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_token_for_deleted_user(self):
        token, _ = self.register('alice')
        self.assertEqual(self.client.delete('/api/users/account', headers=self.auth(token)).status_code, 200)
        resp = self.client.get('/api/users/profile', headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_health_is_public(self):
        resp = self.client.get('/health')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['status'], 'ok')


if __name__ == '__main__':
    unittest.main()
