from unittest.mock import patch

from asgiref.sync import async_to_sync
from django.core.cache import caches
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.container import build_services
from user.errors import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    UsernameAlreadyExistsError,
)
from user.models import User
from user.utils import user_key


def login_client(user):
    client = APIClient()
    client.cookies['access'] = str(RefreshToken.for_user(user).access_token)
    return client


class UserServiceTests(TestCase):
    def setUp(self):
        caches['default'].clear()
        self.users = build_services().users
        self.alice = User.objects.create_user(username='alice', email='alice@example.com', password='password123')

    def test_register_creates_user(self):
        user = async_to_sync(self.users.register)('bob', 'bob@example.com', 'password123')
        self.assertEqual(user.username, 'bob')
        self.assertTrue(user.check_password('password123'))

    def test_register_duplicate_email(self):
        with self.assertRaises(EmailAlreadyExistsError):
            async_to_sync(self.users.register)('bob', 'ALICE@example.com', 'password123')

    def test_register_duplicate_username(self):
        with self.assertRaises(UsernameAlreadyExistsError) as ctx:
            async_to_sync(self.users.register)('alice', 'new@example.com', 'password123')
        self.assertEqual(ctx.exception.message, "Account with the username @alice already exists")

    def test_authenticate_by_username_or_email(self):
        self.assertEqual(async_to_sync(self.users.authenticate)('Alice', 'password123').pk, self.alice.pk)
        self.assertEqual(async_to_sync(self.users.authenticate)('alice@example.com', 'password123').pk, self.alice.pk)

    def test_authenticate_wrong_password(self):
        with self.assertRaises(InvalidCredentialsError):
            async_to_sync(self.users.authenticate)('alice', 'wrong-password')

    def test_authenticate_deleted_user(self):
        User.objects.filter(pk=self.alice.pk).update(is_deleted=True)
        with self.assertRaises(InvalidCredentialsError):
            async_to_sync(self.users.authenticate)('alice', 'password123')

    def test_username_availability(self):
        User.objects.create_user(username='bob', email='bob@example.com', password='password123')
        check = async_to_sync(self.users.check_username_availability)

        self.assertEqual(check('alice', 'alice'), (False, 'current'))
        self.assertEqual(check('bob', 'alice'), (False, 'taken'))
        self.assertEqual(check('carol', 'alice'), (True, None))

    def test_update_profile_writes_only_changes_and_refreshes_cache(self):
        with patch.object(self.users.identity_store, 'update', wraps=self.users.identity_store.update) as update:
            user = async_to_sync(self.users.update_profile)(self.alice, name='Alice', username='alice', bio='hello')

        update.assert_called_once()
        self.assertEqual(update.call_args.kwargs, {'name': 'Alice', 'bio': 'hello'})
        self.assertEqual(user['name'], 'Alice')
        self.assertEqual(user['email'], 'alice@example.com')
        self.assertEqual(caches['default'].get(user_key(self.alice.pk)).bio, 'hello')

    def test_update_profile_without_changes_skips_store(self):
        with patch.object(self.users.identity_store, 'update') as update:
            user = async_to_sync(self.users.update_profile)(self.alice, username='alice')
        update.assert_not_called()
        self.assertEqual(user['username'], 'alice')

    def test_update_profile_to_taken_username(self):
        User.objects.create_user(username='bob', email='bob@example.com', password='password123')
        with self.assertRaises(UsernameAlreadyExistsError):
            async_to_sync(self.users.update_profile)(self.alice, username='BOB')

    def test_update_privacy(self):
        user = async_to_sync(self.users.update_privacy)(self.alice, 'private')
        self.assertTrue(user['is_private'])
        self.assertTrue(User.objects.get(pk=self.alice.pk).is_private)

    def test_soft_delete_requires_password_and_evicts_cache(self):
        caches['default'].set(user_key(self.alice.pk), self.alice)

        with self.assertRaises(InvalidCredentialsError):
            async_to_sync(self.users.soft_delete)(self.alice, 'wrong-password')

        async_to_sync(self.users.soft_delete)(self.alice, 'password123')
        self.assertTrue(User.objects.get(pk=self.alice.pk).is_deleted)
        self.assertIsNone(caches['default'].get(user_key(self.alice.pk)))


class AuthViewTests(TestCase):
    def setUp(self):
        caches['default'].clear()
        self.client = APIClient()
        self.alice = User.objects.create_user(username='alice', email='alice@example.com', password='password123')

    def test_signup_sets_cookies(self):
        response = self.client.post('/api/auth/signup/', {
            'username': 'Bob_1', 'email': 'bob@example.com', 'password': 'password123',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['user']['username'], 'bob_1')
        self.assertIn('access', response.cookies)
        self.assertIn('refresh', response.cookies)
        self.assertTrue(response.cookies['access']['httponly'])

    def test_signup_rejects_underscore_only_username(self):
        response = self.client.post('/api/auth/signup/', {
            'username': '____', 'email': 'bob@example.com', 'password': 'password123',
        }, format='json')
        self.assertEqual(response.status_code, 400)

    def test_signup_duplicate_username_conflicts(self):
        response = self.client.post('/api/auth/signup/', {
            'username': 'alice', 'email': 'other@example.com', 'password': 'password123',
        }, format='json')
        self.assertEqual(response.status_code, 409)

    def test_login_and_me(self):
        response = self.client.post('/api/auth/login/', {
            'identifier': 'alice@example.com', 'password': 'password123',
        }, format='json')
        self.assertEqual(response.status_code, 200)

        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data['user']['email'], 'alice@example.com')

    def test_login_bad_credentials(self):
        response = self.client.post('/api/auth/login/', {
            'identifier': 'alice', 'password': 'nope-nope',
        }, format='json')
        self.assertEqual(response.status_code, 401)
        self.assertNotIn('access', response.cookies)

    def test_requests_without_cookie_are_unauthorized(self):
        self.assertIn(self.client.get('/api/auth/me/').status_code, (401, 403))

    def test_refresh_rotates_tokens(self):
        refresh = RefreshToken.for_user(self.alice)
        self.client.cookies['refresh'] = str(refresh)

        response = self.client.post('/api/auth/refresh/')

        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(response.cookies['refresh'].value, str(refresh))

    def test_logout_clears_cookies(self):
        client = login_client(self.alice)
        client.cookies['refresh'] = str(RefreshToken.for_user(self.alice))

        response = client.post('/api/auth/logout/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies['access'].value, '')


class AccountViewTests(TestCase):
    def setUp(self):
        caches['default'].clear()
        self.alice = User.objects.create_user(username='alice', email='alice@example.com', password='password123')
        User.objects.create_user(username='bob', email='bob@example.com', password='password123')
        self.client = login_client(self.alice)

    def test_check_username(self):
        available = self.client.get('/api/users/check-username/', {'username': 'carol'})
        taken = self.client.get('/api/users/check-username/', {'username': 'BOB'})
        current = self.client.get('/api/users/check-username/', {'username': 'alice'})

        self.assertEqual(available.status_code, 200)
        self.assertTrue(available.data['available'])
        self.assertEqual(taken.status_code, 409)
        self.assertEqual(taken.data['reason'], 'taken')
        self.assertEqual(current.status_code, 409)
        self.assertEqual(current.data['reason'], 'current')

    def test_update_profile(self):
        response = self.client.patch('/api/users/me/', {'name': 'Alice', 'bio': 'hi'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['bio'], 'hi')

    def test_update_profile_requires_a_field(self):
        response = self.client.patch('/api/users/me/', {}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_update_profile_taken_username(self):
        response = self.client.patch('/api/users/me/', {'username': 'bob'}, format='json')
        self.assertEqual(response.status_code, 409)

    def test_update_privacy(self):
        response = self.client.patch('/api/users/privacy/', {'toggle_option': 'private'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['user']['is_private'])

    def test_delete_account_locks_out_token(self):
        response = self.client.delete('/api/users/me/', {'password': 'password123'}, format='json')
        self.assertEqual(response.status_code, 200)

        client = login_client(User.objects.get(pk=self.alice.pk))
        self.assertEqual(client.get('/api/auth/me/').status_code, 401)
