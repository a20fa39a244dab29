from unittest.mock import patch

from django.core.cache import caches
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from Profile.models import Follow, FollowStatus
from user.models import User


def login_client(user):
    client = APIClient()
    client.cookies['access'] = str(RefreshToken.for_user(user).access_token)
    return client


class FollowViewTestCase(TestCase):
    def setUp(self):
        caches['default'].clear()
        self.alice = User.objects.create_user(username='alice', email='alice@example.com', password='password123')
        self.bob = User.objects.create_user(username='bob', email='bob@example.com', password='password123')
        self.carol = User.objects.create_user(
            username='carol', email='carol@example.com', password='password123', is_private=True
        )
        self.as_alice = login_client(self.alice)
        self.as_carol = login_client(self.carol)


class FollowEndpointTests(FollowViewTestCase):
    def test_follow_public_user(self):
        response = self.as_alice.post(f'/api/follows/{self.bob.pk}/')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['message'], "Successfully followed user")
        self.assertEqual(response.data['follow']['status'], 'accepted')

    def test_follow_private_user_sends_request(self):
        response = self.as_alice.post(f'/api/follows/{self.carol.pk}/')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['message'], "Follow request sent")
        self.assertEqual(response.data['follow']['status'], 'pending')

    def test_refollow_answers_200(self):
        Follow.objects.create(followed_by=self.alice, following=self.bob, status=FollowStatus.NOT_FOLLOWING)

        response = self.as_alice.post(f'/api/follows/{self.bob.pk}/')

        self.assertEqual(response.status_code, 200)

    def test_follow_twice_is_bad_request(self):
        self.as_alice.post(f'/api/follows/{self.bob.pk}/')
        response = self.as_alice.post(f'/api/follows/{self.bob.pk}/')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], "You already follow this user")

    def test_follow_self_is_bad_request(self):
        response = self.as_alice.post(f'/api/follows/{self.alice.pk}/')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], "Cannot follow self")

    def test_follow_missing_user_is_not_found(self):
        self.assertEqual(self.as_alice.post('/api/follows/987654/').status_code, 404)

    def test_requires_authentication(self):
        self.assertEqual(APIClient().post(f'/api/follows/{self.bob.pk}/').status_code, 401)

    def test_unexpected_failure_is_internal_error(self):
        with patch('Profile.services.FollowService.follow_user', side_effect=RuntimeError("boom")):
            response = self.as_alice.post(f'/api/follows/{self.bob.pk}/')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error'], "Internal server error")


class FollowStatusEndpointTests(FollowViewTestCase):
    def test_status_for_self_is_bad_request(self):
        response = self.as_alice.get(f'/api/follows/{self.alice.pk}/status/')
        self.assertEqual(response.status_code, 400)

    def test_status_not_following(self):
        response = self.as_alice.get(f'/api/follows/{self.bob.pk}/status/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['follow_status'], 'notFollowing')

    def test_accept_request(self):
        self.as_alice.post(f'/api/follows/{self.carol.pk}/')

        response = self.as_carol.patch(f'/api/follows/{self.alice.pk}/status/', {'action': 'accept'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], "Successfully accepted follow request")
        self.assertEqual(response.data['follow']['status'], 'accepted')

    def test_wrong_current_status_is_bad_request(self):
        self.as_alice.post(f'/api/follows/{self.bob.pk}/')

        response = self.as_alice.patch(f'/api/follows/{self.bob.pk}/status/', {'action': 'cancel'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn("Expected existing status to be pending, but got accepted", response.data['error'])

    def test_missing_edge_is_not_found(self):
        response = self.as_alice.patch(f'/api/follows/{self.bob.pk}/status/', {'action': 'unfollow'}, format='json')
        self.assertEqual(response.status_code, 404)

    def test_unknown_action_is_bad_request(self):
        response = self.as_alice.patch(f'/api/follows/{self.bob.pk}/status/', {'action': 'block'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_pending_requests(self):
        self.as_alice.post(f'/api/follows/{self.carol.pk}/')

        response = self.as_carol.get('/api/follows/requests/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['pending_requests']), 1)
        self.assertEqual(response.data['pending_requests'][0]['followed_by']['username'], 'alice')
        self.assertNotIn('email', response.data['pending_requests'][0]['followed_by'])


class FollowListEndpointTests(FollowViewTestCase):
    def test_private_list_is_forbidden_to_strangers(self):
        response = self.as_alice.get(f'/api/follows/{self.carol.pk}/followedBy/')

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['reason'], 'private')

    def test_private_list_is_open_to_accepted_followers(self):
        Follow.objects.create(followed_by=self.alice, following=self.carol, status=FollowStatus.ACCEPTED)

        response = self.as_alice.get(f'/api/follows/{self.carol.pk}/followedBy/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([u['username'] for u in response.data['users']], ['alice'])
        self.assertFalse(response.data['has_more'])

    def test_own_private_list_is_open(self):
        response = self.as_carol.get(f'/api/follows/{self.carol.pk}/following/', {'loadIndex': 0})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['users'], [])

    def test_unknown_relation_is_bad_request(self):
        response = self.as_alice.get(f'/api/follows/{self.bob.pk}/friends/')
        self.assertEqual(response.status_code, 400)

    def test_missing_user_is_not_found(self):
        self.assertEqual(self.as_alice.get('/api/follows/987654/following/').status_code, 404)


class ProfileEndpointTests(FollowViewTestCase):
    def test_own_profile(self):
        response = self.as_alice.get(f'/api/users/{self.alice.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['is_self'])
        self.assertEqual(response.data['user']['email'], 'alice@example.com')
        self.assertNotIn('follow_status', response.data)

    def test_other_profile(self):
        Follow.objects.create(followed_by=self.alice, following=self.carol, status=FollowStatus.PENDING)

        response = self.as_alice.get(f'/api/users/{self.carol.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data['is_self'])
        self.assertNotIn('email', response.data['user'])
        self.assertEqual(response.data['follow_status'], 'pending')

    def test_missing_profile_is_not_found(self):
        self.assertEqual(self.as_alice.get('/api/users/987654/').status_code, 404)
