"""
Staff accounts: invite-code registration, login, JWT and user administration.
"""
import datetime
from unittest import mock

import pytest
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from dental.exceptions import ConflictError
from dental.models import AuditEvent, InviteCode, User
from dental.services import accounts

pytestmark = pytest.mark.django_db


class RegistrationTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='admin1', password='P@ssw0rd1', role='admin')
        self.invite = accounts.create_invite(created_by=self.admin, role=User.ROLE_DENTIST, code='dent2024')

    def _register(self, **overrides):
        payload = {
            'email': 'Sarah.Kimaro@Example.com',
            'password': 'Molar#Strong77',
            'fullName': 'Sarah Kimaro',
            'inviteCode': 'DENT2024',
        }
        payload.update(overrides)
        return self.client.post('/api/auth/register', payload, format='json')

    def test_invite_code_is_uppercased(self):
        self.assertEqual(self.invite.code, 'DENT2024')

    def test_register_uses_invite_role_and_counts_use(self):
        r = self._register(role='admin')
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.data['role'], 'dentist')
        self.assertTrue(r.data['token'])
        user = User.objects.get(email='sarah.kimaro@example.com')
        self.assertEqual(user.username, 'sarah.kimaro@example.com')
        self.assertEqual(user.get_full_name(), 'Sarah Kimaro')
        self.invite.refresh_from_db()
        self.assertEqual(self.invite.uses_count, 1)
        self.assertTrue(AuditEvent.objects.filter(action='staff_register', user=user).exists())

    def test_invite_exhausted_after_max_uses(self):
        self.assertEqual(self._register().status_code, 201)
        r = self._register(email='second@example.com')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data['detail'], 'Invite code has reached maximum uses')

    def test_expired_invite_rejected(self):
        self.invite.expires_at = timezone.now() - datetime.timedelta(minutes=1)
        self.invite.save()
        r = self._register()
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data['detail'], 'Invite code has expired')

    def test_inactive_or_unknown_invite_rejected(self):
        accounts.deactivate_invite(self.invite, actor=self.admin)
        r = self._register()
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data['detail'], 'Invalid or inactive invite code')
        r = self._register(inviteCode='NOPE')
        self.assertEqual(r.data['detail'], 'Invalid or inactive invite code')

    def test_duplicate_email_is_conflict(self):
        self.invite.max_uses = 5
        self.invite.save()
        self.assertEqual(self._register().status_code, 201)
        r = self._register(email='SARAH.KIMARO@example.com')
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data['error']['code'], 'conflict')

    def test_audit_failure_does_not_undo_registration(self):
        with mock.patch('dental.services.accounts.log_action', side_effect=DatabaseError('audit insert failed')):
            r = self._register()
        self.assertEqual(r.status_code, 201)
        self.assertTrue(User.objects.filter(email='sarah.kimaro@example.com').exists())
        self.invite.refresh_from_db()
        self.assertEqual(self.invite.uses_count, 1)

    def test_weak_password_rejected(self):
        r = self._register(password='123')
        self.assertEqual(r.status_code, 400)
        self.invite.refresh_from_db()
        self.assertEqual(self.invite.uses_count, 0)


def test_duplicate_invite_code_raises(admin_user):
    accounts.create_invite(created_by=admin_user, role='receptionist', code='FRONT1')
    with pytest.raises(ConflictError):
        accounts.create_invite(created_by=admin_user, role='receptionist', code='front1')


def test_generated_invite_code_shape(admin_user):
    invite = accounts.create_invite(created_by=admin_user, role='technician')
    assert len(invite.code) == 8
    assert invite.code == invite.code.upper()


def test_no_role_bypass_in_login():
    client = APIClient()
    u = User.objects.create_user(username='u1', password='P@ssw0rd1', role='receptionist')
    r = client.post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'receptionist'
    u.refresh_from_db()
    assert u.role == 'receptionist'


def test_login_by_email_returns_jwt_and_token():
    client = APIClient()
    User.objects.create_user(username='rehema', email='rehema@example.com', password='P@ssw0rd1', role='receptionist')
    r = client.post(reverse('login_view'), {'email': 'Rehema@Example.com', 'password': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 200
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']

    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    me = client.get('/api/auth/me')
    assert me.status_code == 200
    assert me.data['user']['username'] == 'rehema'


def test_bad_login_is_audited():
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'ghost', 'password': 'x'}, format='json')
    assert r.status_code == 400
    assert r.data['detail'] == 'Invalid username or password'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').count() == 1


def test_jwt_refresh_and_logout():
    client = APIClient()
    User.objects.create_user(username='u2', password='P@ssw0rd1', role='dentist')
    r = client.post(reverse('login_view'), {'username': 'u2', 'password': 'P@ssw0rd1'}, format='json')
    refresh = r.data['jwt_refresh']

    r2 = client.post('/api/auth/refresh', {'refresh': refresh}, format='json')
    assert r2.status_code == 200
    assert 'jwt_access' in r2.data

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r2.data['jwt_access']}")
    out = client.post('/api/auth/logout', {}, format='json')
    assert out.status_code == 200
    assert out.data['ok'] is True


def test_anonymous_request_is_rejected():
    r = APIClient().get('/api/patients')
    assert r.status_code == 401


def test_user_admin_is_admin_only(client_for, admin_user, receptionist):
    assert client_for(receptionist).get('/api/users').status_code == 403
    r = client_for(admin_user).get('/api/users', {'role': 'receptionist'})
    assert r.status_code == 200
    assert [u['username'] for u in r.data['data']] == ['reception1']


def test_set_role_is_audited(client_for, admin_user, receptionist):
    r = client_for(admin_user).post(f'/api/users/{receptionist.id}/role', {'role': 'finance_manager'}, format='json')
    assert r.status_code == 200
    receptionist.refresh_from_db()
    assert receptionist.role == 'finance_manager'
    ev = AuditEvent.objects.get(action='role_change')
    assert ev.detail == {'from': 'receptionist', 'to': 'finance_manager'}


def test_admin_cannot_delete_self(client_for, admin_user, receptionist):
    client = client_for(admin_user)
    assert client.delete(f'/api/users/{admin_user.id}').status_code == 403
    assert client.delete(f'/api/users/{receptionist.id}').status_code == 200
    assert not User.objects.filter(pk=receptionist.id).exists()


def test_invite_endpoints(client_for, admin_user):
    client = client_for(admin_user)
    r = client.post('/api/invites', {'role': 'radiologist', 'code': 'xray01', 'max_uses': 2}, format='json')
    assert r.status_code == 201
    invite_id = r.data['data']['id']
    assert InviteCode.objects.get(pk=invite_id).code == 'XRAY01'

    r = client.post(f'/api/invites/{invite_id}/deactivate')
    assert r.status_code == 200
    assert InviteCode.objects.get(pk=invite_id).is_active is False
    assert len(client.get('/api/invites').data['data']) == 1


def test_health_and_metrics_are_public():
    client = APIClient()
    r = client.get('/healthz')
    assert r.status_code == 200
    assert r.data == {'ok': True, 'db': 'up'}
    assert client.get('/metrics').status_code == 200
