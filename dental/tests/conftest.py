import pytest
import requests
from django.core.cache import cache
from rest_framework.test import APIClient

from dental.models import Patient, User


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and cached dashboards live in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(username, role, password='P@ssw0rd1', **extra):
        return User.objects.create_user(username=username, password=password, role=role, **extra)
    return _make


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client


@pytest.fixture
def admin_user(make_user):
    return make_user('admin1', User.ROLE_ADMIN, first_name='Clinic', last_name='Admin')


@pytest.fixture
def dentist(make_user):
    return make_user('dentist1', User.ROLE_DENTIST, first_name='Daniel', last_name='Mushi')


@pytest.fixture
def receptionist(make_user):
    return make_user('reception1', User.ROLE_RECEPTIONIST, first_name='Rehema', last_name='Juma')


@pytest.fixture
def radiologist(make_user):
    return make_user('radiology1', User.ROLE_RADIOLOGIST, first_name='Neema', last_name='Mollel')


@pytest.fixture
def cash_patient(db):
    return Patient.objects.create(patient_id='SD-00001', name='Amina Hassan', phone='0712000001',
                                  email='amina@example.com')


@pytest.fixture
def ga_patient(db):
    return Patient.objects.create(patient_id='SD-00002', name='Juma Ally', phone='0712000002',
                                  patient_type=Patient.TYPE_INSURANCE, insurance='GA',
                                  insurance_member_id='GA-123')


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeInsurerHTTP:
    """Canned insurer responses keyed by (method, url); every call is recorded."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, payload=None, status=200, text=''):
        self.routes[(method, url)] = FakeResponse(status, payload, text)

    def post(self, url, **kwargs):
        return self.request('POST', url, **kwargs)

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        try:
            return self.routes[(method, url)]
        except KeyError:
            raise requests.ConnectionError(f"no route for {method} {url}")

    def count(self, suffix):
        return len([c for c in self.calls if c[1].endswith(suffix)])


@pytest.fixture
def insurer_http(monkeypatch):
    fake = FakeInsurerHTTP()
    monkeypatch.setattr(requests, 'post', fake.post)
    monkeypatch.setattr(requests, 'request', fake.request)
    return fake
