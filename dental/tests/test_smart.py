import pytest
from django.test import override_settings

from dental.exceptions import InsurerError
from dental.services.insurance import smart

pytestmark = pytest.mark.django_db

BASE = 'https://smart.test'

configured = override_settings(
    SMART_BASE_URL=BASE,
    SMART_CLIENT_ID='client',
    SMART_CLIENT_SECRET='secret',
    SMART_USERNAME='sd',
    SMART_PASSWORD='pw',
)


@pytest.fixture
def smart_http(insurer_http):
    insurer_http.add('POST', f'{BASE}/oauth/token',
                     {'access_token': 'smart-token', 'token_type': 'Bearer', 'expires_in': 3600})
    return insurer_http


def test_allowed_paths():
    assert smart.is_allowed_path('/api/member?x=1')
    assert not smart.is_allowed_path('/admin/users')
    assert not smart.is_allowed_path(None)


def test_payer_defaults_do_not_override():
    body = smart.with_payer_defaults({'payer_code': 'JUB', 'amount': 10})
    assert body == {'payer_code': 'JUB', 'amount': 10, 'provider_code': 'SD_DENTAL', 'sp_id': '1'}


@configured
def test_password_grant(smart_http):
    smart.dispatch('get_token', {})
    _, url, kwargs = smart_http.calls[0]
    assert url == f'{BASE}/oauth/token'
    assert kwargs['data']['grant_type'] == 'password'
    assert kwargs['data']['client_id'] == 'client'


@configured
def test_verify_member_uses_pending_session(smart_http):
    smart_http.add('GET', f'{BASE}/api/visit', {'data': {'sessionId': 'S-1'}})
    smart_http.add('GET', f'{BASE}/api/member', {'name': 'Juma Ally'})
    smart_http.add('GET', f'{BASE}/api/benefits', status=500, text='down')

    result = smart.dispatch('verify_member', {'patientNumber': 'GA-123'})
    assert result['sessionId'] == 'S-1'
    assert result['member'] == {'name': 'Juma Ally'}
    assert result['benefits'] is None
    assert smart_http.count('/oauth/token') == 1


@configured
def test_post_diagnosis_fills_payer_defaults(smart_http):
    smart_http.add('POST', f'{BASE}/api/diagnosis', {'id': 7})
    result = smart.dispatch('post_diagnosis', {'diagnosis': {'code': 'K02'}})
    assert result == {'ok': True, 'data': {'id': 7}}
    _, _, kwargs = smart_http.calls[-1]
    assert kwargs['json'] == {'code': 'K02', 'payer_code': 'GA', 'provider_code': 'SD_DENTAL', 'sp_id': '1'}
    assert kwargs['headers']['Authorization'] == 'Bearer smart-token'


def test_unknown_action_and_missing_fields():
    with pytest.raises(ValueError, match='Unknown action'):
        smart.dispatch('drop_tables', {})
    with pytest.raises(ValueError, match='patientNumber is required'):
        smart.dispatch('get_benefits', {})
    with pytest.raises(ValueError, match='visitNumber and sessionId are required'):
        smart.dispatch('link_session', {})


def test_endpoint_rejects_disallowed_path(client_for, receptionist):
    r = client_for(receptionist).post('/api/insurance/smart',
                                      {'action': 'smart_request', 'path': '/internal/keys'}, format='json')
    assert r.status_code == 400
    assert r.data == {'error': 'Invalid or disallowed path'}


@override_settings(SMART_BASE_URL='', SMART_CLIENT_ID='')
def test_endpoint_reports_missing_configuration(client_for, receptionist):
    r = client_for(receptionist).post('/api/insurance/smart', {'action': 'get_token'}, format='json')
    assert r.status_code == 503
    assert 'SMART' in r.data['error']


@configured
def test_endpoint_maps_upstream_failure(smart_http, client_for, receptionist):
    smart_http.add('GET', f'{BASE}/api/claims/CL-1/status', status=500, text='boom')
    r = client_for(receptionist).post('/api/insurance/smart', {'action': 'claim_status', 'claimId': 'CL-1'},
                                      format='json')
    assert r.status_code == 502
    assert 'boom' in r.data['error']


def test_endpoint_rejects_non_string_path(client_for, receptionist):
    r = client_for(receptionist).post('/api/insurance/smart',
                                      {'action': 'smart_request', 'path': 123}, format='json')
    assert r.status_code == 400
    assert r.data == {'error': 'Invalid or disallowed path'}
    assert not smart.is_allowed_path(['/api/member'])


@configured
def test_unreadable_token_response_is_an_upstream_error(insurer_http, client_for, receptionist):
    insurer_http.add('POST', f'{BASE}/oauth/token', payload=None, text='<html>maintenance</html>')
    r = client_for(receptionist).post('/api/insurance/smart', {'action': 'get_token'}, format='json')
    assert r.status_code == 502
    assert r.data == {'error': 'SMART token error: unexpected token response'}


@configured
def test_token_response_without_access_token(insurer_http):
    insurer_http.add('POST', f'{BASE}/oauth/token', {'token_type': 'Bearer'})
    with pytest.raises(InsurerError):
        smart.refresh_token()
