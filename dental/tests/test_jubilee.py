import datetime
import json
from decimal import Decimal

import pytest
from django.test import override_settings
from django.utils import timezone

from dental.exceptions import InsurerConfigError, InsurerError
from dental.models import (
    InsurerToken,
    JubileeItemVerification,
    JubileePriceList,
    JubileeSubmission,
    Patient,
)
from dental.services.insurance import jubilee, tokens

pytestmark = pytest.mark.django_db

BASE = 'https://jubilee.test/api'

configured = override_settings(
    JUBILEE_BASE_URL=BASE,
    JUBILEE_USERNAME='sd-dental',
    JUBILEE_PASSWORD='secret',
    JUBILEE_PROVIDER_ID='PRV-77',
)


@pytest.fixture
def jubilee_http(insurer_http):
    insurer_http.add('POST', f'{BASE}/Token', {
        'Status': 'OK',
        'Description': {'access_token': 'jub-token', 'token_type': 'bearer', 'expires_in': 3600},
    })
    return insurer_http


def test_amount_str_drops_trailing_zeros():
    assert jubilee.amount_str('150000.00') == '150000'
    assert jubilee.amount_str(1500) == '1500'
    assert jubilee.amount_str('12.50') == '12.5'


@override_settings(JUBILEE_USERNAME='', JUBILEE_PASSWORD='', JUBILEE_PROVIDER_ID='')
def test_missing_credentials():
    with pytest.raises(InsurerConfigError):
        jubilee.authenticate()


@configured
def test_token_is_cached_between_calls(jubilee_http):
    jubilee_http.add('GET', f'{BASE}/Getcarddetails', {'Status': 'OK', 'Description': {'Name': 'J'}})
    jubilee_http.add('GET', f'{BASE}/CheckVerification', {'Status': 'OK', 'AuthorizationNo': 'AUTH-1', 'Benefits': []})

    first = jubilee.authenticate(force=False)
    assert first['cached'] is False
    assert first['provider_id'] == 'PRV-77'
    result = jubilee.verify_member('JUB-001')

    assert jubilee_http.count('/Token') == 1
    method, url, kwargs = jubilee_http.calls[-1]
    assert kwargs['headers']['Authorization'] == 'Bearer jub-token'
    assert kwargs['params'] == {'MemberNo': 'JUB-001'}
    assert result['verification']['AuthorizationNo'] == 'AUTH-1'
    assert InsurerToken.objects.get(provider=InsurerToken.PROVIDER_JUBILEE).access_token == 'jub-token'


@configured
def test_token_form_fields(jubilee_http):
    jubilee.authenticate()
    _, _, kwargs = jubilee_http.calls[0]
    assert kwargs['files']['providerid'] == (None, 'PRV-77')


@configured
def test_authentication_error_status(insurer_http):
    insurer_http.add('POST', f'{BASE}/Token', {'Status': 'ERROR', 'Description': 'Invalid login'})
    with pytest.raises(InsurerError, match='Invalid login'):
        jubilee.authenticate()


@configured
def test_member_error_in_body(jubilee_http):
    jubilee_http.add('GET', f'{BASE}/Getcarddetails', {'Status': 'ERROR', 'Description': 'Card inactive'})
    with pytest.raises(InsurerError, match='Card inactive'):
        jubilee.verify_member('JUB-404')


@configured
def test_token_inside_skew_window_is_replaced(jubilee_http, settings):
    settings.INSURER_TOKEN_SKEW = 60
    InsurerToken.objects.create(provider=InsurerToken.PROVIDER_JUBILEE, access_token='stale-token',
                                expires_at=timezone.now() + datetime.timedelta(seconds=30))

    info = jubilee.authenticate(force=False)
    assert info['cached'] is False
    assert info['access_token'] == 'jub-token'
    assert jubilee_http.count('/Token') == 1

    row = InsurerToken.objects.get(provider=InsurerToken.PROVIDER_JUBILEE)
    assert row.access_token == 'jub-token'
    assert row.expires_at > timezone.now() + datetime.timedelta(minutes=59)
    assert InsurerToken.objects.count() == 1

    assert jubilee.authenticate(force=False)['cached'] is True
    assert jubilee_http.count('/Token') == 1


def test_token_outside_skew_window_is_reused(settings):
    settings.INSURER_TOKEN_SKEW = 60
    expires = timezone.now() + datetime.timedelta(seconds=120)
    InsurerToken.objects.create(provider=InsurerToken.PROVIDER_SMART, access_token='still-good', expires_at=expires)

    def fetch():
        raise AssertionError("token endpoint should not be called")

    info = tokens.get_valid_token(InsurerToken.PROVIDER_SMART, fetch)
    assert info.cached is True
    assert info.access_token == 'still-good'
    assert info.expires_at_ms == int(expires.timestamp() * 1000)


@configured
def test_verify_items_form_and_log(jubilee_http):
    jubilee_http.add('POST', f'{BASE}/VerifyItems', {'Status': 'OK', 'Description': 'Items approved'})
    items = [{'itemId': 'JIC0333', 'itemQuantity': 2, 'itemPrice': 75000}]

    result = jubilee.verify_items('JUB-001', items, Decimal('150000.00'))
    assert result['Status'] == 'OK'

    _, url, kwargs = jubilee_http.calls[-1]
    assert url == f'{BASE}/VerifyItems'
    form = kwargs['files']
    assert form['Amount'] == (None, '150000')
    assert form['BenefitCode'] == (None, '7927')
    assert form['Procedured'] == (None, 'JIC0333')
    assert json.loads(form['VerifyItems'][1]) == [{'ItemId': 'JIC0333', 'ItemQuantity': '2', 'ItemPrice': '75000'}]

    logged = JubileeItemVerification.objects.get(member_no='JUB-001')
    assert logged.total_amount == Decimal('150000.00')
    assert logged.verification_status == 'OK'
    assert logged.items == items


def test_verify_items_requires_items():
    with pytest.raises(ValueError):
        jubilee.verify_items('JUB-001', [], 1000)


def test_build_folio_shape():
    payload = jubilee.build_folio(
        member_no='JUB-001',
        authorization_no='AUTH-1',
        treatments=[{'code': 'D110', 'name': 'Scaling', 'quantity': 1, 'unitPrice': 60000, 'totalPrice': 60000},
                    {'name': 'X-Ray'}],
        total_amount='60000.00',
        patient_data={'name': 'Juma Ally Mrisho', 'dateOfBirth': '1990-06-15', 'patientId': 'SD-00002'},
    )
    folio = payload['entities'][0]
    assert folio['FirstName'] == 'Juma'
    assert folio['LastName'] == 'Ally Mrisho'
    assert folio['AmountClaimed'] == '60000'
    assert folio['PatientFileNo'] == 'SD-00002'
    assert folio['FolioItems'][0]['ItemCode'] == 'D110'
    assert folio['FolioItems'][0]['UnitPrice'] == '60000'
    assert folio['FolioItems'][1]['ItemCode'] == 'ITEM2'
    assert folio['FolioDiseases'][0]['DiseaseCode'] == 'K02'


def test_age_uses_birthday():
    assert jubilee.calculate_age('1990-06-15', datetime.date(2024, 6, 14)) == 33
    assert jubilee.calculate_age('1990-06-15', datetime.date(2024, 6, 15)) == 34


@configured
def test_submit_preauth_is_logged(jubilee_http):
    jubilee_http.add('POST', f'{BASE}/SendPreauthorization', {'Status': 'OK', 'SubmissionID': 'SUB-9'})

    result = jubilee.submit(member_no='JUB-001', authorization_no='AUTH-1', total_amount=60000,
                            treatments=[{'name': 'Scaling', 'unitPrice': 60000, 'totalPrice': 60000}])
    assert result['submissionType'] == 'preauth'
    _, _, kwargs = jubilee_http.calls[-1]
    assert kwargs['json']['entities'][0]['CardNo'] == 'JUB-001'
    row = JubileeSubmission.objects.get()
    assert row.submission_id == 'SUB-9'
    assert row.bill_no == result['billNo']


def test_submit_requires_fields():
    with pytest.raises(ValueError):
        jubilee.submit(member_no='JUB-001', authorization_no='', total_amount=1, treatments=[{'name': 'x'}])
    with pytest.raises(ValueError):
        jubilee.submit(kind='refund', member_no='JUB-001', authorization_no='A', total_amount=1,
                       treatments=[{'name': 'x'}])


@configured
def test_price_list_falls_back_to_cached_copy(jubilee_http):
    jubilee_http.add('GET', f'{BASE}/GetPriceList', {'Status': 'OK', 'Items': [{'Code': 'D110'}]})
    fresh = jubilee.price_list('price')
    assert fresh['Items'] == [{'Code': 'D110'}]
    assert 'cached' not in fresh
    assert JubileePriceList.objects.filter(list_type='price').exists()

    jubilee_http.add('GET', f'{BASE}/GetPriceList', status=500)
    stale = jubilee.price_list('price')
    assert stale['cached'] is True
    assert stale['Items'] == [{'Code': 'D110'}]


@configured
def test_price_list_without_cache_raises(jubilee_http):
    jubilee_http.add('GET', f'{BASE}/GetProcedureList', status=503)
    with pytest.raises(InsurerError):
        jubilee.price_list('procedure')


@configured
def test_endpoint_envelopes(jubilee_http, client_for, receptionist):
    jubilee_http.add('GET', f'{BASE}/getClaimStatus', {'Status': 'APPROVED'})
    client = client_for(receptionist)

    r = client.get('/api/insurance/jubilee/status', {'submissionId': 'SUB-9', 'type': 'claim'})
    assert r.status_code == 200
    assert r.data == {'success': True, 'data': {'submissionId': 'SUB-9', 'type': 'claim', 'Status': 'APPROVED'}}

    r = client.post('/api/insurance/jubilee/member-verify', {}, format='json')
    assert r.status_code == 400
    assert r.data['success'] is False
    assert r.data['error'].startswith('memberNo')


def _preauth(member_no, patient_file, **extra):
    fields = dict(member_no=member_no, authorization_no='AUTH-1', submission_type='preauth', bill_no='B-1',
                  folio_no='F-1', total_amount=60000, patient_data={'patientId': patient_file},
                  submission_status='OK')
    fields.update(extra)
    return JubileeSubmission.objects.create(**fields)


def test_preauthorization_history_per_patient(client_for, receptionist):
    patient = Patient.objects.create(patient_id='SD-00010', name='Zawadi Kweka', patient_type='insurance',
                                     insurance='JUBILEE', insurance_member_id='JUB-010')
    waiting = _preauth('JUB-010', '', bill_no='B-10')
    approved = _preauth('', 'SD-00010', bill_no='B-11', current_status='Approved')
    _preauth('JUB-010', 'SD-00010', bill_no='B-12', submission_type='claim')
    _preauth('JUB-010', 'SD-00010', bill_no='B-13', submission_status='ERROR')
    _preauth('JUB-999', 'SD-00099', bill_no='B-14')

    client = client_for(receptionist)
    r = client.get(f'/api/insurance/jubilee/preauthorizations/{patient.id}')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert [row['billNo'] for row in r.data['data']] == [waiting.bill_no]
    assert r.data['data'][0]['totalAmount'] == '60000'

    r = client.get(f'/api/insurance/jubilee/preauthorizations/{patient.id}/all')
    assert sorted(row['billNo'] for row in r.data['data']) == ['B-10', 'B-11', 'B-13']
    assert approved.bill_no in {row['billNo'] for row in r.data['data']}

    assert client.get('/api/insurance/jubilee/preauthorizations/9999').status_code == 404
