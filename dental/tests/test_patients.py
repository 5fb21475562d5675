import pytest

from dental.models import AuditEvent, Patient
from dental.services import patients as patient_svc
from dental.services.patients import next_patient_id

pytestmark = pytest.mark.django_db


def test_patient_ids_follow_highest_number(cash_patient):
    Patient.objects.create(patient_id='SD-00041', name='Old File')
    Patient.objects.create(patient_id='LEGACY-9', name='Imported')
    assert next_patient_id() == 'SD-00042'


def test_patient_ids_compare_numerically():
    Patient.objects.create(patient_id='SD-99999', name='Five Digits')
    Patient.objects.create(patient_id='SD-100000', name='Six Digits')
    assert next_patient_id() == 'SD-100001'


def test_taken_file_number_is_retried(cash_patient, monkeypatch):
    issued = iter(['SD-00001'])
    real = patient_svc.next_patient_id
    monkeypatch.setattr(patient_svc, 'next_patient_id', lambda: next(issued, None) or real())

    patient = patient_svc.create_patient({'name': 'Halima Mrisho', 'phone': '0713000444'})
    assert patient.patient_id == 'SD-00002'
    assert Patient.objects.filter(patient_id='SD-00001').get() == cash_patient


def test_front_desk_creates_patient_with_file_number(client_for, receptionist):
    r = client_for(receptionist).post('/api/patients', {
        'name': 'Fatuma Said',
        'phone': '0755000111',
        'patient_type': 'insurance',
        'insurance': 'jubilee',
        'insurance_member_id': 'JB-778',
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['patient_id'] == 'SD-00001'
    assert r.data['data']['insurance'] == 'JUBILEE'


def test_insurance_patient_requires_insurer(client_for, receptionist):
    r = client_for(receptionist).post('/api/patients', {'name': 'No Insurer', 'patient_type': 'insurance'},
                                      format='json')
    assert r.status_code == 400
    assert 'Insurance provider is required' in r.data['detail']


def test_switching_to_cash_clears_insurance(client_for, receptionist, ga_patient):
    r = client_for(receptionist).patch(f'/api/patients/{ga_patient.id}', {'patient_type': 'cash'}, format='json')
    assert r.status_code == 200
    ga_patient.refresh_from_db()
    assert ga_patient.insurance == ''
    assert ga_patient.insurance_member_id == ''


def test_dentist_cannot_create_or_delete_patients(client_for, dentist, cash_patient):
    client = client_for(dentist)
    assert client.post('/api/patients', {'name': 'Someone'}, format='json').status_code == 403
    assert client.delete(f'/api/patients/{cash_patient.id}').status_code == 403


def test_search_and_pagination(client_for, receptionist, cash_patient, ga_patient):
    client = client_for(receptionist)
    r = client.get('/api/patients', {'q': 'juma'})
    assert [p['name'] for p in r.data['data']] == ['Juma Ally']
    r = client.get('/api/patients', {'type': 'insurance'})
    assert r.data['pagination']['total'] == 1
    r = client.get('/api/patients', {'pageSize': 1, 'page': 2})
    assert len(r.data['data']) == 1
    assert r.data['pagination'] == {'total': 2, 'page': 2, 'pageSize': 1}


def test_medical_history_access_is_audited(client_for, dentist, cash_patient):
    client = client_for(dentist)
    r = client.post(f'/api/patients/{cash_patient.id}/medical-records', {
        'condition': 'Penicillin allergy',
        'date': '2024-03-01',
        'description': '<b>rash</b> after amoxicillin',
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['description'] == 'rash after amoxicillin'

    r = client.get(f'/api/patients/{cash_patient.id}/medical-records')
    assert len(r.data['data']) == 1
    ev = AuditEvent.objects.get(action='medical_access')
    assert ev.user == dentist
    assert ev.object_id == str(cash_patient.id)


def test_receptionist_cannot_write_treatment_notes(client_for, receptionist, dentist, cash_patient):
    payload = {'date': '2024-03-01', 'doctor': 'Daniel Mushi', 'procedure': 'Scaling'}
    assert client_for(receptionist).post(
        f'/api/patients/{cash_patient.id}/treatment-notes', payload, format='json').status_code == 403
    r = client_for(dentist).post(f'/api/patients/{cash_patient.id}/treatment-notes', payload, format='json')
    assert r.status_code == 201
    r = client_for(dentist).get('/api/treatment-notes', {'doctor': 'Daniel Mushi'})
    assert r.data['data'][0]['patient_name'] == 'Amina Hassan'


def test_duplicate_check_matches_name_and_phone(client_for, receptionist, cash_patient):
    client = client_for(receptionist)
    r = client.post('/api/patients/check-duplicate', {'name': '  amina   HASSAN ', 'phone': '0712000001'},
                    format='json')
    assert r.status_code == 200
    assert r.data['data']['exists'] is True
    assert r.data['data']['patient']['patient_id'] == 'SD-00001'

    r = client.post('/api/patients/check-duplicate', {'name': 'Amina Hassan', 'phone': '0712999999'},
                    format='json')
    assert r.data['data'] == {'exists': False, 'patient': None}

    assert client.post('/api/patients/check-duplicate', {'name': 'Amina Hassan'}, format='json').status_code == 400


def test_family_lookup_by_phone_or_email(client_for, receptionist, cash_patient, ga_patient):
    child = Patient.objects.create(patient_id='SD-00003', name='Baraka Hassan', phone='0712000001')
    spouse = Patient.objects.create(patient_id='SD-00004', name='Omari Hassan', email='AMINA@example.com')
    client = client_for(receptionist)

    r = client.post('/api/patients/family', {'phone': '0712000001', 'email': 'amina@example.com',
                                             'excludeId': cash_patient.id}, format='json')
    assert r.status_code == 200
    assert [p['id'] for p in r.data['data']] == [child.id, spouse.id]

    r = client.post('/api/patients/family', {'phone': '0712000002'}, format='json')
    assert [p['name'] for p in r.data['data']] == ['Juma Ally']

    assert client.post('/api/patients/family', {'phone': '', 'email': ''}, format='json').status_code == 400
