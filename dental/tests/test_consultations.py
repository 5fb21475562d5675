"""
Consultation room: start, X-ray round trip and completion side effects.
"""
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.utils import timezone

from dental.models import Appointment, Consultation, InsuranceClaim, Notification, Payment
from dental.services import consultations as consultation_svc
from dental.services.xray import validate_upload

pytestmark = pytest.mark.django_db


@pytest.fixture
def todays_appointment(ga_patient):
    return Appointment.objects.create(
        patient=ga_patient, patient_name=ga_patient.name, date=timezone.localdate(), time='09:00',
        dentist='Daniel Mushi', status=Appointment.STATUS_APPROVED,
    )


def test_start_checks_in_the_appointment(client_for, dentist, ga_patient, todays_appointment):
    r = client_for(dentist).post('/api/consultations/start',
                                 {'patientId': ga_patient.id, 'appointmentId': todays_appointment.id}, format='json')
    assert r.status_code == 201
    assert r.data['data']['status'] == 'in-progress'
    assert r.data['data']['doctor_name'] == 'Daniel Mushi'
    todays_appointment.refresh_from_db()
    assert todays_appointment.status == Appointment.STATUS_CHECKED_IN
    ga_patient.refresh_from_db()
    assert ga_patient.last_visit == timezone.localdate()


def test_receptionist_cannot_start(client_for, receptionist, cash_patient):
    r = client_for(receptionist).post('/api/consultations/start', {'patientId': cash_patient.id}, format='json')
    assert r.status_code == 403


def test_complete_creates_bill_claim_and_closes_appointment(client_for, dentist, ga_patient, todays_appointment):
    client = client_for(dentist)
    cid = client.post('/api/consultations/start', {'patientId': ga_patient.id}, format='json').data['data']['id']
    r = client.patch(f'/api/consultations/{cid}', {
        'diagnosis': 'Dental caries 36',
        'discount_percent': 10,
        'treatment_items': [
            {'name': 'Composite Filling', 'cost': 80000, 'quantity': 1},
            {'name': 'Periapical X-ray', 'cost': 20000, 'quantity': 2},
        ],
    }, format='json')
    assert r.status_code == 200

    r = client.post(f'/api/consultations/{cid}/complete')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'completed'

    payment = Payment.objects.get(consultation_id=cid)
    assert payment.total_amount == 120000
    assert payment.discount_amount == 12000
    assert payment.final_total == 108000
    assert payment.payment_method == 'insurance'
    assert payment.items.count() == 2

    claim = InsuranceClaim.objects.get(consultation_id=cid)
    assert claim.claim_status == 'draft'
    assert claim.insurance_provider == 'GA'
    assert claim.treatment_details['total_amount'] == 120000

    # no appointment was linked at start, so today's open one is closed
    todays_appointment.refresh_from_db()
    assert todays_appointment.status == Appointment.STATUS_COMPLETED

    # completing twice is a workflow error, not a second bill
    r = client.post(f'/api/consultations/{cid}/complete')
    assert r.status_code == 400
    assert Payment.objects.filter(consultation_id=cid).count() == 1


def test_cash_consultation_without_items_bills_default_fee(dentist, cash_patient):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    consultation_svc.complete_consultation(c)
    payment = Payment.objects.get(consultation=c)
    assert payment.total_amount == 30000
    assert payment.payment_method == 'cash'
    assert not InsuranceClaim.objects.filter(consultation=c).exists()


def test_long_treatment_list_still_bills(dentist, cash_patient):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    items = [{'name': f'Composite filling tooth {n} (occlusal)', 'cost': 40000, 'quantity': 1}
             for n in range(11, 19)]
    consultation_svc.update_consultation(c, {'treatment_items': items})
    consultation_svc.complete_consultation(c)

    payment = Payment.objects.get(consultation=c)
    assert len(payment.treatment_name) <= 255
    assert payment.treatment_name.startswith('Composite filling tooth 11 (occlusal), ')
    assert payment.total_amount == 320000
    assert payment.items.count() == 8


def test_reopen_is_admin_only(client_for, dentist, admin_user, cash_patient):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    consultation_svc.complete_consultation(c)
    assert client_for(dentist).post(f'/api/consultations/{c.id}/reopen').status_code == 403
    r = client_for(admin_user).post(f'/api/consultations/{c.id}/reopen')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'in-progress'


def test_listing_requires_patient_unless_admin(client_for, dentist, admin_user, cash_patient):
    consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    assert client_for(dentist).get('/api/consultations').status_code == 400
    assert len(client_for(dentist).get('/api/consultations', {'patientId': cash_patient.id}).data['data']) == 1
    assert len(client_for(admin_user).get('/api/consultations').data['data']) == 1


def test_xray_round_trip(client_for, dentist, radiologist, cash_patient, tmp_path):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    r = client_for(dentist).post(f'/api/consultations/{c.id}/request-xray')
    assert r.data['data']['status'] == 'waiting-xray'
    assert Notification.objects.filter(target_role='radiologist', type='xray').exists()

    rad = client_for(radiologist)
    queue = rad.get('/api/xray/queue').data['data']
    assert [row['id'] for row in queue] == [c.id]

    image = SimpleUploadedFile('bitewing.png', b'\x89PNG\r\n\x1a\n' + b'0' * 64, content_type='image/png')
    with override_settings(MEDIA_ROOT=str(tmp_path)):
        r = rad.post(f'/api/xray/{c.id}/upload', {'files': [image], 'note': 'Caries on 36'}, format='multipart')
    assert r.status_code == 200
    result = r.data['data']['xray_result']
    assert r.data['data']['status'] == 'xray-done'
    assert result['note'] == 'Caries on 36'
    assert result['radiologist'] == 'Neema Mollel'
    assert len(result['images']) == 1
    assert Notification.objects.filter(target_user=dentist, title='X-ray Results Ready').exists()


def test_upload_rejects_when_not_waiting(client_for, dentist, radiologist, cash_patient):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    image = SimpleUploadedFile('a.png', b'data', content_type='image/png')
    r = client_for(radiologist).post(f'/api/xray/{c.id}/upload', {'files': [image]}, format='multipart')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'workflow_error'


def test_upload_requires_files(client_for, dentist, radiologist, cash_patient):
    c = consultation_svc.start_consultation(patient=cash_patient, doctor=dentist)
    consultation_svc.request_xray(c)
    r = client_for(radiologist).post(f'/api/xray/{c.id}/upload', {'note': 'x'}, format='multipart')
    assert r.status_code == 400
    c.refresh_from_db()
    assert c.status == Consultation.STATUS_WAITING_XRAY


@override_settings(UPLOAD_MAX_MB=1)
def test_validate_upload_limits():
    ok = SimpleUploadedFile('scan.dcm', b'x' * 10, content_type='application/dicom')
    assert validate_upload(ok) == 'application/dicom'

    pdf = SimpleUploadedFile('report.pdf', b'x' * 10, content_type='application/pdf')
    with pytest.raises(ValueError, match='unsupported file type'):
        validate_upload(pdf)

    big = SimpleUploadedFile('huge.png', b'x' * (1024 * 1024 + 1), content_type='image/png')
    with pytest.raises(ValueError, match='larger than 1 MB'):
        validate_upload(big)
