"""
Appointment workflow and the public booking form.
"""
import pytest
from django.core import mail
from rest_framework.test import APIClient, APITestCase

from dental.exceptions import WorkflowError
from dental.models import Appointment, EmailNotification, Notification, Patient, User
from dental.services import appointments as appointment_svc

pytestmark = pytest.mark.django_db


class AppointmentWorkflowTests(APITestCase):
    def setUp(self) -> None:
        self.reception = User.objects.create_user(username='reception1', password='P@ssw0rd1', role='receptionist')
        self.dentist = User.objects.create_user(username='dentist1', password='P@ssw0rd1', role='dentist',
                                                first_name='Daniel', last_name='Mushi')
        self.patient = Patient.objects.create(patient_id='SD-00001', name='Amina Hassan',
                                              email='amina@example.com', phone='0712000001')
        self.client.force_authenticate(user=self.reception)

    def _book(self, **extra):
        payload = {'patient': self.patient.id, 'date': '2030-05-02', 'time': '10:00', 'dentist': 'Daniel Mushi'}
        payload.update(extra)
        return self.client.post('/api/appointments', payload, format='json')

    def test_booking_copies_patient_details(self):
        r = self._book()
        self.assertEqual(r.status_code, 201)
        data = r.data['data']
        self.assertEqual(data['status'], 'Pending')
        self.assertEqual(data['patient_name'], 'Amina Hassan')
        self.assertEqual(data['patient_email'], 'amina@example.com')
        self.patient.refresh_from_db()
        self.assertEqual(str(self.patient.next_appointment), '2030-05-02')
        self.assertTrue(Notification.objects.filter(target_doctor_name='Daniel Mushi').exists())

    def test_status_cannot_be_set_on_create_or_update(self):
        r = self._book(status='Completed')
        self.assertEqual(r.data['data']['status'], 'Pending')

    def test_valid_and_invalid_transitions(self):
        appt_id = self._book().data['data']['id']
        with self.captureOnCommitCallbacks(execute=True):
            r = self.client.post(f'/api/appointments/{appt_id}/status', {'status': 'Approved'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['data']['status'], 'Approved')
        # approval emails the patient
        self.assertEqual(len(mail.outbox), 1)
        self.assertTrue(EmailNotification.objects.filter(email_type='approved', status='sent').exists())

        r = self.client.post(f'/api/appointments/{appt_id}/status', {'status': 'Pending'}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data['error']['code'], 'workflow_error')

    def test_completed_is_terminal(self):
        appt = Appointment.objects.create(patient_name='X', date='2030-01-01', time='09:00', dentist='D',
                                          status=Appointment.STATUS_COMPLETED)
        with self.assertRaises(WorkflowError):
            appointment_svc.set_status(appt, Appointment.STATUS_CANCELLED)

    def test_dentist_sees_only_own_appointments(self):
        self._book()
        self._book(dentist='Someone Else')
        client = APIClient()
        client.force_authenticate(user=self.dentist)
        r = client.get('/api/appointments')
        self.assertEqual([a['dentist'] for a in r.data['data']], ['Daniel Mushi'])

    def test_only_admin_deletes(self):
        appt_id = self._book().data['data']['id']
        self.assertEqual(self.client.delete(f'/api/appointments/{appt_id}').status_code, 403)


def test_transition_table():
    A = Appointment
    assert appointment_svc.can_transition(A.STATUS_PENDING, A.STATUS_APPROVED)
    assert appointment_svc.can_transition(A.STATUS_CHECKED_IN, A.STATUS_COMPLETED)
    assert not appointment_svc.can_transition(A.STATUS_PENDING, A.STATUS_COMPLETED)
    assert not appointment_svc.can_transition(A.STATUS_CANCELLED, A.STATUS_PENDING)


def test_public_booking_requires_fields():
    r = APIClient().post('/api/appointments/public', {'fullName': 'Guest', 'email': 'g@example.com'}, format='json')
    assert r.status_code == 400
    assert r.data['error'].startswith('Missing required fields: ')
    assert 'phone' in r.data['error']
    assert Appointment.objects.count() == 0


def test_public_booking_creates_pending_request(admin_user):
    r = APIClient().post('/api/appointments/public', {
        'fullName': 'Grace <script>x</script>Mrema',
        'email': 'Grace@Example.com',
        'phone': '0789000000',
        'date': '2030-06-10',
        'time': '14:30',
        'doctor': 'Daniel Mushi',
        'message': 'Toothache',
    }, format='json')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert r.data['message'] == 'Appointment booked successfully'

    appt = Appointment.objects.get(pk=r.data['appointmentId'])
    assert appt.status == Appointment.STATUS_PENDING
    assert appt.patient is None
    assert '<script>' not in appt.patient_name
    assert appt.patient_email == 'grace@example.com'
    assert appt.treatment == 'General Consultation'

    n = Notification.objects.get(title='New Website Appointment')
    assert n.target_role == 'admin'
    assert len(mail.outbox) == 1
    assert mail.outbox[0].subject.startswith('Appointment Request Received')


def test_schedule_notes(client_for, dentist):
    client = client_for(dentist)
    r = client.post('/api/schedule-notes', {'date': '2030-01-02', 'time_slot': '09:00', 'note': 'Leave',
                                            'doctor_name': 'Daniel Mushi'}, format='json')
    assert r.status_code == 201
    assert len(client.get('/api/schedule-notes', {'doctor': 'Daniel Mushi'}).data['data']) == 1
    assert client.delete(f"/api/schedule-notes/{r.data['data']['id']}").status_code == 200


def test_manual_reminder_email(client_for, receptionist, dentist, cash_patient):
    appt = Appointment.objects.create(patient=cash_patient, patient_name=cash_patient.name, date='2030-03-04',
                                      time='09:30', dentist='Daniel Mushi')
    assert client_for(dentist).post(f'/api/appointments/{appt.id}/email', {'type': 'reminder'},
                                    format='json').status_code == 403

    client = client_for(receptionist)
    r = client.post(f'/api/appointments/{appt.id}/email', {'type': 'follow_up'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['recipient'] == 'amina@example.com'
    assert EmailNotification.objects.get(appointment=appt).email_type == 'follow_up'
    assert len(mail.outbox) == 1

    assert client.post(f'/api/appointments/{appt.id}/email', {'type': 'invoice'}, format='json').status_code == 400
