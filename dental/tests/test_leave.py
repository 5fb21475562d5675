"""
Staff leave: filing, admin review, withdrawal and statistics.
"""
import pytest

from dental.models import LeaveRequest, Notification

pytestmark = pytest.mark.django_db


def _file(client, **overrides):
    payload = {
        'leave_type': 'annual',
        'start_date': '2025-07-07',
        'end_date': '2025-07-11',
        'reason': 'Family visit in Moshi',
    }
    payload.update(overrides)
    return client.post('/api/leave-requests', payload, format='json')


def test_filing_notifies_admins(client_for, dentist):
    r = _file(client_for(dentist))
    assert r.status_code == 201
    data = r.data['data']
    assert data['status'] == 'pending'
    assert data['user_name'] == 'Daniel Mushi'
    assert data['days'] == 5

    n = Notification.objects.get(type='leave_request_submitted')
    assert n.target_role == 'admin'
    assert n.message == 'Daniel Mushi has requested annual leave from 2025-07-07 to 2025-07-11'


def test_dates_and_type_are_validated(client_for, dentist):
    client = client_for(dentist)
    assert _file(client, end_date='2025-07-01').status_code == 400
    assert _file(client, leave_type='holiday').status_code == 400
    assert _file(client, reason='').status_code == 400
    assert not LeaveRequest.objects.exists()


def test_staff_see_own_requests_admin_sees_all(client_for, dentist, receptionist, admin_user):
    _file(client_for(dentist))
    _file(client_for(receptionist), leave_type='sick', start_date='2025-08-01', end_date='2025-08-01')

    r = client_for(dentist).get('/api/leave-requests')
    assert [x['user_name'] for x in r.data['data']] == ['Daniel Mushi']

    admin = client_for(admin_user)
    assert len(admin.get('/api/leave-requests').data['data']) == 2
    r = admin.get('/api/leave-requests', {'status': 'pending'})
    assert len(r.data['data']) == 2

    other = LeaveRequest.objects.get(user=receptionist)
    assert client_for(dentist).get(f'/api/leave-requests/{other.id}').status_code == 403
    assert admin.get(f'/api/leave-requests/{other.id}').status_code == 200


def test_admin_approves_and_requester_is_told(client_for, dentist, receptionist, admin_user):
    leave_id = _file(client_for(dentist)).data['data']['id']

    r = client_for(receptionist).patch(f'/api/leave-requests/{leave_id}/approve', {}, format='json')
    assert r.status_code == 403

    r = client_for(admin_user).patch(f'/api/leave-requests/{leave_id}/approve',
                                     {'review_notes': 'Enjoy the break'}, format='json')
    assert r.status_code == 200
    data = r.data['data']
    assert data['status'] == 'approved'
    assert data['reviewed_by_name'] == 'Clinic Admin'
    assert data['reviewed_at'] is not None

    n = Notification.objects.get(type='leave_request_approved')
    assert n.target_user == dentist
    assert n.message.endswith('has been approved. Note: Enjoy the break')

    # a decided request cannot be decided again
    r = client_for(admin_user).patch(f'/api/leave-requests/{leave_id}/reject', {}, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'workflow_error'


def test_rejection_carries_reason(client_for, dentist, admin_user):
    leave_id = _file(client_for(dentist)).data['data']['id']
    r = client_for(admin_user).post(f'/api/leave-requests/{leave_id}/reject',
                                    {'review_notes': 'Clinic short-staffed that week'}, format='json')
    assert r.data['data']['status'] == 'rejected'
    n = Notification.objects.get(type='leave_request_rejected')
    assert n.title == 'Leave Request Rejected'
    assert n.message.endswith('Reason: Clinic short-staffed that week')


def test_only_own_pending_requests_can_be_withdrawn(client_for, dentist, receptionist, admin_user):
    mine = _file(client_for(dentist)).data['data']['id']
    decided = _file(client_for(dentist), start_date='2025-09-01', end_date='2025-09-02').data['data']['id']
    client_for(admin_user).post(f'/api/leave-requests/{decided}/approve', {}, format='json')

    assert client_for(receptionist).delete(f'/api/leave-requests/{mine}').status_code == 403
    assert client_for(dentist).delete(f'/api/leave-requests/{decided}').status_code == 403
    assert client_for(dentist).delete(f'/api/leave-requests/{mine}').status_code == 200
    assert client_for(admin_user).delete(f'/api/leave-requests/{decided}').status_code == 200
    assert not LeaveRequest.objects.exists()


def test_pending_count_and_user_stats(client_for, dentist, receptionist, admin_user):
    client = client_for(dentist)
    approved = _file(client).data['data']['id']
    rejected = _file(client, leave_type='sick', start_date='2025-03-03', end_date='2025-03-04').data['data']['id']
    _file(client, leave_type='study', start_date='2025-10-01', end_date='2025-10-03')
    _file(client, start_date='2024-12-30', end_date='2024-12-31')

    admin = client_for(admin_user)
    admin.post(f'/api/leave-requests/{approved}/approve', {}, format='json')
    admin.post(f'/api/leave-requests/{rejected}/reject', {}, format='json')

    r = client.get('/api/leave-requests/pending-count')
    assert r.data['data'] == {'count': 2}

    r = client.get(f'/api/leave-requests/stats/{dentist.id}', {'year': 2025})
    stats = r.data['data']
    assert stats['total'] == 3
    assert (stats['pending'], stats['approved'], stats['rejected']) == (1, 1, 1)
    assert stats['approvedDays'] == 5
    assert stats['approvedDaysByType'] == {'annual': 5}

    assert client_for(receptionist).get(f'/api/leave-requests/stats/{dentist.id}').status_code == 403
    assert admin.get(f'/api/leave-requests/stats/{dentist.id}', {'year': 'last'}).status_code == 400
