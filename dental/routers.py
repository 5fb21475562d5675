"""
URL mappings for the dental clinic API.

Trailing slashes are omitted on every ``api/`` path; the web client
calls them exactly as listed here.
"""
from django.urls import include, path

from .views import (
    appointments,
    billing,
    consultations,
    health,
    insurance,
    inventory,
    leave,
    notifications,
    patients,
    reports,
    users,
)
from .views.auth import jwt_logout_view, jwt_refresh_view, login_view, me_view, register_view

urlpatterns = [
    path('', include('django_prometheus.urls')),  # /metrics
    path('healthz', health.healthz),

    # accounts
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view),
    path('api/auth/me', me_view),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', jwt_logout_view),
    path('api/users', users.users_list),
    path('api/users/<int:pk>/role', users.user_set_role),
    path('api/users/<int:pk>', users.user_delete),
    path('api/invites', users.invites),
    path('api/invites/<int:pk>/deactivate', users.invite_deactivate),

    # staff leave
    path('api/leave-requests', leave.leave_requests),
    path('api/leave-requests/pending-count', leave.leave_pending_count),
    path('api/leave-requests/stats/<int:user_id>', leave.leave_user_stats),
    path('api/leave-requests/<int:pk>', leave.leave_request_detail),
    path('api/leave-requests/<int:pk>/approve', leave.leave_request_approve),
    path('api/leave-requests/<int:pk>/reject', leave.leave_request_reject),

    # patients
    path('api/patients', patients.patients_list),
    path('api/patients/insurance-mismatch', patients.insurance_mismatches),
    path('api/patients/check-duplicate', patients.patients_check_duplicate),
    path('api/patients/family', patients.patients_family),
    path('api/patients/<int:pk>', patients.patient_detail),
    path('api/patients/<int:pk>/medical-records', patients.medical_records),
    path('api/patients/<int:pk>/treatment-notes', patients.treatment_notes),
    path('api/medical-records/<int:pk>', patients.medical_record_detail),
    path('api/treatment-notes', patients.treatment_notes_all),
    path('api/treatment-notes/<int:pk>', patients.treatment_note_detail),

    # scheduling
    path('api/appointments', appointments.appointments),
    path('api/appointments/public', appointments.public_book_appointment),
    path('api/appointments/<int:pk>', appointments.appointment_detail),
    path('api/appointments/<int:pk>/status', appointments.appointment_set_status),
    path('api/appointments/<int:pk>/email', appointments.appointment_send_email),
    path('api/appointments/<int:appointment_id>/consultation', consultations.consultation_for_appointment),
    path('api/schedule-notes', appointments.schedule_notes),
    path('api/schedule-notes/<int:pk>', appointments.schedule_note_delete),

    # consultations and X-ray
    path('api/consultations', consultations.consultations_list),
    path('api/consultations/start', consultations.consultation_start),
    path('api/consultations/<int:pk>', consultations.consultation_detail),
    path('api/consultations/<int:pk>/request-xray', consultations.consultation_request_xray),
    path('api/consultations/<int:pk>/complete', consultations.consultation_complete),
    path('api/consultations/<int:pk>/reopen', consultations.consultation_reopen),
    path('api/xray/queue', consultations.xray_queue),
    path('api/xray/<int:pk>/upload', consultations.xray_upload),

    # billing
    path('api/payments', billing.payments),
    path('api/payments/<int:pk>', billing.payment_detail),
    path('api/payments/<int:pk>/record', billing.payment_record),
    path('api/claims', billing.claims),
    path('api/claims/<int:pk>', billing.claim_detail),
    path('api/claims/<int:pk>/submit', billing.claim_submit),
    path('api/claims/<int:pk>/status', billing.claim_set_status),
    path('api/pricing', billing.pricing),
    path('api/pricing/<int:pk>', billing.pricing_detail),
    path('api/copayment', billing.copayment_calculator),

    # inventory
    path('api/inventory', inventory.inventory_items),
    path('api/inventory/low-stock', inventory.low_stock),
    path('api/inventory/expiring', inventory.expiring),
    path('api/inventory/movements', inventory.stock_movements),
    path('api/inventory/<int:pk>', inventory.inventory_item_detail),

    # notifications
    path('api/notifications', notifications.notifications),
    path('api/notifications/read-all', notifications.notifications_mark_all_read),
    path('api/notifications/unread', notifications.notifications_mark_unread),
    path('api/notifications/<int:pk>/read', notifications.notification_mark_read),

    # reports
    path('api/reports/financial', reports.financial_report),
    path('api/reports/patients', reports.patient_report),
    path('api/reports/treatments', reports.treatment_report),
    path('api/reports/dashboard', reports.dashboard),

    # insurers
    path('api/insurance/jubilee/auth', insurance.jubilee_auth),
    path('api/insurance/jubilee/member-verify', insurance.jubilee_member_verify),
    path('api/insurance/jubilee/items-verify', insurance.jubilee_items_verify),
    path('api/insurance/jubilee/submit', insurance.jubilee_submit),
    path('api/insurance/jubilee/status', insurance.jubilee_status),
    path('api/insurance/jubilee/price-lists', insurance.jubilee_price_lists),
    path('api/insurance/jubilee/preauthorizations/<int:patient_id>', insurance.jubilee_preauthorizations),
    path('api/insurance/jubilee/preauthorizations/<int:patient_id>/all', insurance.jubilee_preauthorizations,
         {'scope': 'all'}),
    path('api/insurance/smart', insurance.smart_dispatch),
]
