"""
Appointment scheduling: status workflow, staff booking and website booking.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import bleach
from django.db import transaction
from django.db.models import QuerySet
from django.utils.dateparse import parse_date

from dental.exceptions import WorkflowError
from dental.models import Appointment, Patient, User
from dental.services.emails import send_appointment_email
from dental.services.notifications import notify

logger = logging.getLogger(__name__)

A = Appointment

TRANSITIONS = {
    A.STATUS_PENDING: [A.STATUS_APPROVED, A.STATUS_CANCELLED],
    A.STATUS_APPROVED: [A.STATUS_CONFIRMED, A.STATUS_CHECKED_IN, A.STATUS_CANCELLED],
    A.STATUS_CONFIRMED: [A.STATUS_CHECKED_IN, A.STATUS_CANCELLED],
    A.STATUS_CHECKED_IN: [A.STATUS_IN_PROGRESS, A.STATUS_COMPLETED, A.STATUS_CANCELLED],
    A.STATUS_IN_PROGRESS: [A.STATUS_COMPLETED, A.STATUS_CANCELLED],
    A.STATUS_COMPLETED: [],
    A.STATUS_CANCELLED: [],
}

# Statuses a patient can still be seen from on the day
OPEN_FOR_VISIT = (A.STATUS_APPROVED, A.STATUS_CONFIRMED, A.STATUS_CHECKED_IN)

PUBLIC_REQUIRED_FIELDS = ('fullName', 'email', 'phone', 'date', 'time', 'doctor')


def can_transition(current: str, new: str) -> bool:
    """Return True if an appointment may move from ``current`` to ``new``."""
    return new in TRANSITIONS.get(current, [])


def visible_appointments(user: User, params: Dict[str, Any]) -> QuerySet:
    qs = Appointment.objects.select_related('patient').order_by('date', 'time')
    if user.role == User.ROLE_DENTIST:
        qs = qs.filter(dentist=user.display_name)
    elif params.get('dentist'):
        qs = qs.filter(dentist=params['dentist'])
    if params.get('date'):
        qs = qs.filter(date=params['date'])
    if params.get('dateFrom'):
        qs = qs.filter(date__gte=params['dateFrom'])
    if params.get('dateTo'):
        qs = qs.filter(date__lte=params['dateTo'])
    if params.get('status'):
        qs = qs.filter(status=params['status'])
    if params.get('patientId'):
        qs = qs.filter(patient_id=params['patientId'])
    return qs


def _copy_patient_fields(data: Dict[str, Any], patient: Optional[Patient]) -> Dict[str, Any]:
    if not patient:
        return data
    data.setdefault('patient_name', patient.name)
    data.setdefault('patient_phone', patient.phone)
    data.setdefault('patient_email', patient.email)
    data.setdefault('patient_type', patient.patient_type)
    if patient.patient_type == Patient.TYPE_INSURANCE:
        data.setdefault('insurance', patient.insurance)
        data.setdefault('insurance_member_id', patient.insurance_member_id)
    return data


def create_appointment(data: Dict[str, Any]) -> Appointment:
    data = _copy_patient_fields(dict(data), data.get('patient'))
    if not data.get('patient_name'):
        raise ValueError("Patient name is required")
    appt = Appointment.objects.create(**data)
    if appt.patient_id and appt.date:
        Patient.objects.filter(pk=appt.patient_id).update(next_appointment=appt.date)
    notify(
        type='appointment',
        title='New Appointment',
        message=f"{appt.patient_name} booked for {appt.date} at {appt.time}",
        target_doctor_name=appt.dentist,
        appointment=appt,
    )
    return appt


def update_appointment(appt: Appointment, data: Dict[str, Any]) -> Appointment:
    if 'status' in data:
        raise WorkflowError("Use the status endpoint to change an appointment's status")
    for field, value in data.items():
        setattr(appt, field, value)
    appt.save()
    return appt


@transaction.atomic
def set_status(appt: Appointment, new_status: str, *, user: Optional[User] = None) -> Appointment:
    locked = Appointment.objects.select_for_update().get(pk=appt.pk)
    if not can_transition(locked.status, new_status):
        raise WorkflowError(f"Cannot change appointment from {locked.status} to {new_status}")
    locked.status = new_status
    locked.save(update_fields=['status', 'updated_at'])
    if new_status == A.STATUS_APPROVED:
        transaction.on_commit(lambda: _after_approval(locked))
    return locked


def _after_approval(appt: Appointment) -> None:
    notify(
        type='appointment',
        title='Appointment Approved',
        message=f"{appt.patient_name} on {appt.date} at {appt.time}",
        target_doctor_name=appt.dentist,
        appointment=appt,
    )
    send_appointment_email(appt, 'approved')


def book_public_appointment(payload: Dict[str, Any]) -> Appointment:
    """Website booking: a Pending request to be approved by the front desk."""
    missing = [f for f in PUBLIC_REQUIRED_FIELDS if not str(payload.get(f) or '').strip()]
    if missing:
        raise ValueError("Missing required fields: " + ", ".join(missing))
    date = parse_date(str(payload['date']))
    if not date:
        raise ValueError("Invalid date")

    clean = lambda v: bleach.clean(str(v or '').strip(), tags=[], strip=True)  # noqa: E731
    appt = Appointment.objects.create(
        date=date,
        time=clean(payload['time']),
        patient_name=clean(payload['fullName']),
        patient_phone=clean(payload['phone']),
        patient_email=clean(payload['email']).lower(),
        patient=None,
        treatment='General Consultation',
        dentist=clean(payload['doctor']),
        status=A.STATUS_PENDING,
        notes=clean(payload.get('message')),
    )
    notify(
        type='appointment',
        title='New Website Appointment',
        message=(
            f"New appointment from website: {appt.patient_name} for {appt.date} "
            f"at {appt.time} with {appt.dentist}"
        ),
        target_role=User.ROLE_ADMIN,
        appointment=appt,
    )
    try:
        send_appointment_email(appt, 'booking_confirmation')
    except Exception:
        logger.warning("booking confirmation for appointment %s failed", appt.id, exc_info=True)
    return appt
