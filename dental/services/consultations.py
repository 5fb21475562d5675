"""
Consultation workflow.

A consultation starts ``in-progress``, may go through the X-ray room
(``waiting-xray`` then ``xray-done``) and ends ``completed``.  Completing a
consultation creates the bill (and, for insured patients, the draft
claim) and closes the day's appointment.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.text import Truncator

from dental.exceptions import WorkflowError
from dental.models import Appointment, Consultation, InsuranceClaim, Patient, Payment, User
from dental.services import appointments as appointment_svc
from dental.services.billing import create_claim_for_consultation, create_payment
from dental.services.copayment import items_total
from dental.services.notifications import notify

logger = logging.getLogger(__name__)

C = Consultation

EDITABLE_FIELDS = (
    'symptoms', 'examination', 'vital_signs', 'diagnosis', 'diagnosis_type', 'treatment_plan',
    'prescriptions', 'follow_up_instructions', 'next_appointment', 'estimated_cost',
    'discount_percent', 'treatment_items',
)


def treatment_total(consultation: Consultation) -> int:
    total = items_total(consultation.treatment_items or [])
    if total <= 0:
        total = consultation.estimated_cost or 0
    if total <= 0:
        total = settings.DEFAULT_CONSULTATION_FEE
    return total


def _treatment_name(consultation: Consultation) -> str:
    names = [str(i.get('name')) for i in (consultation.treatment_items or []) if i.get('name')]
    if names:
        return Truncator(", ".join(names)).chars(255)
    return consultation.diagnosis[:255] if consultation.diagnosis else 'Consultation'


@transaction.atomic
def start_consultation(*, patient: Patient, doctor: User, appointment: Optional[Appointment] = None) -> Consultation:
    c = Consultation.objects.create(
        patient=patient,
        doctor=doctor,
        doctor_name=doctor.display_name,
        appointment=appointment,
        status=C.STATUS_IN_PROGRESS,
    )
    if appointment is not None:
        if appointment_svc.can_transition(appointment.status, Appointment.STATUS_CHECKED_IN):
            appointment_svc.set_status(appointment, Appointment.STATUS_CHECKED_IN, user=doctor)
        else:
            logger.info("appointment %s left at %s when consultation %s started",
                        appointment.id, appointment.status, c.id)
    Patient.objects.filter(pk=patient.pk).update(last_visit=timezone.localdate())
    return c


def update_consultation(c: Consultation, data: Dict[str, Any]) -> Consultation:
    if c.status in (C.STATUS_COMPLETED, C.STATUS_CANCELLED):
        raise WorkflowError(f"Consultation is {c.status} and can no longer be edited")
    changed = []
    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(c, field, data[field])
            changed.append(field)
    if changed:
        c.save(update_fields=changed + ['updated_at'])
    return c


def request_xray(c: Consultation) -> Consultation:
    if c.status != C.STATUS_IN_PROGRESS:
        raise WorkflowError(f"X-ray can only be requested for an in-progress consultation (is {c.status})")
    c.status = C.STATUS_WAITING_XRAY
    c.save(update_fields=['status', 'updated_at'])
    notify(
        type='xray',
        title='X-ray Requested',
        message=f"{c.patient.name} is waiting for an X-ray (requested by {c.doctor_name})",
        target_role=User.ROLE_RADIOLOGIST,
    )
    return c


def list_waiting_xray():
    return (
        Consultation.objects.filter(status=C.STATUS_WAITING_XRAY)
        .select_related('patient')
        .order_by('updated_at')
    )


def _ensure_payment(c: Consultation, total: int) -> Optional[Payment]:
    if c.payments.exists():
        return None
    patient = c.patient
    insured = patient.patient_type == Patient.TYPE_INSURANCE and bool(patient.insurance)
    return create_payment(
        patient=patient,
        treatment_name=_treatment_name(c),
        total_amount=total,
        discount_percent=c.discount_percent,
        items=c.treatment_items or [],
        consultation=c,
        appointment=c.appointment,
        payment_method='insurance' if insured else 'cash',
        insurance_provider=patient.insurance if insured else '',
    )


def _ensure_claim(c: Consultation, total: int) -> Optional[InsuranceClaim]:
    patient = c.patient
    if patient.patient_type != Patient.TYPE_INSURANCE or not patient.insurance:
        return None
    if InsuranceClaim.objects.filter(consultation=c).exists():
        return None
    return create_claim_for_consultation(c, total)


def _close_appointment(c: Consultation) -> Optional[Appointment]:
    appt = c.appointment
    if appt is None:
        appt = (
            Appointment.objects.filter(
                patient=c.patient, date=timezone.localdate(), status__in=appointment_svc.OPEN_FOR_VISIT,
            )
            .order_by('time')
            .first()
        )
        if appt is None:
            return None
        c.appointment = appt
        c.save(update_fields=['appointment', 'updated_at'])
    if appt.status in (Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED):
        return appt
    appt.status = Appointment.STATUS_COMPLETED
    appt.save(update_fields=['status', 'updated_at'])
    return appt


def complete_consultation(c: Consultation) -> Consultation:
    if c.status not in C.ACTIVE_STATUSES:
        raise WorkflowError(f"Consultation is {c.status} and cannot be completed")
    c.status = C.STATUS_COMPLETED
    c.completed_at = timezone.now()
    c.save(update_fields=['status', 'completed_at', 'updated_at'])

    total = treatment_total(c)
    for step in (_ensure_payment, _ensure_claim):
        try:
            with transaction.atomic():
                step(c, total)
        except Exception:
            logger.warning("consultation %s: %s failed", c.id, step.__name__, exc_info=True)
    try:
        with transaction.atomic():
            _close_appointment(c)
    except Exception:
        logger.warning("consultation %s: closing appointment failed", c.id, exc_info=True)
    return c


def reopen_consultation(c: Consultation) -> Consultation:
    if c.status != C.STATUS_COMPLETED:
        raise WorkflowError("Only completed consultations can be reopened")
    c.status = C.STATUS_IN_PROGRESS
    c.completed_at = None
    c.save(update_fields=['status', 'completed_at', 'updated_at'])
    return c


@transaction.atomic
def delete_consultation(c: Consultation) -> None:
    c.payments.all().delete()
    c.delete()


def latest_for_appointment(appointment_id: int) -> Optional[Consultation]:
    return (
        Consultation.objects.filter(appointment_id=appointment_id)
        .select_related('patient')
        .order_by('-started_at')
        .first()
    )
