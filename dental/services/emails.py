"""
Patient-facing appointment emails.

Every attempt is logged to :class:`~dental.models.EmailNotification`.
Sending failures are recorded and logged, never raised to the caller.
"""
from __future__ import annotations

import logging
from typing import Optional

import bleach
from django.conf import settings
from django.core.mail import send_mail

from dental.models import Appointment, EmailNotification

logger = logging.getLogger(__name__)

EMAIL_KINDS = ('booking_confirmation', 'approved', 'reminder', 'follow_up')

_SUBJECTS = {
    'booking_confirmation': "Appointment Request Received - {clinic}",
    'approved': "Appointment Confirmed - {date}",
    'reminder': "Appointment Reminder - {date} at {time}",
    'follow_up': "Follow-up from {clinic}",
}

_INTROS = {
    'booking_confirmation': (
        "We have received your appointment request. Our front desk will confirm it shortly."
    ),
    'approved': "Your appointment has been confirmed with the following details:",
    'reminder': "This is a reminder of your upcoming appointment:",
    'follow_up': "Thank you for visiting us. Please remember your follow-up care for this visit:",
}

_CLOSING = (
    "Please arrive 15 minutes before your scheduled appointment time. "
    "If you need to reschedule or cancel, contact us as soon as possible."
)


def _recipient(appointment: Appointment) -> str:
    if appointment.patient_email:
        return appointment.patient_email
    if appointment.patient_id and appointment.patient.email:
        return appointment.patient.email
    return ''


def render_appointment_email(appointment: Appointment, kind: str) -> tuple[str, str, str]:
    """Return ``(subject, text_body, html_body)`` for ``kind``."""
    if kind not in EMAIL_KINDS:
        raise ValueError(f"unknown email kind: {kind}")
    clinic = settings.CLINIC_NAME
    date = appointment.date.isoformat() if hasattr(appointment.date, 'isoformat') else str(appointment.date)
    subject = _SUBJECTS[kind].format(clinic=clinic, date=date, time=appointment.time)
    details = [
        ("Date", date),
        ("Time", appointment.time),
        ("Doctor", appointment.dentist),
        ("Treatment", appointment.treatment),
    ]
    lines = [f"Dear {appointment.patient_name},", "", _INTROS[kind], ""]
    lines += [f"{label}: {value}" for label, value in details]
    lines += ["", _CLOSING, "", f"Best regards,\n{clinic} Team"]
    text = "\n".join(lines)

    esc = lambda v: bleach.clean(str(v or ''), tags=[], strip=True)  # noqa: E731
    rows = "".join(f"<p><strong>{label}:</strong> {esc(value)}</p>" for label, value in details)
    html = (
        f"<div><h2>{esc(subject)}</h2>"
        f"<p>Dear {esc(appointment.patient_name)},</p>"
        f"<p>{_INTROS[kind]}</p>{rows}"
        f"<p>{_CLOSING}</p>"
        f"<p>Best regards,<br>{esc(clinic)} Team</p></div>"
    )
    return subject, text, html


def send_appointment_email(appointment: Appointment, kind: str) -> Optional[EmailNotification]:
    recipient = _recipient(appointment)
    if not recipient:
        logger.info("appointment %s has no email address, skipping %s email", appointment.id, kind)
        return None
    subject, text, html = render_appointment_email(appointment, kind)

    status, error = EmailNotification.STATUS_SENT, ''
    try:
        send_mail(subject, text, settings.DEFAULT_FROM_EMAIL, [recipient], html_message=html)
    except Exception as e:
        logger.warning("sending %s email for appointment %s failed: %s", kind, appointment.id, e)
        status, error = EmailNotification.STATUS_FAILED, str(e)

    try:
        return EmailNotification.objects.create(
            recipient_email=recipient,
            subject=subject,
            email_type=kind,
            status=status,
            error_message=error,
            appointment=appointment,
        )
    except Exception:
        logger.warning("could not log %s email for appointment %s", kind, appointment.id, exc_info=True)
        return None
