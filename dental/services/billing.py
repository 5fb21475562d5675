"""
Payments and insurance claims.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from dental.exceptions import WorkflowError
from dental.models import Appointment, Consultation, InsuranceClaim, Patient, Payment, PaymentItem

logger = logging.getLogger(__name__)

CLAIM_TRANSITIONS = {
    InsuranceClaim.STATUS_DRAFT: [InsuranceClaim.STATUS_SUBMITTED],
    InsuranceClaim.STATUS_SUBMITTED: [InsuranceClaim.STATUS_APPROVED, InsuranceClaim.STATUS_REJECTED],
    InsuranceClaim.STATUS_APPROVED: [InsuranceClaim.STATUS_PAID],
    InsuranceClaim.STATUS_REJECTED: [],
    InsuranceClaim.STATUS_PAID: [],
}


def discount_amounts(total: int, discount_percent: int) -> tuple[int, int]:
    """Return ``(discount_amount, final_total)``."""
    pct = min(max(int(discount_percent or 0), 0), 100)
    discount = round(total * pct / 100)
    return discount, total - discount


def derive_status(amount_paid: int, final_total: int) -> str:
    if amount_paid >= final_total:
        return Payment.STATUS_PAID
    if amount_paid > 0:
        return Payment.STATUS_PARTIAL
    return Payment.STATUS_PENDING


@transaction.atomic
def create_payment(*, patient: Patient, treatment_name: str, total_amount: int,
                   discount_percent: int = 0, items: Optional[Iterable[dict]] = None,
                   consultation: Optional[Consultation] = None, appointment: Optional[Appointment] = None,
                   payment_method: str = 'cash', insurance_provider: str = '', notes: str = '') -> Payment:
    if total_amount is None or int(total_amount) < 0:
        raise ValueError("total_amount must not be negative")
    discount, final = discount_amounts(int(total_amount), discount_percent)
    payment = Payment.objects.create(
        patient=patient,
        patient_name=patient.name,
        treatment_name=treatment_name,
        appointment=appointment,
        consultation=consultation,
        total_amount=int(total_amount),
        discount_percent=discount_percent or 0,
        discount_amount=discount,
        final_total=final,
        amount_paid=0,
        payment_status=derive_status(0, final),
        payment_method=payment_method,
        insurance_provider=insurance_provider or '',
        notes=notes or '',
    )
    for item in items or []:
        qty = int(item.get('quantity') or 1)
        unit = int(item.get('cost') or item.get('unit_price') or 0)
        PaymentItem.objects.create(
            payment=payment,
            item_name=item.get('name') or item.get('item_name') or treatment_name,
            quantity=qty,
            unit_price=unit,
            total_price=unit * qty,
        )
    return payment


@transaction.atomic
def record_payment(payment: Payment, *, amount: int, method: str, collected_by: str = '',
                   notes: str = '') -> Payment:
    if amount is None or int(amount) <= 0:
        raise ValueError("Payment amount must be greater than zero")
    locked = Payment.objects.select_for_update().get(pk=payment.pk)
    locked.amount_paid += int(amount)
    locked.payment_status = derive_status(locked.amount_paid, locked.final_total)
    locked.payment_method = method or locked.payment_method
    locked.collected_by = collected_by or locked.collected_by
    if notes:
        locked.notes = f"{locked.notes}\n{notes}".strip()
    locked.payment_date = timezone.localdate()
    locked.save()
    return locked


def _claim_number(claim: InsuranceClaim) -> str:
    return f"CLM-{timezone.localdate():%Y%m%d}-{claim.id:05d}"


def create_claim_for_consultation(consultation: Consultation, total: int) -> InsuranceClaim:
    patient = consultation.patient
    return InsuranceClaim.objects.create(
        patient=patient,
        patient_name=patient.name,
        consultation=consultation,
        appointment=consultation.appointment,
        insurance_provider=patient.insurance,
        treatment_details={
            'diagnosis': consultation.diagnosis,
            'treatment_plan': consultation.treatment_plan,
            'procedures': consultation.treatment_items or [],
            'total_amount': total,
        },
    )


@transaction.atomic
def submit_claim(claim: InsuranceClaim, *, signature: str) -> InsuranceClaim:
    if not (signature or '').strip():
        raise ValueError("Patient signature is required")
    locked = InsuranceClaim.objects.select_for_update().get(pk=claim.pk)
    if locked.claim_status != InsuranceClaim.STATUS_DRAFT:
        raise WorkflowError(f"Only draft claims can be submitted (claim is {locked.claim_status})")
    locked.patient_signature = signature
    locked.claim_status = InsuranceClaim.STATUS_SUBMITTED
    locked.submitted_at = timezone.now()
    if not locked.claim_number:
        locked.claim_number = _claim_number(locked)
    locked.save()
    logger.info("claim %s submitted to %s", locked.claim_number, locked.insurance_provider)
    return locked


@transaction.atomic
def set_claim_status(claim: InsuranceClaim, new_status: str, *, reason: str = '') -> InsuranceClaim:
    locked = InsuranceClaim.objects.select_for_update().get(pk=claim.pk)
    if new_status == InsuranceClaim.STATUS_SUBMITTED:
        raise WorkflowError("Use claim submission to submit a claim")
    if new_status not in CLAIM_TRANSITIONS.get(locked.claim_status, []):
        raise WorkflowError(f"Cannot change claim from {locked.claim_status} to {new_status}")
    locked.claim_status = new_status
    if new_status == InsuranceClaim.STATUS_APPROVED:
        locked.approved_at = timezone.now()
    if new_status == InsuranceClaim.STATUS_REJECTED:
        locked.rejection_reason = reason or ''
    locked.save()
    return locked
