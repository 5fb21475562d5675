from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.db.models.functions import Length

from dental.models import Appointment, Patient

logger = logging.getLogger(__name__)

PATIENT_ID_PREFIX = 'SD-'
PATIENT_ID_ATTEMPTS = 5


def next_patient_id() -> str:
    """Next clinic file number, ``SD-00001`` style.

    Must run inside a transaction: the current highest file is locked so
    concurrent creates on PostgreSQL queue behind each other.
    """
    last = (
        Patient.objects.select_for_update()
        .filter(patient_id__regex=rf'^{PATIENT_ID_PREFIX}[0-9]+$')
        .annotate(id_len=Length('patient_id'))
        .order_by('-id_len', '-patient_id')
        .values_list('patient_id', flat=True)
        .first()
    )
    number = int(last[len(PATIENT_ID_PREFIX):]) if last else 0
    return f"{PATIENT_ID_PREFIX}{number + 1:05d}"


def apply_insurance_rules(data: Dict[str, Any], instance: Patient | None = None) -> Dict[str, Any]:
    """Enforce that insurance patients name an insurer and cash patients carry none."""
    ptype = data.get('patient_type', instance.patient_type if instance else Patient.TYPE_CASH)
    insurance = data.get('insurance', instance.insurance if instance else '')
    insurance = (insurance or '').strip().upper()
    if ptype == Patient.TYPE_INSURANCE:
        if not insurance:
            raise ValueError("Insurance provider is required for insurance patients")
        data['insurance'] = insurance
    else:
        data['insurance'] = ''
        data['insurance_member_id'] = ''
    return data


def create_patient(data: Dict[str, Any]) -> Patient:
    data = apply_insurance_rules(dict(data))
    patient_id = data.pop('patient_id', None)
    if patient_id:
        return Patient.objects.create(patient_id=patient_id, **data)
    for attempt in range(1, PATIENT_ID_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                return Patient.objects.create(patient_id=next_patient_id(), **data)
        except IntegrityError:
            if attempt == PATIENT_ID_ATTEMPTS:
                raise
            logger.info("patient file number taken, retrying (attempt %s)", attempt)


def update_patient(patient: Patient, data: Dict[str, Any]) -> Patient:
    data = apply_insurance_rules(dict(data), instance=patient)
    for field, value in data.items():
        setattr(patient, field, value)
    patient.save()
    return patient


def insurance_mismatches() -> List[dict]:
    """Patients whose file insurer differs from the insurer on their appointments."""
    rows = (
        Appointment.objects.filter(patient__isnull=False)
        .exclude(insurance='')
        .select_related('patient')
        .order_by('patient_id', '-date')
    )
    seen: dict[int, dict] = {}
    for appt in rows:
        p = appt.patient
        if (appt.insurance or '').upper() == (p.insurance or '').upper():
            continue
        entry = seen.setdefault(p.id, {
            'patientId': p.id,
            'fileNo': p.patient_id,
            'name': p.name,
            'patientInsurance': p.insurance or None,
            'appointmentInsurance': [],
        })
        if appt.insurance not in entry['appointmentInsurance']:
            entry['appointmentInsurance'].append(appt.insurance)
    return list(seen.values())


def find_duplicate(name: str, phone: str) -> Optional[Patient]:
    """Existing file with the same name and phone number, if any."""
    name = ' '.join((name or '').split())
    phone = (phone or '').strip()
    if not name or not phone:
        return None
    return Patient.objects.filter(name__iexact=name, phone=phone).order_by('id').first()


def family_members(phone: str = '', email: str = '', exclude_id: Optional[int] = None) -> QuerySet:
    """Patients sharing a phone number or email address, e.g. children on a parent's phone."""
    phone = (phone or '').strip()
    email = (email or '').strip()
    if not phone and not email:
        return Patient.objects.none()
    q = Q()
    if phone:
        q |= Q(phone=phone)
    if email:
        q |= Q(email__iexact=email)
    qs = Patient.objects.filter(q).order_by('name')
    if exclude_id:
        qs = qs.exclude(pk=exclude_id)
    return qs
