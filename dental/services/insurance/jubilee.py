"""
Client for the Jubilee Insurance (Tanzania) provider API.

Covers member verification, item verification, pre-authorization and
claim submission, submission status polling and the price/procedure
lists.  Every call authenticates with a bearer token obtained from
``{JUBILEE_BASE_URL}/Token`` and cached in the database.

Jubilee answers errors in the body (``{"Status": "ERROR", ...}``) as
well as with HTTP status codes; both are raised as
:class:`~dental.exceptions.InsurerError`.
"""
from __future__ import annotations

import datetime
import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.db.models import Q, QuerySet
from django.utils import timezone

from dental.exceptions import InsurerConfigError, InsurerError
from dental.models import (
    InsurerToken,
    JubileeItemVerification,
    JubileePriceList,
    JubileeSubmission,
    JubileeVerification,
    Patient,
)
from dental.services.insurance import tokens

logger = logging.getLogger(__name__)

PROVIDER = InsurerToken.PROVIDER_JUBILEE

DEFAULT_BENEFIT_CODE = '7927'      # outpatient
DEFAULT_PROCEDURE_CODE = 'JIC0333'
DEFAULT_DISEASE_CODE = 'K02'       # dental caries
DEFAULT_PRACTITIONER = 'DENT001'
SYSTEM_USER = 'Dental System'

SUBMISSION_KINDS = (JubileeSubmission.TYPE_PREAUTH, JubileeSubmission.TYPE_CLAIM)
LIST_KINDS = ('price', 'procedure')
RESOLVED_STATUSES = ('APPROVED', 'REJECTED', 'DECLINED', 'CANCELLED')

_SUBMIT_ENDPOINTS = {'preauth': 'SendPreauthorization', 'claim': 'SendClaim'}
_STATUS_ENDPOINTS = {'preauth': 'getPreauthorizationStatus', 'claim': 'getClaimStatus'}
_LIST_ENDPOINTS = {'price': 'GetPriceList', 'procedure': 'GetProcedureList'}


def amount_str(value) -> str:
    """Render an amount the way Jubilee expects it: ``1500`` rather than ``1500.00``."""
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return str(d.quantize(Decimal(1)))
    return str(d.normalize())


def _url(path: str) -> str:
    return f"{settings.JUBILEE_BASE_URL}/{path}"


def _form(fields: Dict[str, Any]) -> Dict[str, tuple]:
    """Multipart form fields; lists and dicts are sent JSON-encoded."""
    out = {}
    for key, value in fields.items():
        if isinstance(value, (list, dict)):
            value = json.dumps(value)
        out[key] = (None, str(value))
    return out


def _fetch_token():
    if not (settings.JUBILEE_USERNAME and settings.JUBILEE_PASSWORD and settings.JUBILEE_PROVIDER_ID):
        raise InsurerConfigError("Missing Jubilee credentials (JUBILEE_USERNAME/PASSWORD/PROVIDER_ID)")
    form = _form({
        'username': settings.JUBILEE_USERNAME,
        'password': settings.JUBILEE_PASSWORD,
        'providerid': settings.JUBILEE_PROVIDER_ID,
    })
    try:
        r = requests.post(_url('Token'), files=form, timeout=settings.INSURER_TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Jubilee authentication failed", exc_info=True)
        raise InsurerError(f"Jubilee authentication failed: {e}") from e

    desc = data.get('Description')
    if data.get('Status') != 'OK' or not isinstance(desc, dict):
        raise InsurerError(desc if isinstance(desc, str) and desc else 'Authentication failed')
    return desc['access_token'], desc.get('token_type') or 'Bearer', int(desc.get('expires_in') or 3600)


def authenticate(*, force: bool = True) -> Dict[str, Any]:
    tok = tokens.get_valid_token(PROVIDER, _fetch_token, force=force)
    return {
        'access_token': tok.access_token,
        'provider_id': settings.JUBILEE_PROVIDER_ID,
        'token_type': tok.token_type,
        'expires_in': max(int((tok.expires_at - timezone.now()).total_seconds()), 0),
        'expires_at': tok.expires_at_ms,
        'cached': tok.cached,
    }


def _request(method: str, path: str, **kwargs) -> Any:
    tok = tokens.get_valid_token(PROVIDER, _fetch_token)
    headers = {'Authorization': f"Bearer {tok.access_token}"}
    try:
        r = requests.request(method, _url(path), headers=headers, timeout=settings.INSURER_TIMEOUT, **kwargs)
    except requests.RequestException as e:
        logger.error("Jubilee %s %s failed", method, path, exc_info=True)
        raise InsurerError(f"Jubilee {path} request failed: {e}") from e
    if not r.ok:
        logger.error("Jubilee %s %s returned HTTP %s", method, path, r.status_code)
        raise InsurerError(f"Jubilee {path} failed: HTTP error! status: {r.status_code}")
    try:
        return r.json()
    except ValueError as e:
        raise InsurerError(f"Jubilee {path} returned a non-JSON response") from e


# ---------------------------------------------------------------------
# Member and item verification
# ---------------------------------------------------------------------
def verify_member(member_no: str) -> Dict[str, Any]:
    if not member_no:
        raise ValueError("Member number is required")
    details = _request('GET', 'Getcarddetails', params={'MemberNo': member_no})
    if details.get('Status') == 'ERROR':
        desc = details.get('Description')
        raise InsurerError(desc if isinstance(desc, str) and desc else 'Failed to get member details')

    verification = _request('GET', 'CheckVerification', params={'MemberNo': member_no})
    try:
        JubileeVerification.objects.create(
            member_no=member_no,
            verification_status=verification.get('Status') or '',
            authorization_no=verification.get('AuthorizationNo') or '',
            daily_limit=verification.get('DailLimit') or None,
            benefits=verification.get('Benefits') or [],
            verification_response=verification,
            member_details=details.get('Description') if isinstance(details.get('Description'), dict) else {},
        )
    except Exception:
        logger.warning("could not log Jubilee verification for %s", member_no, exc_info=True)
    logger.info("Jubilee member %s verification: %s", member_no, verification.get('Status'))
    return {'memberDetails': details, 'verification': verification}


def verify_items(member_no: str, items: List[dict], amount, *, benefit_code: Optional[str] = None,
                 procedure_code: Optional[str] = None) -> Dict[str, Any]:
    if not member_no or not items or not amount:
        raise ValueError("Member number, items, and amount are required")
    benefit_code = benefit_code or DEFAULT_BENEFIT_CODE
    procedure_code = procedure_code or DEFAULT_PROCEDURE_CODE
    verify_items_payload = [
        {
            'ItemId': item.get('itemId') or item.get('ItemId'),
            'ItemQuantity': str(item.get('itemQuantity') or item.get('ItemQuantity') or '1'),
            'ItemPrice': str(item.get('itemPrice') or item.get('ItemPrice') or item.get('unitPrice') or ''),
        }
        for item in items
    ]
    form = _form({
        'BenefitCode': benefit_code,
        'MemberNo': member_no,
        'VerifyItems': verify_items_payload,
        'Amount': amount_str(amount),
        'Procedured': procedure_code,
    })
    result = _request('POST', 'VerifyItems', files=form)
    try:
        JubileeItemVerification.objects.create(
            member_no=member_no,
            benefit_code=benefit_code,
            procedure_code=procedure_code,
            items=items,
            total_amount=amount,
            verification_status=result.get('Status') or '',
            verification_response=result,
        )
    except Exception:
        logger.warning("could not log Jubilee item verification for %s", member_no, exc_info=True)
    return result


# ---------------------------------------------------------------------
# Pre-authorization / claim submission
# ---------------------------------------------------------------------
def calculate_age(date_of_birth: str, today: Optional[datetime.date] = None) -> int:
    today = today or timezone.localdate()
    dob = datetime.date.fromisoformat(str(date_of_birth)[:10])
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def build_folio(*, member_no: str, authorization_no: str, treatments: List[dict], total_amount,
                patient_data: Optional[dict] = None, doctor_data: Optional[dict] = None,
                diagnosis_remarks: Optional[str] = None, clinical_notes: Optional[str] = None,
                claim_file: Optional[str] = None, now: Optional[datetime.datetime] = None) -> Dict[str, Any]:
    """Translate a clinic visit into Jubilee's ``{"entities": [folio]}`` schema."""
    now = now or timezone.localtime()
    ms = int(now.timestamp() * 1000)
    today = now.date().isoformat()
    patient = patient_data or {}
    doctor = doctor_data or {}
    created_by = doctor.get('name') or SYSTEM_USER

    name_parts = (patient.get('name') or '').split(' ')
    first_name = patient.get('firstName') or name_parts[0] or 'Patient'
    last_name = patient.get('lastName') or ' '.join(name_parts[1:]) or 'Name'
    dob = patient.get('dateOfBirth') or '1990-01-01'
    file_no = patient.get('patientId') or f"PAT{ms}"

    stamp = {
        'CreatedBy': created_by,
        'DateCreated': today,
        'LastModifiedBy': created_by,
        'LastModified': today,
    }
    items = []
    for index, t in enumerate(treatments):
        items.append({
            'ItemCode': t.get('code') or t.get('id') or f"ITEM{index + 1}",
            'OtherDetails': t.get('description') or t.get('name') or None,
            'ItemQuantity': t.get('quantity') or 1,
            'UnitPrice': str(t.get('unitPrice') or t.get('basePrice') or 0),
            'AmountClaimed': str(t.get('totalPrice') or t.get('basePrice') or 0),
            'ApprovalRefNo': None,
            **stamp,
        })

    folio = {
        'FolioID': None,
        'ClaimYear': str(now.year),
        'ClaimMonth': f"{now.month:02d}",
        'FolioNo': f"FLO{ms}",
        'SerialNo': '1',
        'CardNo': member_no,
        'BillNo': f"BILL{ms}",
        'FirstName': first_name,
        'LastName': last_name,
        'Gender': patient.get('gender') or 'Male',
        'DateOfBirth': dob,
        'Age': str(patient.get('age') or calculate_age(dob, now.date())),
        'TelephoneNo': patient.get('phone') or '0700000000',
        'PatientFileNo': file_no,
        'PatientFile': file_no,
        'AuthorizationNo': authorization_no,
        'AttendanceDate': today,
        'PatientTypeCode': 'OP',
        'DateAdmitted': None,
        'DateDischarged': None,
        'PractitionerNo': doctor.get('practitionerNo') or doctor.get('id') or DEFAULT_PRACTITIONER,
        **stamp,
        'FolioDiseases': [{
            'DiseaseCode': DEFAULT_DISEASE_CODE,
            'Remarks': diagnosis_remarks or None,
            'Status': 'Active',
            **stamp,
        }],
        'FolioItems': items,
        'ClaimFile': claim_file or None,
        'ProviderID': settings.JUBILEE_PROVIDER_ID,
        'ClinicalNotes': clinical_notes or 'Routine dental treatment',
        'DelayReason': None,
        'LateAuthorizationReason': None,
        'AmountClaimed': amount_str(total_amount),
        'EmergencyAuthorizationReason': None,
        'LateSubmissionReason': None,
    }
    return {'entities': [folio]}


def submit(*, kind: str = 'preauth', member_no: str, authorization_no: str, treatments: List[dict],
           total_amount, patient_data: Optional[dict] = None, doctor_data: Optional[dict] = None,
           diagnosis_remarks: Optional[str] = None, clinical_notes: Optional[str] = None,
           claim_file: Optional[str] = None) -> Dict[str, Any]:
    if kind not in SUBMISSION_KINDS:
        raise ValueError(f"Invalid submission type: {kind}")
    if not member_no or not authorization_no or not treatments or not total_amount:
        raise ValueError("Member number, authorization number, treatments, and total amount are required")

    payload = build_folio(
        member_no=member_no,
        authorization_no=authorization_no,
        treatments=treatments,
        total_amount=total_amount,
        patient_data=patient_data,
        doctor_data=doctor_data,
        diagnosis_remarks=diagnosis_remarks,
        clinical_notes=clinical_notes,
        claim_file=claim_file,
    )
    folio = payload['entities'][0]
    result = _request('POST', _SUBMIT_ENDPOINTS[kind], json=payload)
    logger.info("Jubilee %s %s submitted for member %s: %s", kind, folio['BillNo'], member_no, result.get('Status'))

    try:
        JubileeSubmission.objects.create(
            member_no=member_no,
            authorization_no=authorization_no,
            submission_type=kind,
            bill_no=folio['BillNo'],
            folio_no=folio['FolioNo'],
            total_amount=total_amount,
            patient_data=patient_data or {},
            doctor_data=doctor_data or {},
            treatments=treatments,
            submission_status=result.get('Status') or '',
            submission_id=result.get('SubmissionID') or '',
            submission_response=result,
        )
    except Exception:
        logger.warning("could not log Jubilee submission %s", folio['BillNo'], exc_info=True)

    return {**result, 'billNo': folio['BillNo'], 'folioNo': folio['FolioNo'], 'submissionType': kind}


def check_status(submission_id: str, kind: str = 'preauth') -> Dict[str, Any]:
    if not submission_id:
        raise ValueError("Submission ID is required")
    if kind not in SUBMISSION_KINDS:
        raise ValueError(f"Invalid submission type: {kind}")
    result = _request('GET', _STATUS_ENDPOINTS[kind], params={'submissionID': submission_id})
    try:
        JubileeSubmission.objects.filter(submission_id=submission_id).update(
            current_status=result.get('Status') or '',
            status_response=result,
            last_status_check=timezone.now(),
        )
    except Exception:
        logger.warning("could not update Jubilee submission %s", submission_id, exc_info=True)
    return {'submissionId': submission_id, 'type': kind, **result}


def preauthorizations_for(patient: Patient, *, pending_only: bool = False) -> QuerySet:
    """Pre-authorizations sent for ``patient``, newest first.

    A submission belongs to the patient when its folio carried the
    clinic file number or the patient's Jubilee member number.
    """
    q = Q(patient_data__patientId=patient.patient_id)
    if patient.insurance_member_id:
        q |= Q(member_no=patient.insurance_member_id)
    qs = JubileeSubmission.objects.filter(q, submission_type=JubileeSubmission.TYPE_PREAUTH)
    if pending_only:
        resolved = Q()
        for s in RESOLVED_STATUSES:
            resolved |= Q(current_status__iexact=s)
        qs = qs.filter(submission_status='OK').exclude(resolved)
    return qs.order_by('-submitted_at')


def serialize_submission(row: JubileeSubmission) -> Dict[str, Any]:
    return {
        'id': row.id,
        'memberNo': row.member_no,
        'authorizationNo': row.authorization_no,
        'submissionType': row.submission_type,
        'billNo': row.bill_no,
        'folioNo': row.folio_no,
        'submissionId': row.submission_id or None,
        'totalAmount': amount_str(row.total_amount),
        'treatments': row.treatments,
        'submissionStatus': row.submission_status,
        'currentStatus': row.current_status or None,
        'lastStatusCheck': row.last_status_check.isoformat() if row.last_status_check else None,
        'submittedAt': row.submitted_at.isoformat() if row.submitted_at else None,
    }


# ---------------------------------------------------------------------
# Price / procedure lists
# ---------------------------------------------------------------------
def price_list(kind: str = 'price') -> Dict[str, Any]:
    """Fetch a list and cache it; fall back to the cached copy when the fetch fails."""
    if kind not in LIST_KINDS:
        raise ValueError(f"Invalid list type: {kind}")
    try:
        data = _request('GET', _LIST_ENDPOINTS[kind])
    except Exception:
        cached = JubileePriceList.objects.filter(list_type=kind).first()
        if cached is None:
            raise
        logger.warning("Jubilee %s list fetch failed, serving copy from %s", kind, cached.last_updated.isoformat())
        body = cached.list_data if isinstance(cached.list_data, dict) else {'items': cached.list_data}
        return {'listType': kind, **body, 'cached': True, 'lastUpdated': cached.last_updated.isoformat()}

    try:
        JubileePriceList.objects.update_or_create(
            list_type=kind, defaults={'list_data': data, 'last_updated': timezone.now()},
        )
    except Exception:
        logger.warning("could not cache Jubilee %s list", kind, exc_info=True)
    body = data if isinstance(data, dict) else {'items': data}
    return {'listType': kind, **body}
