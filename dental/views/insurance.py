"""
Insurer endpoints.

Jubilee answers ``{"success": true, "data": ...}`` or
``{"success": false, "error": ...}``; SMART answers ``{"ok": true, ...}``
or ``{"error": ...}``. Front-end code depends on both envelopes.
"""
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.exceptions import InsurerConfigError, InsurerError
from dental.models import Patient
from dental.serializers.insurance import (
    ItemsVerifySerializer,
    MemberVerifySerializer,
    PriceListQuerySerializer,
    StatusQuerySerializer,
    SubmissionSerializer,
)
from dental.services.insurance import jubilee, smart

logger = logging.getLogger(__name__)


def _jubilee_ok(data):
    return Response({'success': True, 'data': data})


def _jubilee_error(message):
    return Response({'success': False, 'error': message}, status=status.HTTP_400_BAD_REQUEST)


def _first_error(errors) -> str:
    for field, msgs in errors.items():
        msg = msgs[0] if isinstance(msgs, list) and msgs else msgs
        return f"{field}: {msg}"
    return "Invalid request"


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jubilee_auth(request):
    try:
        return _jubilee_ok(jubilee.authenticate(force=True))
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee authentication failed: %s", e)
        return _jubilee_error(str(e))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jubilee_member_verify(request):
    s = MemberVerifySerializer(data=request.data)
    if not s.is_valid():
        return _jubilee_error(_first_error(s.errors))
    try:
        return _jubilee_ok(jubilee.verify_member(s.validated_data['memberNo']))
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee member verification failed: %s", e)
        return _jubilee_error(str(e))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jubilee_items_verify(request):
    s = ItemsVerifySerializer(data=request.data)
    if not s.is_valid():
        return _jubilee_error(_first_error(s.errors))
    v = s.validated_data
    try:
        data = jubilee.verify_items(
            v['memberNo'],
            v['verifyItems'],
            v['amount'],
            benefit_code=v.get('benefitCode') or None,
            procedure_code=v.get('procedureCode') or None,
        )
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee item verification failed: %s", e)
        return _jubilee_error(str(e))
    return _jubilee_ok(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jubilee_submit(request):
    s = SubmissionSerializer(data=request.data)
    if not s.is_valid():
        return _jubilee_error(_first_error(s.errors))
    v = s.validated_data
    try:
        data = jubilee.submit(
            kind=v.get('submissionType', 'preauth'),
            member_no=v['memberNo'],
            authorization_no=v['authorizationNo'],
            treatments=v['treatments'],
            total_amount=v['totalAmount'],
            patient_data=v.get('patientData'),
            doctor_data=v.get('doctorData'),
            diagnosis_remarks=v.get('diagnosisRemarks'),
            clinical_notes=v.get('clinicalNotes'),
            claim_file=v.get('claimFile'),
        )
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee submission failed: %s", e)
        return _jubilee_error(str(e))
    return _jubilee_ok(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def jubilee_status(request):
    s = StatusQuerySerializer(data=request.query_params)
    if not s.is_valid():
        return _jubilee_error(_first_error(s.errors))
    try:
        data = jubilee.check_status(s.validated_data['submissionId'], s.validated_data.get('type', 'preauth'))
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee status check failed: %s", e)
        return _jubilee_error(str(e))
    return _jubilee_ok(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def jubilee_price_lists(request):
    s = PriceListQuerySerializer(data=request.query_params)
    if not s.is_valid():
        return _jubilee_error(_first_error(s.errors))
    try:
        data = jubilee.price_list(s.validated_data.get('type', 'price'))
    except (ValueError, InsurerError) as e:
        logger.warning("Jubilee price list unavailable: %s", e)
        return _jubilee_error(str(e))
    return _jubilee_ok(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def jubilee_preauthorizations(request, patient_id: int, scope: str = 'pending'):
    patient = get_object_or_404(Patient, pk=patient_id)
    rows = jubilee.preauthorizations_for(patient, pending_only=scope != 'all')
    return _jubilee_ok([jubilee.serialize_submission(r) for r in rows])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def smart_dispatch(request):
    payload = request.data if isinstance(request.data, dict) else {}
    action = payload.get('action')
    try:
        result = smart.dispatch(action, payload)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InsurerConfigError as e:
        logger.error("SMART is not configured: %s", e)
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except InsurerError as e:
        logger.warning("SMART action %s failed: %s", action, e)
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
    return Response(result)
