"""
Patient files: demographics, medical history and treatment notes.
"""
from __future__ import annotations

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import MedicalRecord, Patient, TreatmentNote
from dental.permissions import CLINICAL_ROLES, FRONT_DESK_ROLES, IsClinicalRole, has_role
from dental.serializers.patients import (
    DuplicateCheckSerializer,
    FamilyLookupSerializer,
    MedicalRecordSerializer,
    PatientListQuerySerializer,
    PatientSerializer,
    TreatmentNoteSerializer,
)
from dental.services import patients as patient_svc
from dental.services.audit import log_action

logger = logging.getLogger(__name__)


def _forbidden():
    return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients_list(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        v = q.validated_data
        qs = Patient.objects.all().order_by('-created_at')
        term = (v.get('q') or '').strip()
        if term:
            qs = qs.filter(Q(name__icontains=term) | Q(phone__icontains=term) | Q(patient_id__icontains=term))
        if v.get('type'):
            qs = qs.filter(patient_type=v['type'])
        total = qs.count()
        page = v.get('page', 1)
        page_size = v.get('pageSize', 50)
        items = qs[(page - 1) * page_size: page * page_size]
        return Response({
            'ok': True,
            'data': PatientSerializer(items, many=True).data,
            'pagination': {'total': total, 'page': page, 'pageSize': page_size},
        })

    if not has_role(request.user, FRONT_DESK_ROLES):
        return _forbidden()
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        patient = patient_svc.create_patient(s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': PatientSerializer(patient).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = get_object_or_404(Patient, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': PatientSerializer(patient).data})
    if request.method == 'DELETE':
        if not has_role(request.user, FRONT_DESK_ROLES):
            return _forbidden()
        patient.delete()
        return Response({'ok': True})

    s = PatientSerializer(patient, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    try:
        patient = patient_svc.update_patient(patient, s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': PatientSerializer(patient).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def insurance_mismatches(request):
    return Response({'ok': True, 'data': patient_svc.insurance_mismatches()})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def patients_check_duplicate(request):
    s = DuplicateCheckSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    existing = patient_svc.find_duplicate(s.validated_data['name'], s.validated_data['phone'])
    return Response({
        'ok': True,
        'data': {'exists': existing is not None, 'patient': PatientSerializer(existing).data if existing else None},
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def patients_family(request):
    s = FamilyLookupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    qs = patient_svc.family_members(v.get('phone', ''), v.get('email', ''), exclude_id=v.get('excludeId'))
    return Response({'ok': True, 'data': PatientSerializer(qs, many=True).data})


# ---------------------------------------------------------------------
# Medical history
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medical_records(request, pk: int):
    patient = get_object_or_404(Patient, pk=pk)
    if request.method == 'GET':
        try:
            log_action(user=request.user, action='medical_access', object_type='patient', object_id=patient.id)
        except Exception:
            logger.warning("audit failed for medical access to patient %s", patient.id, exc_info=True)
        qs = patient.medical_records.order_by('-date', '-id')
        return Response({'ok': True, 'data': MedicalRecordSerializer(qs, many=True).data})

    if not has_role(request.user, CLINICAL_ROLES):
        return _forbidden()
    s = MedicalRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = s.save(patient=patient)
    return Response({'ok': True, 'data': MedicalRecordSerializer(record).data}, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def medical_record_detail(request, pk: int):
    record = get_object_or_404(MedicalRecord, pk=pk)
    if request.method == 'DELETE':
        record.delete()
        return Response({'ok': True})
    s = MedicalRecordSerializer(record, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    s.save()
    return Response({'ok': True, 'data': s.data})


# ---------------------------------------------------------------------
# Treatment notes
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def treatment_notes(request, pk: int):
    patient = get_object_or_404(Patient, pk=pk)
    if request.method == 'GET':
        qs = patient.treatment_notes.order_by('-date', '-id')
        return Response({'ok': True, 'data': TreatmentNoteSerializer(qs, many=True).data})

    if not has_role(request.user, CLINICAL_ROLES):
        return _forbidden()
    s = TreatmentNoteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    note = s.save(patient=patient)
    return Response({'ok': True, 'data': TreatmentNoteSerializer(note).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def treatment_notes_all(request):
    qs = TreatmentNote.objects.select_related('patient').order_by('-date', '-id')
    doctor = request.query_params.get('doctor')
    if doctor:
        qs = qs.filter(doctor=doctor)
    return Response({'ok': True, 'data': TreatmentNoteSerializer(qs[:500], many=True).data})


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def treatment_note_detail(request, pk: int):
    note = get_object_or_404(TreatmentNote, pk=pk)
    if request.method == 'DELETE':
        note.delete()
        return Response({'ok': True})
    s = TreatmentNoteSerializer(note, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    s.save()
    return Response({'ok': True, 'data': s.data})
