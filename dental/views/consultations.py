"""
Consultation room and X-ray queue.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import Appointment, Consultation, Patient
from dental.permissions import ADMIN_ROLES, IsAdminRole, IsClinicalRole, IsRadiologyRole, has_role
from dental.serializers.clinical import (
    ConsultationSerializer,
    ConsultationStartSerializer,
    ConsultationUpdateSerializer,
    XRayUploadSerializer,
)
from dental.services import consultations as consultation_svc
from dental.services.xray import upload_xray_result


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def consultation_start(request):
    s = ConsultationStartSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = get_object_or_404(Patient, pk=s.validated_data['patientId'])
    appointment = None
    if s.validated_data.get('appointmentId'):
        appointment = get_object_or_404(Appointment, pk=s.validated_data['appointmentId'])
    c = consultation_svc.start_consultation(patient=patient, doctor=request.user, appointment=appointment)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consultations_list(request):
    """Consultations for ``?patientId=``; admins may list everything."""
    qs = Consultation.objects.select_related('patient').prefetch_related('xray_images').order_by('-started_at')
    patient_id = request.query_params.get('patientId')
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    elif not has_role(request.user, ADMIN_ROLES):
        return Response({'ok': False, 'detail': 'patientId is required'}, status=400)
    status_filter = request.query_params.get('status')
    if status_filter:
        qs = qs.filter(status=status_filter)
    return Response({'ok': True, 'data': ConsultationSerializer(qs[:500], many=True).data})


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def consultation_detail(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': ConsultationSerializer(c).data})
    if request.method == 'DELETE':
        if not has_role(request.user, ADMIN_ROLES):
            return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        consultation_svc.delete_consultation(c)
        return Response({'ok': True})

    if not IsClinicalRole().has_permission(request, None):
        return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    s = ConsultationUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    c = consultation_svc.update_consultation(c, s.validated_data)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def consultation_request_xray(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    c = consultation_svc.request_xray(c)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def consultation_complete(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    c = consultation_svc.complete_consultation(c)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def consultation_reopen(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    c = consultation_svc.reopen_consultation(c)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consultation_for_appointment(request, appointment_id: int):
    c = consultation_svc.latest_for_appointment(appointment_id)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data if c else None})


# ---------------------------------------------------------------------
# X-ray room
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRadiologyRole])
def xray_queue(request):
    qs = consultation_svc.list_waiting_xray()
    return Response({'ok': True, 'data': ConsultationSerializer(qs, many=True).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsRadiologyRole])
@parser_classes([MultiPartParser, FormParser])
def xray_upload(request, pk: int):
    c = get_object_or_404(Consultation, pk=pk)
    s = XRayUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        c = upload_xray_result(
            c,
            request.FILES.getlist('files'),
            note=s.validated_data.get('note', ''),
            radiologist=s.validated_data.get('radiologist', ''),
            uploaded_by=request.user,
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': ConsultationSerializer(c).data})
