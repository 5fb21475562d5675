"""
Appointment endpoints, the public website booking form and the
dentists' schedule notes.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from dental.models import Appointment, ScheduleNote
from dental.permissions import ADMIN_ROLES, IsFrontDeskRole, has_role
from dental.serializers.clinical import (
    AppointmentQuerySerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
    ScheduleNoteSerializer,
)
from dental.services import appointments as appointment_svc
from dental.services.emails import EMAIL_KINDS, send_appointment_email


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    if request.method == 'GET':
        q = AppointmentQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = appointment_svc.visible_appointments(request.user, q.validated_data)
        return Response({'ok': True, 'data': AppointmentSerializer(qs, many=True).data})

    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        appt = appointment_svc.create_appointment(s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    appt = get_object_or_404(Appointment, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': AppointmentSerializer(appt).data})
    if request.method == 'DELETE':
        if not has_role(request.user, ADMIN_ROLES):
            return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        appt.delete()
        return Response({'ok': True})
    s = AppointmentSerializer(appt, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    appt = appointment_svc.update_appointment(appt, s.validated_data)
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def appointment_set_status(request, pk: int):
    appt = get_object_or_404(Appointment, pk=pk)
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appointment_svc.set_status(appt, s.validated_data['status'], user=request.user)
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFrontDeskRole])
def appointment_send_email(request, pk: int):
    """Manually send a reminder or follow-up email for an appointment."""
    appt = get_object_or_404(Appointment, pk=pk)
    kind = request.data.get('type') or 'reminder'
    if kind not in EMAIL_KINDS:
        return Response({'ok': False, 'detail': f"type must be one of: {', '.join(EMAIL_KINDS)}"}, status=400)
    row = send_appointment_email(appt, kind)
    if row is None:
        return Response({'ok': False, 'detail': 'Appointment has no email address'}, status=400)
    return Response({'ok': True, 'data': {'id': row.id, 'status': row.status, 'recipient': row.recipient_email}})


@api_view(['POST'])
@permission_classes([AllowAny])
def public_book_appointment(request):
    """Booking form on the clinic website; no account needed."""
    try:
        appt = appointment_svc.book_public_appointment(request.data)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response({
        'success': True,
        'message': 'Appointment booked successfully',
        'appointmentId': appt.id,
    })

public_book_appointment.cls.throttle_scope = 'public_booking'


# ---------------------------------------------------------------------
# Schedule notes
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def schedule_notes(request):
    if request.method == 'GET':
        qs = ScheduleNote.objects.all().order_by('date', 'time_slot')
        params = request.query_params
        if params.get('dateFrom'):
            qs = qs.filter(date__gte=params['dateFrom'])
        if params.get('dateTo'):
            qs = qs.filter(date__lte=params['dateTo'])
        if params.get('doctor'):
            qs = qs.filter(doctor_name=params['doctor'])
        return Response({'ok': True, 'data': ScheduleNoteSerializer(qs, many=True).data})
    s = ScheduleNoteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    note = s.save()
    return Response({'ok': True, 'data': ScheduleNoteSerializer(note).data}, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def schedule_note_delete(request, pk: int):
    note = get_object_or_404(ScheduleNote, pk=pk)
    note.delete()
    return Response({'ok': True})
