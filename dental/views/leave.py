"""
Staff leave requests.  Staff see and withdraw their own pending
requests; administrators see all of them and decide.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import LeaveRequest, User
from dental.permissions import ADMIN_ROLES, IsAdminRole, has_role
from dental.serializers.leave import LeaveRequestCreateSerializer, LeaveRequestSerializer, LeaveReviewSerializer
from dental.services import leave as leave_svc


def _forbidden(detail='Permission denied'):
    return Response({'ok': False, 'detail': detail}, status=status.HTTP_403_FORBIDDEN)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_requests(request):
    if request.method == 'GET':
        qs = leave_svc.visible_to(request.user)
        if request.query_params.get('status'):
            qs = qs.filter(status=request.query_params['status'])
        return Response({'ok': True, 'data': LeaveRequestSerializer(qs, many=True).data})

    s = LeaveRequestCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        leave = leave_svc.create_leave_request(user=request.user, **s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': LeaveRequestSerializer(leave).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def leave_request_detail(request, pk: int):
    leave = get_object_or_404(LeaveRequest.objects.select_related('user', 'reviewed_by'), pk=pk)
    if request.method == 'GET':
        if leave.user_id != request.user.id and not has_role(request.user, ADMIN_ROLES):
            return _forbidden('Not authorized to view this leave request')
        return Response({'ok': True, 'data': LeaveRequestSerializer(leave).data})

    if not leave_svc.can_delete(request.user, leave):
        return _forbidden('Can only delete your own pending requests')
    leave.delete()
    return Response({'ok': True})


def _review(request, pk: int, approve: bool):
    leave = get_object_or_404(LeaveRequest, pk=pk)
    s = LeaveReviewSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    leave = leave_svc.review_leave_request(leave, reviewer=request.user, approve=approve,
                                           notes=s.validated_data.get('review_notes', ''))
    return Response({'ok': True, 'data': LeaveRequestSerializer(leave).data})


@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def leave_request_approve(request, pk: int):
    return _review(request, pk, approve=True)


@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def leave_request_reject(request, pk: int):
    return _review(request, pk, approve=False)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def leave_pending_count(request):
    return Response({'ok': True, 'data': {'count': leave_svc.pending_count()}})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def leave_user_stats(request, user_id: int):
    if user_id != request.user.id and not has_role(request.user, ADMIN_ROLES):
        return _forbidden('Not authorized to view these statistics')
    user = get_object_or_404(User, pk=user_id)
    year = request.query_params.get('year')
    try:
        year = int(year) if year else None
    except ValueError:
        return Response({'ok': False, 'detail': 'year must be a number'}, status=400)
    return Response({'ok': True, 'data': leave_svc.user_stats(user, year)})
