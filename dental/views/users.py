"""
Staff administration: user list, role changes, account removal and
invite codes.  Administrators only.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import InviteCode, User
from dental.permissions import IsAdminRole
from dental.serializers.auth import InviteCodeSerializer, InviteCreateSerializer, SetRoleSerializer, UserSerializer
from dental.services import accounts


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users_list(request):
    qs = User.objects.all().order_by('role', 'username')
    role = request.query_params.get('role')
    if role:
        qs = qs.filter(role=role)
    return Response({'ok': True, 'data': UserSerializer(qs, many=True).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_set_role(request, pk: int):
    user = get_object_or_404(User, pk=pk)
    s = SetRoleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        accounts.set_role(actor=request.user, user=user, role=s.validated_data['role'])
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'user': UserSerializer(user).data})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_delete(request, pk: int):
    user = get_object_or_404(User, pk=pk)
    try:
        accounts.delete_user(actor=request.user, user=user)
    except PermissionError as e:
        return Response({'ok': False, 'detail': str(e)}, status=403)
    return Response({'ok': True})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def invites(request):
    if request.method == 'GET':
        qs = InviteCode.objects.select_related('created_by').order_by('-created_at')
        return Response({'ok': True, 'data': InviteCodeSerializer(qs, many=True).data})
    s = InviteCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    try:
        invite = accounts.create_invite(
            created_by=request.user,
            role=v['role'],
            code=v.get('code'),
            max_uses=v.get('max_uses', 1),
            expires_at=v.get('expires_at'),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': InviteCodeSerializer(invite).data}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def invite_deactivate(request, pk: int):
    invite = get_object_or_404(InviteCode, pk=pk)
    accounts.deactivate_invite(invite, actor=request.user)
    return Response({'ok': True, 'data': InviteCodeSerializer(invite).data})
