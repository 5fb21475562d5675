"""
Authentication views: login, staff self-registration with an invite
code, current profile, and JWT refresh/logout.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from dental.models import User
from dental.serializers.auth import LoginSerializer, RegisterStaffSerializer, UserSerializer
from dental.services.accounts import normalize_email, register_staff
from dental.services.audit import log_action

logger = logging.getLogger(__name__)


def _token_payload(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': UserSerializer(user).data,
    }


def _audit(**kwargs) -> None:
    try:
        log_action(**kwargs)
    except Exception:
        logger.warning("audit failed for %s", kwargs.get('action'), exc_info=True)


# ---------------------------------------------------------------------
# Username/email + password login (role comes from the account only)
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    identifier = s.validated_data['username']
    password = s.validated_data['password']

    username = identifier
    if '@' in identifier:
        match = User.objects.filter(email__iexact=normalize_email(identifier)).first()
        if match:
            username = match.username

    user = authenticate(request, username=username, password=password)
    ip = request.META.get('REMOTE_ADDR')
    if not user:
        _audit(user=None, action='login', object_type='user',
               detail={'result': 'fail', 'username': identifier, 'ip': ip})
        return Response({'ok': False, 'detail': 'Invalid username or password'}, status=400)

    _audit(user=user, action='login', object_type='user', object_id=user.id, detail={'result': 'ok', 'ip': ip})
    return Response(_token_payload(user), status=200)

login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterStaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    try:
        user = register_staff(
            email=v['email'],
            password=v['password'],
            full_name=v['fullName'],
            invite_code=v['inviteCode'],
            role=v.get('role'),
            phone=v.get('phone', ''),
            specialization=v.get('specialization', ''),
            license_number=v.get('licenseNumber', ''),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(_token_payload(user), status=status.HTTP_201_CREATED)

register_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'user': UserSerializer(request.user).data})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    resp = TokenRefreshView.as_view()(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        if 'refresh' in data and 'jwt_refresh' not in data:
            data['jwt_refresh'] = data.pop('refresh')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's refresh tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    return Response({'ok': True, 'blacklisted': count})
