"""
Staff accounts and invite codes.

New staff sign up with an invite code issued by an administrator; the
code, not the request, decides the role of the new account.
"""
from __future__ import annotations

import logging
import secrets
import string
from typing import Optional

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from dental.exceptions import ConflictError
from dental.models import InviteCode, User
from dental.services.audit import log_action

logger = logging.getLogger(__name__)

STAFF_ROLES = tuple(r for r, _ in User.ROLE_CHOICES)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_email(email: Optional[str]) -> str:
    return (email or '').strip().lower()


def generate_invite_code(length: int = 8) -> str:
    return ''.join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def create_invite(*, created_by: Optional[User], role: str, code: Optional[str] = None,
                  max_uses: int = 1, expires_at=None) -> InviteCode:
    if role not in STAFF_ROLES:
        raise ValueError(f"Invalid role: {role}")
    if max_uses < 1:
        raise ValueError("max_uses must be at least 1")
    code = (code or '').strip().upper() or generate_invite_code()
    if InviteCode.objects.filter(code=code).exists():
        raise ConflictError("Invite code already exists")
    invite = InviteCode.objects.create(
        code=code, role=role, max_uses=max_uses, expires_at=expires_at, created_by=created_by,
    )
    try:
        log_action(user=created_by, action='invite_create', object_type='invite_code', object_id=invite.id,
                   detail={'role': role, 'max_uses': max_uses})
    except Exception:
        logger.warning("audit failed for invite %s", invite.id, exc_info=True)
    return invite


def deactivate_invite(invite: InviteCode, *, actor: Optional[User] = None) -> InviteCode:
    invite.is_active = False
    invite.save(update_fields=['is_active', 'updated_at'])
    try:
        log_action(user=actor, action='invite_deactivate', object_type='invite_code', object_id=invite.id)
    except Exception:
        logger.warning("audit failed for invite %s", invite.id, exc_info=True)
    return invite


@transaction.atomic
def register_staff(*, email: str, password: str, full_name: str, invite_code: str,
                   role: Optional[str] = None, phone: str = '', specialization: str = '',
                   license_number: str = '') -> User:
    """Create a staff account from an invite code.

    The invite row is locked for the duration of the transaction so two
    concurrent sign-ups cannot both consume the last use of a code.
    """
    email = normalize_email(email)
    if not email or not password or not (full_name or '').strip():
        raise ValueError("Email, password and full name are required")

    invite = (
        InviteCode.objects.select_for_update()
        .filter(code=(invite_code or '').strip().upper(), is_active=True)
        .first()
    )
    if not invite:
        raise ValueError("Invalid or inactive invite code")
    if invite.expires_at and invite.expires_at <= timezone.now():
        raise ValueError("Invite code has expired")
    if invite.uses_count >= invite.max_uses:
        raise ValueError("Invite code has reached maximum uses")

    if role and role != invite.role:
        logger.info("ignoring requested role %r for invite %s (grants %r)", role, invite.code, invite.role)

    if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
        raise ConflictError("An account with this email already exists")

    try:
        validate_password(password)
    except DjangoValidationError as e:
        raise ValueError(' '.join(e.messages))

    first, _, last = full_name.strip().partition(' ')
    user = User.objects.create_user(
        username=email,
        email=email,
        password=password,
        first_name=first,
        last_name=last.strip(),
        role=invite.role,
        phone=phone or '',
        specialization=specialization or '',
        license_number=license_number or '',
    )
    InviteCode.objects.filter(pk=invite.pk).update(uses_count=F('uses_count') + 1, updated_at=timezone.now())

    try:
        with transaction.atomic():
            log_action(user=user, action='staff_register', object_type='user', object_id=user.id,
                       detail={'invite': invite.code, 'role': invite.role})
    except Exception:
        logger.warning("audit failed for registration of user %s", user.id, exc_info=True)
    return user


def set_role(*, actor: User, user: User, role: str) -> User:
    if role not in STAFF_ROLES:
        raise ValueError(f"Invalid role: {role}")
    old = user.role
    user.role = role
    user.save(update_fields=['role'])
    try:
        log_action(user=actor, action='role_change', object_type='user', object_id=user.id,
                   detail={'from': old, 'to': role})
    except Exception:
        logger.warning("audit failed for role change of user %s", user.id, exc_info=True)
    return user


def delete_user(*, actor: User, user: User) -> None:
    if actor.pk == user.pk:
        raise PermissionError("You cannot delete your own account")
    uid = user.pk
    user.delete()
    try:
        log_action(user=actor, action='user_delete', object_type='user', object_id=uid)
    except Exception:
        logger.warning("audit failed for deletion of user %s", uid, exc_info=True)
