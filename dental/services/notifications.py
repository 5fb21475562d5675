"""
In-app notifications.

Rows are stored in :class:`~dental.models.Notification` and pushed to
connected staff browsers through the Channels group ``notifications``.
Creating a notification is always best-effort: callers never fail
because a notification could not be written or broadcast.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models import Q, QuerySet

from dental.models import Appointment, Notification, User

logger = logging.getLogger(__name__)

GROUP = "notifications"


def serialize_notification(n: Notification) -> dict:
    return {
        'id': n.id,
        'type': n.type,
        'title': n.title,
        'message': n.message,
        'targetRole': n.target_role or None,
        'targetDoctorName': n.target_doctor_name or None,
        'targetUserId': n.target_user_id,
        'appointmentId': n.appointment_id,
        'read': n.read,
        'createdAt': n.created_at.isoformat() if n.created_at else None,
    }


def _broadcast(n: Notification) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    event = {"type": "notification.created", "notification": serialize_notification(n)}
    try:
        async_to_sync(channel_layer.group_send)(GROUP, event)
    except Exception:
        logger.warning("notification %s broadcast failed", n.id, exc_info=True)


def notify(
    *,
    title: str,
    message: str,
    type: str = 'info',
    target_role: str = '',
    target_doctor_name: str = '',
    target_user: Optional[User] = None,
    appointment: Optional[Appointment] = None,
) -> Optional[Notification]:
    try:
        with transaction.atomic():
            n = Notification.objects.create(
                type=type,
                title=title,
                message=message,
                target_role=target_role or '',
                target_doctor_name=target_doctor_name or '',
                target_user=target_user,
                appointment=appointment,
            )
    except Exception:
        logger.warning("could not store notification %r", title, exc_info=True)
        return None
    _broadcast(n)
    return n


def notifications_for(user: User) -> QuerySet:
    """Targeted rows, rows for the user's role and untargeted broadcasts."""
    q = (
        Q(target_user=user)
        | Q(target_user__isnull=True, target_role=user.role, target_doctor_name='')
        | Q(target_user__isnull=True, target_role='', target_doctor_name='')
    )
    if user.role == User.ROLE_DENTIST:
        full_name = user.get_full_name()
        if full_name:
            q |= Q(target_doctor_name=full_name)
    return Notification.objects.filter(q).order_by('-created_at')


def mark_read(user: User, notification_id: int) -> bool:
    return notifications_for(user).filter(id=notification_id).update(read=True) > 0


def mark_all_read(user: User) -> int:
    ids = list(notifications_for(user).filter(read=False).values_list('id', flat=True))
    return Notification.objects.filter(id__in=ids).update(read=True)


def mark_unread(user: User, notification_ids: Iterable[int]) -> int:
    ids = list(notifications_for(user).filter(id__in=list(notification_ids)).values_list('id', flat=True))
    return Notification.objects.filter(id__in=ids).update(read=False)
