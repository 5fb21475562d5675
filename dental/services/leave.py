"""
Staff leave requests.

Any staff member may file a request; administrators approve or reject
it.  Filing notifies the admin role, a decision notifies the requester.
"""
from __future__ import annotations

import datetime
import logging
from collections import Counter
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from dental.exceptions import WorkflowError
from dental.models import LeaveRequest, User
from dental.services.notifications import notify

logger = logging.getLogger(__name__)


def create_leave_request(*, user: User, leave_type: str, start_date: datetime.date,
                         end_date: datetime.date, reason: str) -> LeaveRequest:
    if leave_type not in dict(LeaveRequest.TYPE_CHOICES):
        raise ValueError(f"Invalid leave type: {leave_type}")
    if end_date < start_date:
        raise ValueError("end_date must not be before start_date")
    if not (reason or '').strip():
        raise ValueError("A reason is required")

    leave = LeaveRequest.objects.create(
        user=user,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        reason=reason.strip(),
    )
    notify(
        type='leave_request_submitted',
        title='New Leave Request',
        message=f"{user.display_name} has requested {leave_type} leave from {start_date} to {end_date}",
        target_role=User.ROLE_ADMIN,
    )
    return leave


def visible_to(user: User) -> QuerySet:
    qs = LeaveRequest.objects.select_related('user', 'reviewed_by').order_by('-created_at')
    if user.role != User.ROLE_ADMIN:
        qs = qs.filter(user=user)
    return qs


def review_leave_request(leave: LeaveRequest, *, reviewer: User, approve: bool,
                         notes: str = '') -> LeaveRequest:
    """Approve or reject a pending request and tell the requester."""
    with transaction.atomic():
        locked = LeaveRequest.objects.select_for_update().get(pk=leave.pk)
        if locked.status != LeaveRequest.STATUS_PENDING:
            raise WorkflowError(f"Leave request is already {locked.status}")
        locked.status = LeaveRequest.STATUS_APPROVED if approve else LeaveRequest.STATUS_REJECTED
        locked.reviewed_by = reviewer
        locked.reviewed_at = timezone.now()
        locked.review_notes = (notes or '').strip()
        locked.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'review_notes', 'updated_at'])

    message = (f"Your {locked.leave_type} leave request from {locked.start_date} to {locked.end_date} "
               f"has been {locked.status}.")
    if locked.review_notes:
        message += f" {'Note' if approve else 'Reason'}: {locked.review_notes}"
    notify(
        type=f'leave_request_{locked.status}',
        title=f'Leave Request {locked.status.capitalize()}',
        message=message,
        target_user=locked.user,
    )
    logger.info("leave request %s %s by %s", locked.id, locked.status, reviewer.username)
    return locked


def can_delete(user: User, leave: LeaveRequest) -> bool:
    if user.role == User.ROLE_ADMIN:
        return True
    return leave.user_id == user.id and leave.status == LeaveRequest.STATUS_PENDING


def pending_count() -> int:
    return LeaveRequest.objects.filter(status=LeaveRequest.STATUS_PENDING).count()


def user_stats(user: User, year: Optional[int] = None) -> dict:
    year = year or timezone.localdate().year
    rows = list(LeaveRequest.objects.filter(user=user, start_date__year=year))
    by_status = Counter(r.status for r in rows)
    approved_days: Counter = Counter()
    for r in rows:
        if r.status == LeaveRequest.STATUS_APPROVED:
            approved_days[r.leave_type] += r.days
    return {
        'userId': user.id,
        'year': year,
        'total': len(rows),
        'pending': by_status[LeaveRequest.STATUS_PENDING],
        'approved': by_status[LeaveRequest.STATUS_APPROVED],
        'rejected': by_status[LeaveRequest.STATUS_REJECTED],
        'approvedDays': sum(approved_days.values()),
        'approvedDaysByType': dict(approved_days),
    }
