"""Leave requests and their approval."""
from __future__ import annotations

from rest_framework.exceptions import NotFound

from clinic.models import Leave, Role, User
from clinic.services import realtime
from clinic.services.notifications import notify
from clinic.services.users import format_user_ref


def format_leave(leave: Leave) -> dict:
    return {
        'id': leave.id,
        'user': format_user_ref(leave.user),
        'leaveType': leave.leave_type,
        'startDate': leave.start_date.isoformat(),
        'endDate': leave.end_date.isoformat(),
        'reason': leave.reason,
        'status': leave.status,
        'adminComment': leave.admin_comment,
        'approvedBy': format_user_ref(leave.approved_by),
        'createdAt': leave.created_at.isoformat() if leave.created_at else None,
        'updatedAt': leave.updated_at.isoformat() if leave.updated_at else None,
    }


def _announce(leave: Leave) -> None:
    payload = format_leave(leave)
    realtime.emit_to_user(leave.user_id, 'leave_updated', payload)
    for role in (Role.ADMIN, Role.HR):
        realtime.emit_to_role(role, 'leave_updated', payload)


def apply(user: User, *, leave_type: str, start_date, end_date, reason: str) -> Leave:
    leave = Leave.objects.create(user=user, leave_type=leave_type, start_date=start_date, end_date=end_date,
                                 reason=reason)
    _announce(leave)
    return leave


def mine(user: User):
    return Leave.objects.select_related('user', 'approved_by').filter(user=user).order_by('-created_at')


def all_leaves():
    return Leave.objects.select_related('user', 'approved_by').order_by('-created_at')


def decide(leave_id: int, approver: User, *, status: str, comment: str = '') -> Leave:
    leave = Leave.objects.select_related('user').filter(pk=leave_id).first()
    if not leave:
        raise NotFound('Leave request not found')
    leave.status = status
    leave.admin_comment = comment or ''
    leave.approved_by = approver
    leave.save(update_fields=['status', 'admin_comment', 'approved_by', 'updated_at'])
    # decisions go to every connected client
    realtime.broadcast('leave_updated', format_leave(leave))
    notify(leave.user_id, f'Leave {status}',
           f'Your {leave.leave_type} request ({leave.start_date} to {leave.end_date}) was {status.lower()}',
           'leave', '/leaves')
    return leave
