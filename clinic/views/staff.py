"""Attendance, leave requests and the activity log."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.staff import (
    ActivityLogQuerySerializer,
    AttendanceQuerySerializer,
    CheckInSerializer,
    LeaveApplySerializer,
    LeaveStatusSerializer,
)
from clinic.services import attendance, leaves
from clinic.services.audit import log_activity, my_logs, query_logs


# ---------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([IsAuthenticated, capability('attendance.self')])
def check_in(request):
    s = CheckInSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = attendance.check_in(request.user, notes=s.validated_data['notes'])
    log_activity(user=request.user, action='CHECK_IN', entity='Attendance', entity_id=record.id,
                 details=f'Checked in ({record.status})', request=request)
    return Response(attendance.format_attendance(record), status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('attendance.self')])
def check_out(request):
    record = attendance.check_out(request.user)
    log_activity(user=request.user, action='CHECK_OUT', entity='Attendance', entity_id=record.id,
                 details=f'Checked out after {record.hours_worked}h ({record.status})', request=request)
    return Response(attendance.format_attendance(record))


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('attendance.self')])
def my_attendance(request):
    return Response([attendance.format_attendance(a) for a in attendance.history(request.user)])


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('attendance.self')])
def today_attendance(request):
    record = attendance.today(request.user)
    if record is None:
        return Response({'checkedIn': False})
    return Response({**attendance.format_attendance(record), 'checkedIn': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('attendance')])
def all_attendance(request):
    q = AttendanceQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    records = attendance.all_records(date=q.validated_data.get('date'), user_id=q.validated_data.get('userId'))
    return Response([attendance.format_attendance(a) for a in records])


# ---------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('leaves')])
def leave_requests(request):
    if request.method == 'GET':
        return Response([leaves.format_leave(lv) for lv in leaves.all_leaves()])

    s = LeaveApplySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    leave = leaves.apply(request.user, leave_type=v['leaveType'], start_date=v['startDate'], end_date=v['endDate'],
                         reason=v['reason'])
    log_activity(user=request.user, action='CREATE', entity='Leave', entity_id=leave.id,
                 details=f'{leave.leave_type} requested {leave.start_date} to {leave.end_date}', request=request)
    return Response(leaves.format_leave(leave), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('leaves.my')])
def my_leaves(request):
    return Response([leaves.format_leave(lv) for lv in leaves.mine(request.user)])


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('leaves.status')])
def leave_status(request, pk: int):
    s = LeaveStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    leave = leaves.decide(pk, request.user, status=s.validated_data['status'],
                          comment=s.validated_data['adminComment'])
    log_activity(user=request.user, action='STATUS_CHANGE', entity='Leave', entity_id=leave.id,
                 details=f'Leave {leave.status.lower()} for {leave.user.email}', request=request)
    return Response(leaves.format_leave(leave))


# ---------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('activity_logs')])
def activity_logs(request):
    q = ActivityLogQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    return Response(query_logs(page=v['page'], limit=v['limit'], action=v.get('action', ''),
                               entity=v.get('entity', ''), user_id=v.get('userId'),
                               start_date=v.get('startDate'), end_date=v.get('endDate')))


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('activity_logs.my')])
def my_activity(request):
    return Response(my_logs(request.user))
