from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException, NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.permissions import capability
from clinic.serializers.feedback import NotificationCreateSerializer
from clinic.services import notifications as svc


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsAuthenticated, capability('notifications')])
def notifications(request):
    if request.method == 'GET':
        return Response([svc.format_notification(n) for n in svc.latest_for(request.user)])
    if request.method == 'DELETE':
        svc.clear_all(request.user)
        return Response({'message': 'All notifications cleared'})

    s = NotificationCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    target_id = v.get('userId') or request.user.id
    if not User.objects.filter(pk=target_id).exists():
        raise NotFound('User not found')
    n = svc.notify(target_id, v['title'], v['message'], v['type'], v['link'])
    if n is None:
        raise APIException('Could not create notification')
    return Response(svc.format_notification(n), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('notifications')])
def unread_count(request):
    return Response(svc.unread_counts(request.user))


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('notifications')])
def read_all(request):
    svc.mark_all_read(request.user)
    return Response({'message': 'All notifications marked as read'})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('notifications')])
def mark_read(request, pk: int):
    return Response(svc.format_notification(svc.mark_read(request.user, pk)))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, capability('notifications')])
def notification_detail(request, pk: int):
    svc.delete(request.user, pk)
    return Response({'message': 'Notification deleted'})
