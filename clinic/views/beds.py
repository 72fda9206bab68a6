from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.wards import BedAssignSerializer, BedSerializer
from clinic.services import beds as svc
from clinic.services.audit import log_activity


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('beds')])
def beds(request):
    if request.method == 'GET':
        return Response([svc.format_bed(b) for b in svc.list_beds()])

    s = BedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    bed = svc.create_bed(room_number=v['roomNumber'], bed_number=v['bedNumber'], ward=v['ward'],
                         daily_rate=v.get('dailyRate'), notes=v.get('notes', ''), status=v.get('status'))
    log_activity(user=request.user, action='CREATE', entity='Bed', entity_id=bed.id,
                 details=f'Bed added: Room {bed.room_number}, Bed {bed.bed_number} ({bed.ward})', request=request)
    return Response(svc.format_bed(bed), status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, capability('beds.detail')])
def bed_detail(request, pk: int):
    if request.method == 'DELETE':
        bed = svc.delete_bed(pk)
        log_activity(user=request.user, action='DELETE', entity='Bed', entity_id=pk,
                     details=f'Bed removed: Room {bed.room_number}, Bed {bed.bed_number}', request=request)
        return Response({'message': 'Bed removed'})

    s = BedSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    bed = svc.update_bed(pk, s.validated_data)
    log_activity(user=request.user, action='UPDATE', entity='Bed', entity_id=bed.id,
                 details=f'Bed updated: Room {bed.room_number}, Bed {bed.bed_number} ({bed.status})', request=request)
    return Response(svc.format_bed(bed))


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, capability('beds.assign')])
def bed_assign(request, pk: int):
    s = BedAssignSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bed = svc.assign(pk, s.validated_data['patientId'], request.user)
    log_activity(user=request.user, action='STATUS_CHANGE', entity='Bed', entity_id=bed.id,
                 details=f'Patient {bed.patient.full_name} assigned to Room {bed.room_number}, Bed {bed.bed_number}',
                 request=request)
    return Response(svc.format_bed(bed))


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, capability('beds.discharge')])
def bed_discharge(request, pk: int):
    bed, summary = svc.discharge(pk, request.user)
    log_activity(user=request.user, action='STATUS_CHANGE', entity='Bed', entity_id=bed.id,
                 details=(f'Patient discharged from Room {bed.room_number}, Bed {bed.bed_number}. '
                          f'Invoice ₹{summary["totalAmount"]} generated.'),
                 request=request)
    return Response({**svc.format_bed(bed), 'discharge': summary})
