from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.scheduling import AppointmentCreateSerializer, AppointmentStatusSerializer
from clinic.services import appointments as svc
from clinic.services.audit import log_activity


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('appointments')])
def appointments(request):
    if request.method == 'GET':
        return Response([svc.format_appointment(a) for a in svc.list_for(request.user)])

    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    appt = svc.book(request.user, doctor_id=v['doctorId'], appointment_date=v['appointmentDate'],
                    reason=v.get('reason', ''), patient_id=v.get('patientId'))
    log_activity(user=request.user, action='CREATE', entity='Appointment', entity_id=appt.id,
                 details=f'Appointment booked for {svc.local_day(appt.appointment_date)}', request=request)
    return Response(svc.format_appointment(appt), status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('appointments.detail')])
def appointment_detail(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = svc.update_status(pk, s.validated_data['status'])
    log_activity(user=request.user, action='STATUS_CHANGE', entity='Appointment', entity_id=appt.id,
                 details=f'Appointment status changed to {appt.status}', request=request)
    return Response(svc.format_appointment(appt))
