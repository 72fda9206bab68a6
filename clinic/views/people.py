"""
Patient and doctor directories.

Both are user accounts with a fixed role; staff create them on behalf
of the person (patients at the front desk, doctors by an admin).
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Role, User
from clinic.permissions import capability
from clinic.serializers.auth import AccountSerializer, DoctorCreateSerializer
from clinic.services.audit import log_activity
from clinic.services.users import create_account, format_user, get_user_with_role


def _create(request, serializer_cls, role: str, entity: str):
    s = serializer_cls(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = create_account(
        email=v['email'], password=v['password'], first_name=v['firstName'], last_name=v['lastName'], role=role,
        gender=v.get('gender') or '', phone=v.get('phone') or '', date_of_birth=v.get('dateOfBirth'),
        doctor_department=v.get('doctorDepartment') or '',
    )
    log_activity(user=request.user, action='CREATE', entity=entity, entity_id=user.id,
                 details=f'{entity} created: {user.full_name} ({user.email})', request=request)
    return Response(format_user(user), status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('patients')])
def patients(request):
    if request.method == 'POST':
        return _create(request, AccountSerializer, Role.PATIENT, 'Patient')
    qs = User.objects.filter(role=Role.PATIENT).order_by('-date_joined')
    return Response([format_user(u) for u in qs])


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('patients.detail')])
def patient_detail(request, pk: int):
    return Response(format_user(get_user_with_role(pk, Role.PATIENT, 'Patient')))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('doctors')])
def doctors(request):
    if request.method == 'POST':
        return _create(request, DoctorCreateSerializer, Role.DOCTOR, 'Doctor')
    qs = User.objects.filter(role=Role.DOCTOR).order_by('first_name', 'last_name')
    return Response([format_user(u) for u in qs])


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('doctors.detail')])
def doctor_detail(request, pk: int):
    return Response(format_user(get_user_with_role(pk, Role.DOCTOR, 'Doctor')))
