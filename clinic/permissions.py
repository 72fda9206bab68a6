"""
Role based access control.

``CAPABILITIES`` is the single table mapping each protected route (by
capability name) and HTTP method to the roles allowed to call it.
Views declare the capability they implement with
``@permission_classes([IsAuthenticated, capability('beds.assign')])``;
ownership rules (a patient reading only their own records) are enforced
in the services, not here.
"""
from __future__ import annotations

from rest_framework.permissions import BasePermission

from .models import Role

ANY = frozenset(Role.values)
ADMIN = frozenset({Role.ADMIN})
STAFF_READERS = frozenset({Role.ADMIN, Role.DOCTOR, Role.RECEPTIONIST, Role.PHARMACIST})
FRONT_DESK = frozenset({Role.ADMIN, Role.RECEPTIONIST})
BILLING = frozenset({Role.ADMIN, Role.RECEPTIONIST, Role.PHARMACIST})
PHARMACY = frozenset({Role.ADMIN, Role.PHARMACIST})
CLINICIANS = frozenset({Role.DOCTOR, Role.ADMIN})
WARD = frozenset({Role.ADMIN, Role.RECEPTIONIST, Role.DOCTOR})
PEOPLE_OPS = frozenset({Role.ADMIN, Role.HR})

CAPABILITIES: dict[str, dict[str, frozenset]] = {
    'users.profile': {'GET': ANY, 'PUT': ANY},
    'users.upload_picture': {'POST': ANY},
    'patients': {'GET': STAFF_READERS, 'POST': FRONT_DESK},
    'patients.detail': {'GET': STAFF_READERS},
    'doctors': {'GET': ANY, 'POST': ADMIN},
    'doctors.detail': {'GET': ANY},
    'appointments': {'GET': ANY, 'POST': frozenset({Role.PATIENT, Role.RECEPTIONIST})},
    'appointments.detail': {'PUT': frozenset({Role.DOCTOR, Role.ADMIN, Role.RECEPTIONIST})},
    'invoices': {'GET': ANY, 'POST': BILLING},
    'invoices.pay': {'PUT': BILLING},
    'medicines': {'GET': ANY, 'POST': PHARMACY},
    'medicines.detail': {'PUT': PHARMACY, 'DELETE': PHARMACY},
    'medicines.alerts': {'GET': PHARMACY},
    'prescriptions': {'GET': ANY, 'POST': frozenset({Role.DOCTOR})},
    'lab_reports': {'GET': ANY, 'POST': CLINICIANS},
    'lab_reports.detail': {'PUT': CLINICIANS, 'DELETE': ADMIN},
    'medical_history': {'GET': ANY, 'POST': CLINICIANS},
    'medical_history.detail': {'PUT': CLINICIANS, 'DELETE': ADMIN},
    'beds': {'GET': WARD, 'POST': ADMIN},
    'beds.detail': {'PUT': FRONT_DESK, 'DELETE': ADMIN},
    'beds.assign': {'PUT': WARD, 'POST': WARD},
    'beds.discharge': {'PUT': WARD, 'POST': WARD},
    'notifications': {'GET': ANY, 'POST': ANY, 'PUT': ANY, 'DELETE': ANY},
    'activity_logs': {'GET': ADMIN},
    'activity_logs.my': {'GET': ANY},
    'attendance.self': {'GET': ANY, 'POST': ANY, 'PUT': ANY},
    'attendance': {'GET': ADMIN},
    'reviews': {'POST': frozenset({Role.PATIENT})},
    'reviews.read': {'GET': ANY},
    'leaves': {'GET': PEOPLE_OPS, 'POST': ANY},
    'leaves.my': {'GET': ANY},
    'leaves.status': {'PUT': PEOPLE_OPS},
    'chat': {'GET': ANY, 'POST': ANY, 'PUT': ANY},
    'search': {'GET': ANY},
}


def allowed_roles(name: str, method: str) -> frozenset:
    """Roles allowed to call capability ``name`` with ``method``."""
    rules = CAPABILITIES[name]
    if method in ('HEAD', 'OPTIONS'):
        method = 'GET'
    return rules.get(method, frozenset())


class RolePermission(BasePermission):
    """Checks ``request.user.role`` against one row of the table."""
    capability_name: str = ''
    message = 'Not authorized to access this route'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, 'user', None)
        if not (user and user.is_authenticated):
            return False
        return getattr(user, 'role', None) in allowed_roles(self.capability_name, request.method)


def capability(name: str) -> type[RolePermission]:
    """Build the permission class guarding capability ``name``."""
    if name not in CAPABILITIES:
        raise KeyError(f'unknown capability {name!r}')
    return type(f'Can_{name.replace(".", "_")}', (RolePermission,), {'capability_name': name})
