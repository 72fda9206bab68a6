"""
Account helpers shared by registration, staff-created accounts and the
profile endpoints.
"""
from __future__ import annotations

from typing import Optional

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import ValidationError as DRFValidation

from clinic.exceptions import BusinessRuleError
from clinic.models import Role, User


def format_user_ref(user: Optional[User]) -> Optional[dict]:
    """Subset of a user embedded in other records."""
    if user is None:
        return None
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'role': user.role,
        'profileImage': user.profile_image,
    }


def format_user(user: User) -> dict:
    return {
        **format_user_ref(user),
        'gender': user.gender,
        'phone': user.phone,
        'dateOfBirth': user.date_of_birth.isoformat() if user.date_of_birth else None,
        'doctorDepartment': user.doctor_department,
        'createdAt': user.date_joined.isoformat() if user.date_joined else None,
    }


def create_account(*, email: str, password: str, first_name: str, last_name: str,
                   role: str = Role.PATIENT, **extra) -> User:
    """Create a user after checking email uniqueness and password strength."""
    email = email.strip().lower()
    if User.objects.filter(email__iexact=email).exists():
        raise BusinessRuleError('User already exists')
    candidate = User(email=email, first_name=first_name, last_name=last_name)
    try:
        validate_password(password, user=candidate)
    except ValidationError as e:
        raise DRFValidation({'password': e.messages})
    if role != Role.DOCTOR:
        extra.pop('doctor_department', None)
    try:
        with transaction.atomic():
            return User.objects.create_user(
                email=email, password=password, first_name=first_name, last_name=last_name, role=role, **extra,
            )
    except IntegrityError:
        # concurrent registration with the same email
        raise BusinessRuleError('User already exists')


def get_user_with_role(user_id, role: str, label: str) -> User:
    user = User.objects.filter(pk=user_id, role=role).first()
    if not user:
        raise NotFound(f'{label} not found')
    return user


def update_profile(user: User, *, first_name=None, last_name=None, phone=None, password=None) -> User:
    if first_name:
        user.first_name = first_name
    if last_name:
        user.last_name = last_name
    if phone is not None:
        user.phone = phone
    if password:
        try:
            validate_password(password, user=user)
        except ValidationError as e:
            raise DRFValidation({'password': e.messages})
        user.set_password(password)
    user.save()
    return user
