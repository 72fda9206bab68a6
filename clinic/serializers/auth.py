import bleach
from rest_framework import serializers

from clinic.models import Role, User


def _clean(v: str) -> str:
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class AccountSerializer(serializers.Serializer):
    """Fields common to self-registration and staff-created accounts."""
    firstName = serializers.CharField(max_length=150)
    lastName = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    gender = serializers.ChoiceField(choices=[c[0] for c in User.GENDER_CHOICES], required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)

    def validate_firstName(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('First name is required')
        return v

    def validate_lastName(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Last name is required')
        return v

    def validate_phone(self, v):
        return _clean(v)


class RegisterSerializer(AccountSerializer):
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.PATIENT)
    adminSecret = serializers.CharField(required=False, allow_blank=True, write_only=True)
    doctorDepartment = serializers.CharField(required=False, allow_blank=True, max_length=128)


class DoctorCreateSerializer(AccountSerializer):
    doctorDepartment = serializers.CharField(max_length=128)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ProfileUpdateSerializer(serializers.Serializer):
    firstName = serializers.CharField(required=False, allow_blank=True, max_length=150)
    lastName = serializers.CharField(required=False, allow_blank=True, max_length=150)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate_firstName(self, v):
        return _clean(v)

    def validate_lastName(self, v):
        return _clean(v)

    def validate_phone(self, v):
        return _clean(v)
