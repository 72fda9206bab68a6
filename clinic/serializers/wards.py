from rest_framework import serializers

from clinic.models import Bed


class BedSerializer(serializers.Serializer):
    roomNumber = serializers.CharField(max_length=32)
    bedNumber = serializers.CharField(max_length=32)
    ward = serializers.ChoiceField(choices=[c[0] for c in Bed.WARD_CHOICES], required=False, default='General')
    status = serializers.ChoiceField(choices=[c[0] for c in Bed.STATUS_CHOICES], required=False)
    dailyRate = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class BedAssignSerializer(serializers.Serializer):
    patientId = serializers.IntegerField()
