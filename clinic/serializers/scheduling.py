from rest_framework import serializers

from clinic.models import Appointment


class AppointmentCreateSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField()
    appointmentDate = serializers.DateTimeField()
    reason = serializers.CharField(required=False, allow_blank=True)
    patientId = serializers.IntegerField(required=False, allow_null=True)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[c[0] for c in Appointment.STATUS_CHOICES],
        error_messages={'invalid_choice': 'Invalid status: {input}'},
    )
