from rest_framework import serializers

from clinic.models import LabReport, MedicalHistory


class PrescribedMedicineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=255, required=False, allow_blank=True)
    duration = serializers.CharField(max_length=255, required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)


class PrescriptionCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField()
    appointmentId = serializers.IntegerField()
    diagnosis = serializers.CharField()
    medicines = PrescribedMedicineSerializer(many=True, required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True)


class LabReportCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField()
    doctorId = serializers.IntegerField(required=False, allow_null=True)
    testName = serializers.CharField(max_length=255)
    testCategory = serializers.ChoiceField(choices=[c[0] for c in LabReport.CATEGORY_CHOICES], required=False,
                                           default='Blood Test')
    notes = serializers.CharField(required=False, allow_blank=True)


class LabReportUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in LabReport.STATUS_CHOICES], required=False)
    results = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class MedicalHistorySerializer(serializers.Serializer):
    patientId = serializers.IntegerField()
    type = serializers.ChoiceField(choices=[c[0] for c in MedicalHistory.TYPE_CHOICES])
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    severity = serializers.ChoiceField(choices=[c[0] for c in MedicalHistory.SEVERITY_CHOICES], required=False,
                                       default='N/A')
    dateRecorded = serializers.DateTimeField(required=False)
    isActive = serializers.BooleanField(required=False, default=True)
