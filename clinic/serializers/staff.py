from rest_framework import serializers

from clinic.models import Leave


class CheckInSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AttendanceQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    userId = serializers.IntegerField(required=False)


class LeaveApplySerializer(serializers.Serializer):
    leaveType = serializers.ChoiceField(choices=[c[0] for c in Leave.TYPE_CHOICES])
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    reason = serializers.CharField()

    def validate(self, attrs):
        if attrs['endDate'] < attrs['startDate']:
            raise serializers.ValidationError({'endDate': 'End date cannot be before start date'})
        return attrs


class LeaveStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Leave.STATUS_APPROVED, Leave.STATUS_REJECTED])
    adminComment = serializers.CharField(required=False, allow_blank=True, default='')


class ActivityLogQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=20)
    action = serializers.CharField(required=False, allow_blank=True)
    entity = serializers.CharField(required=False, allow_blank=True)
    userId = serializers.IntegerField(required=False)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
