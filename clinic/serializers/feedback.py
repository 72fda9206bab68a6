import bleach
from rest_framework import serializers

from clinic.models import Notification


class ReviewCreateSerializer(serializers.Serializer):
    appointmentId = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, max_length=500, default='')

    def validate_comment(self, v):
        return bleach.clean((v or '').strip(), tags=[], strip=True)


class NotificationCreateSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=[c[0] for c in Notification.TYPE_CHOICES], required=False,
                                   default='general')
    link = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class MessageSendSerializer(serializers.Serializer):
    receiverId = serializers.IntegerField()
    message = serializers.CharField(trim_whitespace=True)

    def validate_message(self, v):
        v = bleach.clean(v, tags=[], strip=True).strip()
        if not v:
            raise serializers.ValidationError('Message cannot be empty')
        return v
