"""Profile endpoints for the signed-in user."""
from __future__ import annotations

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.auth import ProfileUpdateSerializer
from clinic.services.audit import log_activity
from clinic.services.storage import IMAGE_EXTENSIONS, store_profile_image
from clinic.services.users import format_user, update_profile


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, capability('users.profile')])
def profile(request):
    user = request.user
    if request.method == 'GET':
        return Response(format_user(user))

    s = ProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    update_profile(user, first_name=v.get('firstName'), last_name=v.get('lastName'), phone=v.get('phone'),
                   password=v.get('password'))
    changed = ', '.join(k for k in ('firstName', 'lastName', 'phone', 'password') if v.get(k))
    log_activity(user=user, action='UPDATE', entity='Profile', entity_id=user.id,
                 details=f'Profile updated: {changed or "no changes"}', request=request)
    return Response(format_user(user))


@api_view(['POST'])
@permission_classes([IsAuthenticated, capability('users.upload_picture')])
def upload_picture(request):
    upload = request.FILES.get('profileImage')
    if upload is None:
        raise ValidationError({'profileImage': 'No file uploaded'})
    if upload.content_type not in IMAGE_EXTENSIONS:
        raise ValidationError({'profileImage': 'Only image files are allowed'})
    limit_mb = settings.PROFILE_IMAGE_MAX_MB
    if upload.size > limit_mb * 1024 * 1024:
        raise ValidationError({'profileImage': f'Image must be at most {limit_mb} MB'})

    url = store_profile_image(upload)
    user = request.user
    user.profile_image = url
    user.save(update_fields=['profile_image', 'updated_at'])
    log_activity(user=user, action='UPLOAD', entity='Profile', entity_id=user.id,
                 details='Profile picture uploaded', request=request)
    return Response({'profileImage': url, 'message': 'Profile picture uploaded successfully'})
