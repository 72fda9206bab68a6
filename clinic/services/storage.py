"""
Profile image storage.

When Cloudinary credentials are configured images are sent to its signed
upload API; otherwise they are written to Django's default storage
(``MEDIA_ROOT``) and served from ``MEDIA_URL``.
"""
from __future__ import annotations

import hashlib
import logging
import time
import uuid

import requests
from django.conf import settings
from django.core.files.storage import default_storage

from clinic.exceptions import BusinessRuleError, UploadFailed

logger = logging.getLogger(__name__)

PROFILE_TRANSFORMATION = 'w_300,h_300,c_fill,g_face'

# accepted image types; stored files take their extension from here
IMAGE_EXTENSIONS = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/gif': '.gif',
    'image/webp': '.webp',
}


def cloudinary_enabled() -> bool:
    return bool(settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET)


def sign_params(params: dict, api_secret: str) -> str:
    """Cloudinary request signature: sha1 of sorted ``k=v`` pairs + secret."""
    to_sign = '&'.join(f'{k}={params[k]}' for k in sorted(params) if params[k] not in (None, ''))
    return hashlib.sha1((to_sign + api_secret).encode('utf-8')).hexdigest()


def _upload_cloudinary(upload, folder: str) -> str:
    params = {
        'folder': folder,
        'timestamp': int(time.time()),
        'transformation': PROFILE_TRANSFORMATION,
    }
    data = {**params, 'api_key': settings.CLOUDINARY_API_KEY,
            'signature': sign_params(params, settings.CLOUDINARY_API_SECRET)}
    url = f'https://api.cloudinary.com/v1_1/{settings.CLOUDINARY_CLOUD_NAME}/image/upload'
    upload.seek(0)
    files = {'file': (upload.name, upload.read(), upload.content_type)}
    try:
        r = requests.post(url, data=data, files=files, timeout=settings.CLOUDINARY_TIMEOUT)
        r.raise_for_status()
        body = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error('cloudinary upload failed: %s', e)
        raise UploadFailed()
    secure_url = body.get('secure_url')
    if not secure_url:
        logger.error('cloudinary upload returned no url: %s', body.get('error'))
        raise UploadFailed()
    return secure_url


def _upload_local(upload, folder: str) -> str:
    ext = IMAGE_EXTENSIONS.get(upload.content_type)
    if ext is None:
        raise BusinessRuleError('Only JPEG, PNG, GIF or WebP images are allowed')
    name = default_storage.save(f'{folder}/{uuid.uuid4().hex}{ext}', upload)
    return default_storage.url(name)


def store_profile_image(upload) -> str:
    """Persist an uploaded image and return its public URL."""
    folder = settings.PROFILE_IMAGE_FOLDER
    if cloudinary_enabled():
        return _upload_cloudinary(upload, folder)
    return _upload_local(upload, folder)
