"""
Media uploads to Cloudinary.

Requests are signed by hand: the parameters are sorted, joined as
``key=value&key=value`` and the API secret is appended before SHA-1 hashing.
See https://cloudinary.com/documentation/upload_images#generating_authentication_signatures
"""
import hashlib
import logging
import time

import requests
from flask import current_app

from ..utils.result import Ok, Err, UPSTREAM, UNCONFIGURED
from ..utils.upstream import upstream_error, upstream_timeout

logger = logging.getLogger(__name__)

CLOUDINARY_API_URL = 'https://api.cloudinary.com/v1_1'
MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_TYPES = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
)

NOT_CONFIGURED = 'خدمة رفع الملفات غير مفعّلة'
FILE_REQUIRED = 'الملف مطلوب'
FILE_TOO_LARGE = 'حجم الملف يتجاوز الحد المسموح (10 ميجابايت)'
UNSUPPORTED_TYPE = 'نوع الملف غير مدعوم. الأنواع المدعومة: JPEG, PNG, GIF, WebP, SVG'


def is_cloudinary_configured():
    config = current_app.config
    return bool(
        config.get('CLOUDINARY_CLOUD_NAME')
        and config.get('CLOUDINARY_API_KEY')
        and config.get('CLOUDINARY_API_SECRET')
    )


def generate_signature(params, api_secret):
    to_sign = '&'.join(f'{key}={params[key]}' for key in sorted(params))
    return hashlib.sha1((to_sign + api_secret).encode('utf-8')).hexdigest()


def _signed(params):
    config = current_app.config
    signed = dict(params)
    signed['api_key'] = config['CLOUDINARY_API_KEY']
    signed['signature'] = generate_signature(params, config['CLOUDINARY_API_SECRET'])
    return signed


def _endpoint(resource_type, action):
    return f"{CLOUDINARY_API_URL}/{current_app.config['CLOUDINARY_CLOUD_NAME']}/{resource_type}/{action}"


def validate_upload(file_storage):
    """Check presence, size and type of an uploaded file before it goes anywhere.

    Returns (content, None) or (None, error_message).
    """
    if file_storage is None or not file_storage.filename:
        return None, FILE_REQUIRED
    # Read one byte past the cap so oversized files are detected without loading all of them
    content = file_storage.stream.read(MAX_FILE_SIZE + 1)
    if len(content) > MAX_FILE_SIZE:
        return None, FILE_TOO_LARGE
    if file_storage.mimetype not in ALLOWED_TYPES:
        return None, UNSUPPORTED_TYPE
    return content, None


def upload_to_cloudinary(content, filename, mimetype, folder='uploads', public_id=None,
                         transformation=None, resource_type='auto'):
    if not is_cloudinary_configured():
        return Err(UNCONFIGURED, 'Cloudinary not configured')

    params = {'timestamp': str(int(time.time())), 'folder': folder}
    if public_id:
        params['public_id'] = public_id
    if transformation:
        params['transformation'] = transformation

    try:
        response = requests.post(
            _endpoint(resource_type, 'upload'),
            data=_signed(params),
            files={'file': (filename, content, mimetype)},
            timeout=upstream_timeout()
        )
    except requests.RequestException as e:
        logger.error("Cloudinary upload failed: %s", e)
        return Err(UPSTREAM, 'Upload failed')

    if not response.ok:
        err = upstream_error(response, 'Upload failed')
        logger.warning("Cloudinary rejected upload: %s", err.message)
        return err
    return Ok(response.json())


def delete_from_cloudinary(public_id, resource_type='image'):
    if not is_cloudinary_configured():
        return Err(UNCONFIGURED, 'Cloudinary not configured')

    params = {'public_id': public_id, 'timestamp': str(int(time.time()))}
    try:
        response = requests.post(_endpoint(resource_type, 'destroy'), data=_signed(params), timeout=upstream_timeout())
    except requests.RequestException as e:
        logger.error("Cloudinary delete failed: %s", e)
        return Err(UPSTREAM, 'Delete failed')

    if not response.ok:
        return upstream_error(response, 'Delete failed')
    return Ok(response.json().get('result') == 'ok')


def get_cloudinary_url(public_id, width=None, height=None, crop='fill', quality='auto', format='auto'):
    cloud_name = current_app.config.get('CLOUDINARY_CLOUD_NAME')
    if not cloud_name:
        raise RuntimeError('Cloudinary cloud name not configured')

    transformations = []
    if width:
        transformations.append(f'w_{width}')
    if height:
        transformations.append(f'h_{height}')
    if width or height:
        transformations.append(f'c_{crop}')
    transformations.append(f'q_{quality}')
    transformations.append(f'f_{format}')

    return f"https://res.cloudinary.com/{cloud_name}/image/upload/{','.join(transformations)}/{public_id}"


def handle_upload(file_storage, folder):
    if not is_cloudinary_configured():
        return {'error': NOT_CONFIGURED}, 503

    content, error = validate_upload(file_storage)
    if error:
        return {'error': error}, 400

    result = upload_to_cloudinary(content, file_storage.filename, file_storage.mimetype, folder=folder or 'uploads')
    if not result.ok:
        return result.to_response()

    uploaded = result.value
    return {
        'success': True,
        'data': {
            'public_id': uploaded.get('public_id'),
            'url': uploaded.get('secure_url'),
            'width': uploaded.get('width'),
            'height': uploaded.get('height'),
            'format': uploaded.get('format'),
            'bytes': uploaded.get('bytes'),
        }
    }, 200


def reject_oversized_upload():
    """Answer for a request body that exceeded MAX_CONTENT_LENGTH before it was parsed."""
    if not is_cloudinary_configured():
        return {'error': NOT_CONFIGURED}, 503
    return {'error': FILE_TOO_LARGE}, 400


def handle_delete(public_id):
    if not is_cloudinary_configured():
        return {'error': NOT_CONFIGURED}, 503

    result = delete_from_cloudinary(public_id)
    if not result.ok:
        return result.to_response()
    return {'success': True, 'deleted': result.value}, 200
