"""
Image Upload Service

Stores article images under the configured upload folder and removes them
again when an article drops or replaces its image.
"""

import logging
import os
import time
import uuid

from flask import current_app, has_request_context, request, url_for
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

IMAGE_FIELD = 'image'
# Served from UPLOAD_FOLDER by the news.uploaded_file route
UPLOAD_URL_PREFIX = '/uploads/'


class UploadError(ValueError):
    """The submitted file cannot be stored as an article image."""


def get_uploaded_image(files):
    """Return the submitted image from ``request.files``, or None if no file was chosen."""
    file = files.get(IMAGE_FIELD)
    if file is None or not file.filename:
        return None
    return file


def _file_size(file):
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _extension(filename):
    _, ext = os.path.splitext(secure_filename(filename))
    return ext.lower()


def generate_filename(original_name):
    """Unique name keeping the original extension, e.g. ``image-1700000000000-3f2a9c1b.jpg``."""
    millis = int(time.time() * 1000)
    return f'image-{millis}-{uuid.uuid4().hex[:8]}{_extension(original_name)}'


def save_image(file):
    """Validate and store an uploaded image.

    Args:
        file: werkzeug ``FileStorage`` from the multipart form

    Returns:
        Public URL of the stored file, to be kept on the News record

    Raises:
        UploadError: not an image, or larger than ``MAX_IMAGE_SIZE``
    """
    mimetype = file.mimetype or ''
    if not mimetype.startswith('image/'):
        raise UploadError('The uploaded file must be an image.')

    max_size = current_app.config['MAX_IMAGE_SIZE']
    if _file_size(file) > max_size:
        raise UploadError(f'Images must be {max_size // (1024 * 1024)} MB or smaller.')

    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)

    filename = generate_filename(file.filename)
    file.save(os.path.join(folder, filename))
    logger.info('Stored uploaded image %s', filename)
    return url_for('news.uploaded_file', filename=filename)


def image_path(image_url):
    """Filesystem path for an upload URL, or None if the URL is not one of ours."""
    if not image_url:
        return None
    if has_request_context() and request.script_root:
        image_url = image_url.removeprefix(request.script_root)
    prefix = UPLOAD_URL_PREFIX
    if not image_url.startswith(prefix):
        return None
    filename = os.path.basename(image_url[len(prefix):])
    if not filename:
        return None
    return os.path.join(current_app.config['UPLOAD_FOLDER'], filename)


def remove_image(image_url):
    """Delete the file behind ``image_url``. Missing files are ignored."""
    path = image_path(image_url)
    if path is None:
        return False
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    logger.info('Removed image %s', os.path.basename(path))
    return True
