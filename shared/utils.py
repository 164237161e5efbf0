"""Shared utility functions for the Eventify application.

This module contains helpers used by both the backend batch jobs and the
desktop widgets: image sniffing and inline encoding for photo ingestion,
location name shortening, and dotted-path access to nested documents.
"""

import base64
import io
import logging
import time
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Number of comma-separated address segments kept for display
LOCATION_NAME_SEGMENTS = 3


class CorruptedImageError(Exception):
    """Raised when image data is corrupted and cannot be processed."""
    pass


def truncate_location_name(display_name, segments=LOCATION_NAME_SEGMENTS):
    """Keep the first ``segments`` comma-separated parts of an address.

    Parts are re-joined with a bare comma, so the spacing of the original
    address is preserved:

        >>> truncate_location_name("123 Main St, Springfield, USA, extra, extra2")
        '123 Main St, Springfield, USA'
    """
    if not display_name:
        return display_name
    return ','.join(display_name.split(',')[:segments])


def detect_image_mime(image_data):
    """Identify the MIME type of raw image bytes using Pillow.

    Returns:
        str or None: MIME type such as ``image/png``, or None when Pillow
        recognises the format but has no MIME mapping for it.

    Raises:
        CorruptedImageError: If the data cannot be identified as an image
    """
    if not image_data:
        raise CorruptedImageError("Empty image data")
    try:
        with Image.open(io.BytesIO(image_data)) as img:
            image_format = img.format
    except UnidentifiedImageError as e:
        logger.debug(f"Unidentified image data ({len(image_data)} bytes): {e}")
        raise CorruptedImageError(f"Corrupted or unsupported image format: {e}") from e
    except Image.DecompressionBombError as e:
        logger.warning(f"Rejected oversized image data ({len(image_data)} bytes): {e}")
        raise CorruptedImageError(f"Image is too large to process: {e}") from e
    except (OSError, ValueError) as e:
        logger.debug(f"Error reading image data ({len(image_data)} bytes): {e}")
        raise CorruptedImageError(f"Error processing image: {e}") from e

    return Image.MIME.get(image_format)


def encode_data_url(data, mime_type):
    """Encode bytes as an inline ``data:`` URL."""
    encoded = base64.b64encode(data).decode('ascii')
    return f"data:{mime_type};base64,{encoded}"


def generate_photo_id(existing_ids=(), offset=0):
    """Generate a time-derived photo id.

    The id is the current time in milliseconds plus ``offset`` (the file's
    position in its batch), bumped above every id already in use so that two
    batches ingested within the same millisecond never collide.
    """
    candidate = int(time.time() * 1000) + offset
    if existing_ids:
        candidate = max(candidate, max(existing_ids) + 1)
    return candidate


def get_path(document, path, default=None):
    """Read a dotted path (``organizerProfile.isVerified``) from nested dicts."""
    current = document
    for key in path.split('.'):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def set_path(document, path, value):
    """Write a dotted path into nested dicts, creating intermediate dicts."""
    keys = path.split('.')
    current = document
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value
    return document


_MISSING = object()


def document_matches(document, criteria):
    """Evaluate a Mongo-style equality filter against a plain document."""
    for path, expected in criteria.items():
        actual = get_path(document, path, _MISSING)
        if actual is _MISSING or actual != expected:
            return False
    return True
