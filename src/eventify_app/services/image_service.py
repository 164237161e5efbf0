"""Image service for reading picked files and encoding them inline."""
import base64
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Optional

from shared.utils import detect_image_mime, encode_data_url, CorruptedImageError


@dataclass
class IncomingFile:
    """A file offered to the photo widget by the file dialog or a drop.

    Either ``data`` or ``path`` is set. ``mime_type`` is the declared type,
    guessed from the file name the way a browser file picker does.
    """
    name: str
    size: int
    mime_type: Optional[str] = None
    data: Optional[bytes] = None
    path: Optional[str] = None

    @classmethod
    def from_path(cls, path):
        path = os.fspath(path)
        name = os.path.basename(path)
        return cls(name=name, size=os.path.getsize(path),
                   mime_type=mimetypes.guess_type(name)[0], path=path)

    @classmethod
    def from_bytes(cls, name, data, mime_type=None):
        return cls(name=name, size=len(data),
                   mime_type=mime_type or mimetypes.guess_type(name)[0], data=data)

    def read(self):
        if self.data is not None:
            return self.data
        with open(self.path, 'rb') as f:
            return f.read()


class ImageService:
    """Service for photo file I/O and inline encoding."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve_mime_type(self, incoming):
        """Declared MIME type, or the type sniffed from content when none was declared."""
        if incoming.mime_type:
            return incoming.mime_type
        try:
            mime_type = detect_image_mime(incoming.read())
        except CorruptedImageError as e:
            self.logger.info(f"Could not identify {incoming.name} as an image: {e}")
            return None
        self.logger.debug(f"Sniffed MIME type {mime_type} for {incoming.name}")
        return mime_type

    def to_data_url(self, incoming, mime_type):
        """Read the file and return it as a ``data:`` URL."""
        return encode_data_url(incoming.read(), mime_type)

    @staticmethod
    def decode_data_url(url):
        """Return the raw bytes held in a base64 ``data:`` URL."""
        _, _, payload = url.partition(',')
        return base64.b64decode(payload)
