"""Tests for shared utility functions."""
import base64
import pytest
from unittest.mock import patch
from PIL import Image
from shared.utils import (
    truncate_location_name, detect_image_mime, encode_data_url, generate_photo_id,
    get_path, set_path, document_matches, CorruptedImageError
)


def test_truncate_location_name():
    """Only the first three comma-separated segments are kept."""
    assert truncate_location_name("123 Main St, Springfield, USA, extra, extra2") == "123 Main St, Springfield, USA"
    assert truncate_location_name("Paris, France") == "Paris, France"
    assert truncate_location_name("a,b,c,d") == "a,b,c"
    assert truncate_location_name("") == ""
    assert truncate_location_name(None) is None


def test_detect_image_mime(make_image_bytes):
    assert detect_image_mime(make_image_bytes('PNG')) == 'image/png'
    assert detect_image_mime(make_image_bytes('JPEG')) == 'image/jpeg'
    assert detect_image_mime(make_image_bytes('GIF')) == 'image/gif'


def test_detect_image_mime_corrupted():
    with pytest.raises(CorruptedImageError):
        detect_image_mime(b'definitely not an image')
    with pytest.raises(CorruptedImageError):
        detect_image_mime(b'')


def test_detect_image_mime_decompression_bomb(png_bytes):
    with patch('shared.utils.Image.open', side_effect=Image.DecompressionBombError('too many pixels')):
        with pytest.raises(CorruptedImageError, match='too large to process'):
            detect_image_mime(png_bytes)


def test_encode_data_url():
    url = encode_data_url(b'\x89PNG', 'image/png')
    assert url.startswith('data:image/png;base64,')
    assert base64.b64decode(url.split(',', 1)[1]) == b'\x89PNG'


def test_generate_photo_id_is_time_derived():
    with patch('shared.utils.time.time', return_value=1700000000.0):
        assert generate_photo_id() == 1700000000000
        assert generate_photo_id(offset=2) == 1700000000002


def test_generate_photo_id_bumps_above_existing():
    """Ids generated in the same millisecond as existing ones never collide."""
    with patch('shared.utils.time.time', return_value=1700000000.0):
        existing = [1700000000000, 1700000000001]
        assert generate_photo_id(existing) == 1700000000002
        assert generate_photo_id([5]) == 1700000000000


def test_dotted_paths():
    document = {'organizerProfile': {'isVerified': True}}
    assert get_path(document, 'organizerProfile.isVerified') is True
    assert get_path(document, 'organizerProfile.missing', 'x') == 'x'
    assert get_path(document, 'role') is None

    set_path(document, 'organizerProfile.approvedBy', None)
    set_path(document, 'stats.count', 1)
    assert document == {'organizerProfile': {'isVerified': True, 'approvedBy': None}, 'stats': {'count': 1}}


def test_document_matches():
    document = {'role': 'user', 'organizerProfile': {'hasRequestedOrganizer': True}}
    assert document_matches(document, {'role': 'user', 'organizerProfile.hasRequestedOrganizer': True})
    assert not document_matches(document, {'role': 'admin'})
    assert not document_matches(document, {'organizerProfile.hasRequestedOrganizer': False})
    assert not document_matches({'role': 'user'}, {'organizerProfile.hasRequestedOrganizer': True})
