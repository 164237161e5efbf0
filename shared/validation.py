"""Input validation utilities."""

# Maximum accepted size for a single photo (5MB)
MAX_PHOTO_SIZE_BYTES = 5 * 1024 * 1024


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


class Validator:
    """Input validation utilities."""

    @staticmethod
    def validate_required(value, field_name):
        """Validate that a required field is not empty."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field_name} is required")
        return value

    @staticmethod
    def validate_coordinates(lat, lng):
        """Validate GPS coordinates.

        Accepts floats, ints or numeric strings and returns a ``(lat, lng)``
        tuple of floats.
        """
        try:
            lat_val = float(lat.strip()) if isinstance(lat, str) else float(lat)
        except ValueError:
            raise ValidationError("Latitude must be a valid number")
        except TypeError:
            raise ValidationError("Latitude must be a number or numeric string")

        try:
            lng_val = float(lng.strip()) if isinstance(lng, str) else float(lng)
        except ValueError:
            raise ValidationError("Longitude must be a valid number")
        except TypeError:
            raise ValidationError("Longitude must be a number or numeric string")

        if not (-90 <= lat_val <= 90):
            raise ValidationError("Latitude must be between -90 and 90")

        if not (-180 <= lng_val <= 180):
            raise ValidationError("Longitude must be between -180 and 180")

        return lat_val, lng_val

    @staticmethod
    def validate_image_file(name, mime_type, size, max_size=MAX_PHOTO_SIZE_BYTES):
        """Validate that an incoming file is an image within the size limit.

        The messages are shown to the user verbatim, so they name the file.
        """
        if not mime_type or not mime_type.startswith('image/'):
            raise ValidationError(f"{name} is not an image file")

        if size > max_size:
            limit_mb = max_size // (1024 * 1024)
            raise ValidationError(f"{name} is too large. Maximum size is {limit_mb}MB")

        return name
