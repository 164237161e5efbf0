"""Tests for shared validation utilities."""
import pytest
from shared.validation import Validator, ValidationError, MAX_PHOTO_SIZE_BYTES


class TestValidator:
    """Test validation utilities."""

    def test_validate_required_success(self):
        """Test successful required field validation."""
        assert Validator.validate_required("test", "test_field") == "test"
        assert Validator.validate_required(123, "test_field") == 123

    def test_validate_required_failure(self):
        """Test required field validation failures."""
        with pytest.raises(ValidationError, match="test_field is required"):
            Validator.validate_required("", "test_field")

        with pytest.raises(ValidationError, match="test_field is required"):
            Validator.validate_required(None, "test_field")

        with pytest.raises(ValidationError, match="test_field is required"):
            Validator.validate_required("   ", "test_field")

    def test_validate_coordinates_success(self):
        """Test coordinate validation accepts numbers and numeric strings."""
        assert Validator.validate_coordinates(40.7128, -74.0060) == (40.7128, -74.0060)
        assert Validator.validate_coordinates(" 51.5 ", "-0.12") == (51.5, -0.12)
        assert Validator.validate_coordinates(90, 180) == (90.0, 180.0)

    def test_validate_coordinates_failure(self):
        """Test coordinate validation failures."""
        with pytest.raises(ValidationError, match="Latitude must be between -90 and 90"):
            Validator.validate_coordinates(91, 0)

        with pytest.raises(ValidationError, match="Longitude must be between -180 and 180"):
            Validator.validate_coordinates(0, -181)

        with pytest.raises(ValidationError, match="Latitude must be a valid number"):
            Validator.validate_coordinates("north", 0)

        with pytest.raises(ValidationError, match="Longitude must be a number or numeric string"):
            Validator.validate_coordinates(0, None)

    def test_validate_image_file_success(self):
        assert Validator.validate_image_file("a.png", "image/png", 1024) == "a.png"
        assert Validator.validate_image_file("max.jpg", "image/jpeg", MAX_PHOTO_SIZE_BYTES) == "max.jpg"

    def test_validate_image_file_not_an_image(self):
        with pytest.raises(ValidationError, match="notes.txt is not an image file"):
            Validator.validate_image_file("notes.txt", "text/plain", 10)

        with pytest.raises(ValidationError, match="mystery is not an image file"):
            Validator.validate_image_file("mystery", None, 10)

    def test_validate_image_file_too_large(self):
        with pytest.raises(ValidationError, match=r"big.png is too large. Maximum size is 5MB"):
            Validator.validate_image_file("big.png", "image/png", MAX_PHOTO_SIZE_BYTES + 1)
