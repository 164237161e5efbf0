"""Configuration Manager for the Eventify desktop widgets."""
import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigManager(BaseSettings):
    """Manages application configuration settings using Pydantic BaseSettings."""

    model_config = SettingsConfigDict(env_prefix='EVENTIFY_', case_sensitive=False, extra='allow')

    # HTTP settings
    api_timeout: float = 10.0
    user_agent: str = 'eventify-desktop/1.0'

    # Reverse geocoding (OpenStreetMap Nominatim)
    geocode_base_url: str = 'https://nominatim.openstreetmap.org'

    # Places autocomplete (Google Places web service)
    google_maps_api_key: str = ''
    places_base_url: str = 'https://maps.googleapis.com/maps/api/place'
    places_countries: List[str] = ['us', 'in', 'gb', 'ca', 'au']

    # Widget limits
    max_tags: int = 10
    max_photos: int = 5
    max_photo_size: int = 5 * 1024 * 1024  # bytes

    # Admin access guide
    admin_email: str = 'admin@huddle.com'

    def __init__(self, **kwargs):
        """Initialize config and pick up the unprefixed Google Maps key if set."""
        super().__init__(**kwargs)
        if not self.google_maps_api_key:
            self.google_maps_api_key = os.getenv('GOOGLE_MAPS_API_KEY', '')

    def get(self, key, default=None):
        """Get a configuration value."""
        return getattr(self, key, default)

    def set(self, key, value):
        """Set a configuration value."""
        setattr(self, key, value)

    def get_all(self):
        """Get all configuration values as dictionary."""
        return self.model_dump()
