"""Pydantic schemas for validation and serialization."""
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, model_validator, ConfigDict
from shared.enums import OrganizerRequestStatus
from shared.validation import Validator, ValidationError

# Number of decimal places used when coordinates are shown to the user
COORDINATE_DISPLAY_PRECISION = 6


class Coordinates(BaseModel):
    """A latitude/longitude pair."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @model_validator(mode='before')
    @classmethod
    def check_range(cls, data):
        if isinstance(data, dict) and 'lat' in data and 'lng' in data:
            try:
                lat, lng = Validator.validate_coordinates(data['lat'], data['lng'])
            except ValidationError as e:
                raise ValueError(str(e))
            data = {**data, 'lat': lat, 'lng': lng}
        return data

    def display(self) -> str:
        """Render the pair the way the picker shows it, e.g. ``40.712800, -74.006000``."""
        precision = COORDINATE_DISPLAY_PRECISION
        return f"{self.lat:.{precision}f}, {self.lng:.{precision}f}"

    def as_tuple(self):
        return (self.lat, self.lng)


class PhotoEntry(BaseModel):
    """A photo held client-side as an inline data URL."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    url: str
    name: str
    size: int = Field(..., ge=0)
    is_cover: bool = Field(False, alias='isCover')


class PlacePrediction(BaseModel):
    """One autocomplete suggestion returned by a places provider."""
    description: str
    place_id: str


class PlaceResult(BaseModel):
    """A resolved place. ``coordinates`` is None when the place has no geometry."""
    formatted_address: str = ''
    coordinates: Optional[Coordinates] = None


class OrganizerProfile(BaseModel):
    """Organizer request fields stored on a user document.

    Field names match the stored document keys so the model can be validated
    straight from a ``organizerProfile`` sub-document.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    hasRequestedOrganizer: bool = False
    organizerRequestStatus: OrganizerRequestStatus = OrganizerRequestStatus.PENDING.value
    organizerRequestReason: str = ''
    organizerRequestDate: Optional[datetime] = None
    organizerRequestRejectionReason: str = ''
    approvedBy: Optional[Any] = None
    approvedAt: Optional[datetime] = None
    isVerified: bool = False

    @classmethod
    def reset_updates(cls, prefix: str = 'organizerProfile') -> Dict[str, Any]:
        """Dotted-path updates that return every organizer request field to its default."""
        defaults = cls().model_dump()
        return {f"{prefix}.{name}": value for name, value in defaults.items()}


class EventDraft(BaseModel):
    """Values collected by the event form widgets, ready to send to the event API."""
    title: str = ''
    location: str = ''
    coordinates: Optional[Coordinates] = None
    tags: List[str] = Field(default_factory=list)
    photos: List[PhotoEntry] = Field(default_factory=list)

    @property
    def cover_photo(self) -> Optional[PhotoEntry]:
        for photo in self.photos:
            if photo.is_cover:
                return photo
        return self.photos[0] if self.photos else None

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON body expected by the event creation endpoint."""
        cover = self.cover_photo
        return {
            'title': self.title,
            'location': self.location,
            'coordinates': self.coordinates.model_dump() if self.coordinates else None,
            'tags': list(self.tags),
            'photos': [photo.model_dump(by_alias=True) for photo in self.photos],
            'coverPhoto': cover.url if cover else None,
        }
