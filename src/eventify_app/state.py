"""Per-widget UI state for the Eventify event form.

Each widget owns only local UI concerns (input text, drag state, loading
flags). Tags, photos and the chosen location belong to the parent form and
reach a widget as props; changes leave a widget only through callbacks.
"""
from dataclasses import dataclass, field
from typing import Optional, List

from shared.schemas import Coordinates, PhotoEntry, PlacePrediction


@dataclass
class TagInputState:
    """State of the tag input widget."""
    tags: List[str] = field(default_factory=list)
    input_value: str = ''
    suggestions: List[str] = field(default_factory=list)
    show_suggestions: bool = False

    def clear_input(self):
        self.input_value = ''
        self.show_suggestions = False


@dataclass
class PhotoUploadState:
    """State of the photo upload widget."""
    photos: List[PhotoEntry] = field(default_factory=list)
    drag_active: bool = False
    uploading: bool = False


@dataclass
class LocationPickerState:
    """State of the location picker widget."""
    search_term: str = ''
    selected_coords: Optional[Coordinates] = None
    user_location: Optional[Coordinates] = None
    is_map_open: bool = False
    is_detecting_location: bool = False
    is_loading: bool = False
    suggestions: List[PlacePrediction] = field(default_factory=list)


@dataclass
class AdminGuideState:
    """Open/closed state of the admin access guide overlay."""
    is_open: bool = False
