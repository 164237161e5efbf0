import enum


class UserRole(str, enum.Enum):
    """User roles for access control.

    Only accounts with the plain ``user`` role are touched by the organizer
    request cleanup job.
    """
    ADMIN = "admin"
    ORGANIZER = "organizer"
    USER = "user"


class OrganizerRequestStatus(str, enum.Enum):
    """Lifecycle of a user's request to become an organizer."""
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class MarkerKind(str, enum.Enum):
    """Kinds of markers drawn on the location picker map."""
    SELECTED = "selected"
    USER = "user"
