from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, JSON, Enum, text
from sqlalchemy.orm import declarative_base
from shared.enums import UserRole

Base = declarative_base()


def now():
    """Return current datetime in UTC (timezone-aware).

    Note: When stored in SQLite, timezone info is stripped (SQLite limitation).
    """
    return datetime.now(timezone.utc)


class UserRecord(Base):
    """Relational copy of a user document.

    The nested ``organizerProfile`` sub-document is kept as a JSON column so
    the same dotted-path filters and updates apply to both store backends.
    """
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, nullable=False)
    email = Column(String(120), unique=True, nullable=False, server_default="")
    username = Column(String(80), nullable=False, server_default="")
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
                  default=UserRole.USER, nullable=False, server_default=text("'user'"))
    organizer_profile = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)

    def to_document(self):
        """Return the record in the document shape used by the batch jobs."""
        role = self.role.value if isinstance(self.role, UserRole) else self.role
        return {
            '_id': self.id,
            'email': self.email,
            'username': self.username,
            'role': role,
            'organizerProfile': dict(self.organizer_profile or {}),
        }
