"""Cleanup of stale organizer requests on plain user accounts."""

import logging
from shared.enums import UserRole
from shared.schemas import OrganizerProfile
from .batch_job import BatchJob

logger = logging.getLogger(__name__)


class OrganizerRequestCleanupJob(BatchJob):
    """Reset the organizer profile of every ``user`` account that still carries a request.

    After a run no account with role ``user`` has ``hasRequestedOrganizer``
    set, so a second run matches nothing and writes nothing.
    """

    name = 'organizer request cleanup'

    def query(self):
        return {
            'role': UserRole.USER.value,
            'organizerProfile.hasRequestedOrganizer': True,
        }

    def transform(self, document):
        return OrganizerProfile.reset_updates()

    def describe(self, document):
        email = document.get('email', '')
        username = document.get('username', '')
        return f"user {email} ({username})"


def cleanup_organizer_requests(store, dry_run=False):
    """Run the organizer request cleanup against ``store`` and return its result."""
    return OrganizerRequestCleanupJob(store, dry_run=dry_run).run()
