import click
import logging
from flask import current_app
from flask.cli import with_appcontext
from .services.user_store import get_user_store, SqlUserStore
from .services.organizer_cleanup_service import cleanup_organizer_requests

logger = logging.getLogger(__name__)


@click.command('init-db')
@click.option('--database-uri', default=None, help='Override the configured database URI')
@with_appcontext
def init_db_command(database_uri):
    """Create the users table for SQL-backed user stores."""
    uri = database_uri or current_app.config['DATABASE_URI']
    store = get_user_store(uri)
    if not isinstance(store, SqlUserStore):
        logger.info("Document store needs no schema, skipping table creation")
        click.echo('MongoDB needs no schema initialization.')
        return

    logger.info("Creating database tables")
    with store:
        store.create_tables()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')


@click.command('cleanup-organizer-requests')
@click.option('--dry-run', is_flag=True, help='Report matching users without changing them')
@click.option('--database-uri', default=None, help='Override the configured database URI')
@with_appcontext
def cleanup_organizer_requests_command(dry_run, database_uri):
    """Reset organizer request fields on accounts that are still plain users."""
    uri = database_uri or current_app.config['DATABASE_URI']
    logger.info(f"Starting organizer request cleanup (dry_run={dry_run})")
    result = cleanup_organizer_requests(get_user_store(uri), dry_run=dry_run)

    if result.error:
        click.echo(f"Error during cleanup: {result.error}")
        return

    click.echo(f"Found {result.matched} users with organizer requests to cleanup")
    if dry_run:
        click.echo('Dry run: no users were changed')
    else:
        click.echo(f"Cleaned up {result.updated} users")
    if result.failed:
        click.echo(f"Failed to clean up {result.failed} users:")
        for error in result.errors:
            click.echo(f"  {error}")
