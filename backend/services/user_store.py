"""User document stores used by maintenance batch jobs.

Jobs talk to users through the small ``UserStore`` interface so the same job
runs against MongoDB in production and against a SQL database (SQLite in
tests). Filters and updates are expressed Mongo-style with dotted paths,
e.g. ``{'organizerProfile.hasRequestedOrganizer': True}``.
"""

import logging
from contextlib import contextmanager
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from shared.models import Base, UserRecord
from shared.utils import document_matches, set_path

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = 'eventify'
MONGO_SCHEMES = ('mongodb://', 'mongodb+srv://')


class UserStoreError(Exception):
    """Raised when a user store cannot be reached or a query/update fails."""
    pass


@contextmanager
def session_scope(session_factory):
    """Provide a transactional scope around a series of operations."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    finally:
        session.close()


class UserStore:
    """Interface for user document stores."""

    def connect(self):
        raise NotImplementedError

    def find_users(self, criteria):
        """Return every user document matching a dotted-path equality filter."""
        raise NotImplementedError

    def update_user(self, user_id, updates):
        """Apply dotted-path ``updates`` to one user; return the number of records changed."""
        raise NotImplementedError

    def insert_user(self, document):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class MongoUserStore(UserStore):
    """User store backed by the ``users`` collection of a MongoDB database."""

    def __init__(self, uri, database_name=None, collection_name='users', server_selection_timeout_ms=10000):
        self.uri = uri
        self.database_name = database_name
        self.collection_name = collection_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client = None
        self.collection = None

    def connect(self):
        try:
            self.client = MongoClient(self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms)
            # MongoClient connects lazily; ping so connection problems surface here
            self.client.admin.command('ping')
            database = self.client.get_default_database(default=self.database_name or DEFAULT_DATABASE_NAME)
            self.collection = database[self.collection_name]
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise UserStoreError(f"Could not connect to MongoDB: {e}") from e
        logger.info(f"Connected to MongoDB database '{database.name}'")
        return self

    def find_users(self, criteria):
        try:
            return list(self.collection.find(criteria))
        except PyMongoError as e:
            raise UserStoreError(f"User query failed: {e}") from e

    def update_user(self, user_id, updates):
        try:
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': updates, '$currentDate': {'updatedAt': True}}
            )
        except PyMongoError as e:
            raise UserStoreError(f"Failed to update user {user_id}: {e}") from e
        return result.modified_count

    def insert_user(self, document):
        try:
            return self.collection.insert_one(document).inserted_id
        except PyMongoError as e:
            raise UserStoreError(f"Failed to insert user: {e}") from e

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.collection = None
            logger.info("Disconnected from MongoDB")


class SqlUserStore(UserStore):
    """User store backed by the ``users`` table of a SQLAlchemy database."""

    def __init__(self, uri):
        self.uri = uri
        self.engine = None
        self.SessionLocal = None

    def connect(self):
        try:
            self.engine = create_engine(self.uri)
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {e}")
            raise UserStoreError(f"Could not connect to database: {e}") from e
        logger.info(f"Connected to SQL database {self.engine.url.render_as_string(hide_password=True)}")
        return self

    def create_tables(self):
        Base.metadata.create_all(self.engine)

    def find_users(self, criteria):
        try:
            with session_scope(self.SessionLocal) as session:
                query = session.query(UserRecord)
                if 'role' in criteria:
                    query = query.filter(UserRecord.role == criteria['role'])
                documents = [record.to_document() for record in query.all()]
        except SQLAlchemyError as e:
            raise UserStoreError(f"User query failed: {e}") from e
        # Nested JSON paths are matched against the document view
        return [doc for doc in documents if document_matches(doc, criteria)]

    def update_user(self, user_id, updates):
        try:
            with session_scope(self.SessionLocal) as session:
                record = session.get(UserRecord, user_id)
                if record is None:
                    return 0
                document = record.to_document()
                for path, value in updates.items():
                    set_path(document, path, value)
                record.email = document['email']
                record.username = document['username']
                record.role = document['role']
                # Assign a new dict so the JSON column change is detected
                record.organizer_profile = dict(document['organizerProfile'])
                return 1
        except SQLAlchemyError as e:
            raise UserStoreError(f"Failed to update user {user_id}: {e}") from e

    def insert_user(self, document):
        try:
            with session_scope(self.SessionLocal) as session:
                record = UserRecord(
                    email=document['email'],
                    username=document.get('username', ''),
                    role=document.get('role', 'user'),
                    organizer_profile=dict(document.get('organizerProfile') or {}),
                )
                session.add(record)
                session.flush()
                return record.id
        except SQLAlchemyError as e:
            raise UserStoreError(f"Failed to insert user: {e}") from e

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self.SessionLocal = None
            logger.info("Disconnected from SQL database")


def get_user_store(uri):
    """Create the user store matching the URI scheme (MongoDB or SQLAlchemy)."""
    if uri.startswith(MONGO_SCHEMES):
        return MongoUserStore(uri)
    return SqlUserStore(uri)
