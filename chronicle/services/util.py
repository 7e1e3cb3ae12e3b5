"""Helpers and Flask application integration."""

import logging
from typing import Generator
from datetime import datetime
from contextlib import contextmanager

from pytz import UTC
from flask import Flask
from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.session import Session

from .models import db

logger = logging.getLogger(__name__)


def now() -> int:
    """Get the current epoch/unix time."""
    return epoch(datetime.now(tz=UTC))


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    return int(round(t.timestamp()))


def from_epoch(t: int) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(t, tz=UTC)


@contextmanager
def transaction() -> Generator[Session, None, None]:
    """
    Context manager for database transaction.

    Everything done within the block is committed when it exits cleanly, and
    rolled back otherwise. A database that cannot be reached is reported as an
    :class:`IOError`.
    """
    try:
        yield db.session
        db.session.commit()
    except OperationalError as e:
        logger.warning('Database unavailable, rolling back: %s', str(e))
        db.session.rollback()
        raise IOError('Database error') from e
    except Exception as e:
        logger.warning('Commit failed, rolling back: %s', str(e))
        db.session.rollback()
        raise


def _enforce_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign keys unchecked unless asked, per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def init_app(app: Flask) -> None:
    """Set configuration defaults and attach session to the application."""
    uri = app.config.setdefault('SQLALCHEMY_DATABASE_URI',
                                'sqlite:///chronicle.db')
    app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
    # SQLite gets a static or null pool; sizing only applies to real servers.
    if not uri.startswith('sqlite'):
        app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {
            'pool_size': int(app.config.get('DB_POOL_SIZE', 10)),
            'max_overflow': int(app.config.get('DB_MAX_OVERFLOW', 0)),
            'pool_timeout': int(app.config.get('DB_POOL_TIMEOUT', 30)),
            'pool_pre_ping': True,
        })
    db.init_app(app)
    if uri.startswith('sqlite'):
        with app.app_context():
            event.listen(db.engine, 'connect', _enforce_foreign_keys)


def current_session() -> Session:
    """Get/create database session for this context."""
    return db.session


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()


def is_available() -> bool:
    """Check our connection to the database."""
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        logger.error('Encountered an error talking to database: %s', e)
        return False
    return True
