"""
Internal service API for login sessions.

Used to create, delete, and verify user sessions. A session is a row in the
``active_sessions`` table, keyed by a random token. The client receives that
token in a cookie signed with ``JWT_SECRET`` (see
:meth:`SessionStore.generate_cookie`), which also carries the owning user id
and the expiry so that forged or stale cookies can be rejected early.
"""

import logging
import secrets
from datetime import datetime, timedelta
from functools import wraps
from typing import Optional

import dateutil.parser
import jwt
from flask import Flask, current_app, g
from pytz import UTC
from sqlalchemy.exc import SQLAlchemyError

from .. import domain
from . import util
from .exceptions import InvalidToken, UnknownSession, SessionExpired, \
    SessionCreationFailed, SessionDeletionFailed
from .models import DBSession

logger = logging.getLogger(__name__)


def _generate_token() -> str:
    return secrets.token_urlsafe(32)


def _to_domain(db_session: DBSession) -> domain.Session:
    return domain.Session(
        session_id=db_session.session_id,
        user_id=db_session.user_id,
        email=db_session.email,
        isadmin=bool(db_session.isadmin),
        expire_at=util.from_epoch(db_session.expire_at)
    )


class SessionStore(object):
    """
    Creates, loads and deletes sessions in the database.

    The database connection itself is managed by Flask-SQLAlchemy; this class
    holds the signing secret and session lifetime.
    """

    def __init__(self, secret: str, duration: int = 86400) -> None:
        self._secret = secret
        self._duration = duration

    def create(self, user_id: str, email: str,
               isadmin: bool = False) -> domain.Session:
        """
        Create a new session.

        Parameters
        ----------
        user_id : str
        email : str
        isadmin : bool

        Returns
        -------
        :class:`.domain.Session`

        Raises
        ------
        :class:`SessionCreationFailed`

        """
        expire_at = datetime.now(tz=UTC) + timedelta(seconds=self._duration)
        db_session = DBSession(
            session_id=_generate_token(),
            user_id=user_id,
            email=email,
            isadmin=isadmin,
            expire_at=util.epoch(expire_at)
        )
        try:
            with util.transaction() as session:
                session.add(db_session)
        except (IOError, SQLAlchemyError) as e:
            raise SessionCreationFailed(f'Failed to create: {e}') from e
        logger.debug('Created session for user %s', user_id)
        return _to_domain(db_session)

    def get(self, session_id: str) -> domain.Session:
        """
        Get a session by its token. Does not check or extend the expiry.

        Raises
        ------
        :class:`UnknownSession`

        """
        with util.transaction() as session:
            db_session: Optional[DBSession] = session.get(DBSession,
                                                         session_id)
            data = _to_domain(db_session) if db_session else None
        if data is None:
            raise UnknownSession('No such session')
        return data

    def delete(self, user_id: str) -> None:
        """
        Delete all of the sessions of a user.

        Raises
        ------
        :class:`UnknownSession`
            Raised if the user had no session.
        :class:`SessionDeletionFailed`

        """
        try:
            with util.transaction() as session:
                deleted = session.query(DBSession) \
                    .filter(DBSession.user_id == user_id) \
                    .delete(synchronize_session=False)
        except (IOError, SQLAlchemyError) as e:
            raise SessionDeletionFailed(f'Failed to delete: {e}') from e
        if not deleted:
            raise UnknownSession(f'No session for user {user_id}')
        logger.debug('Deleted %i session(s) for user %s', deleted, user_id)

    def purge_expired(self) -> int:
        """Delete sessions that have expired. Returns the number removed."""
        with util.transaction() as session:
            deleted: int = session.query(DBSession) \
                .filter(DBSession.expire_at <= util.now()) \
                .delete(synchronize_session=False)
        logger.info('Purged %i expired session(s)', deleted)
        return deleted

    def load(self, cookie: str) -> domain.Session:
        """
        Load a session using a session cookie.

        Raises
        ------
        :class:`InvalidToken`
            The cookie is malformed, forged, or does not match the session.
        :class:`UnknownSession`
            The session does not exist (e.g. the user logged out).
        :class:`SessionExpired`
            The session exists, but is expired.

        """
        cookie_data = self._unpack_cookie(cookie)
        try:
            expires = dateutil.parser.parse(cookie_data['expires'])
            session_id = cookie_data['session_id']
            user_id = cookie_data['user_id']
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise InvalidToken('Token payload malformed') from e

        if expires <= datetime.now(tz=UTC):
            raise SessionExpired('Session has expired')

        session = self.get(session_id)
        if session.expired:
            raise SessionExpired('Session has expired')
        if session.user_id != user_id:
            raise InvalidToken('Invalid token; likely a forgery')
        return session

    def generate_cookie(self, session: domain.Session) -> str:
        """Generate a cookie from a :class:`domain.Session`."""
        return self._pack_cookie({
            'user_id': session.user_id,
            'session_id': session.session_id,
            'expires': session.expire_at.isoformat()
        })

    def _unpack_cookie(self, cookie: str) -> dict:
        try:
            data = dict(jwt.decode(cookie, self._secret, algorithms=['HS256']))
        except jwt.exceptions.InvalidTokenError as e:
            raise InvalidToken('Session cookie is malformed') from e
        return data

    def _pack_cookie(self, cookie_data: dict) -> str:
        return jwt.encode(cookie_data, self._secret, algorithm='HS256')

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters for an application instance."""
        app.config.setdefault('JWT_SECRET',
                              'foosecret-for-signing-session-cookies')
        app.config.setdefault('SESSION_DURATION', 86400)

    @classmethod
    def current_session(cls) -> 'SessionStore':
        """Get/create a :class:`.SessionStore` for this context."""
        if 'sessions' not in g:
            g.sessions = cls(current_app.config['JWT_SECRET'],
                             int(current_app.config['SESSION_DURATION']))
        store: SessionStore = g.sessions
        return store


@wraps(SessionStore.create)
def create_session(user_id: str, email: str,
                   isadmin: bool = False) -> domain.Session:
    """Create a new session."""
    return SessionStore.current_session().create(user_id, email, isadmin)


@wraps(SessionStore.get)
def get_session(session_id: str) -> domain.Session:
    """Get a session by its token."""
    return SessionStore.current_session().get(session_id)


@wraps(SessionStore.delete)
def delete_session(user_id: str) -> None:
    """Delete the sessions of a user."""
    return SessionStore.current_session().delete(user_id)


@wraps(SessionStore.load)
def load(cookie: str) -> domain.Session:
    """Load a session by cookie value."""
    return SessionStore.current_session().load(cookie)


@wraps(SessionStore.generate_cookie)
def generate_cookie(session: domain.Session) -> str:
    """Generate a cookie from a :class:`domain.Session`."""
    return SessionStore.current_session().generate_cookie(session)


@wraps(SessionStore.purge_expired)
def purge_expired() -> int:
    """Delete expired sessions."""
    return SessionStore.current_session().purge_expired()
