"""Tests for :mod:`chronicle.services.sessions`."""

from datetime import datetime, timedelta
from unittest import TestCase, mock

import jwt
from pytz import UTC

from .. import sessions, users, util
from ..exceptions import InvalidToken, UnknownSession, SessionExpired, \
    SessionCreationFailed
from ..models import DBSession
from .util import temporary_db


class TestSessionLifecycle(TestCase):
    """Create, load and delete sessions."""

    def setUp(self):
        self.ctx = temporary_db()
        self.db = self.ctx.__enter__()
        self.user = users.create_user('the@user.com', 'theuser', 'foopass')

    def tearDown(self):
        self.ctx.__exit__(None, None, None)

    def test_create_and_load(self):
        """A cookie for a new session loads that session."""
        session = sessions.create_session(self.user.user_id, self.user.email,
                                          self.user.isadmin)
        self.assertFalse(session.expired)
        self.assertGreater(session.expires, 3500)

        cookie = sessions.generate_cookie(session)
        loaded = sessions.load(cookie)
        self.assertEqual(loaded.session_id, session.session_id)
        self.assertEqual(loaded.as_logged_user().user_id, self.user.user_id)
        self.assertEqual(loaded.email, 'the@user.com')

    def test_sessions_are_independent(self):
        """Each login gets its own token."""
        first = sessions.create_session(self.user.user_id, self.user.email)
        second = sessions.create_session(self.user.user_id, self.user.email)
        self.assertNotEqual(first.session_id, second.session_id)
        self.assertEqual(self.db.query(DBSession).count(), 2)

    def test_get_unknown(self):
        """Looking up a token that was never issued fails."""
        with self.assertRaises(UnknownSession):
            sessions.get_session('nosuchsession')

    def test_load_after_delete(self):
        """A cookie is useless once its user has logged out."""
        session = sessions.create_session(self.user.user_id, self.user.email)
        cookie = sessions.generate_cookie(session)
        sessions.delete_session(self.user.user_id)
        with self.assertRaises(UnknownSession):
            sessions.load(cookie)

    def test_delete_without_sessions(self):
        """Deleting when there is nothing to delete is reported."""
        with self.assertRaises(UnknownSession):
            sessions.delete_session(self.user.user_id)

    def test_load_expired_row(self):
        """An expired session is rejected even though its row exists."""
        session = sessions.create_session(self.user.user_id, self.user.email)
        cookie = sessions.generate_cookie(session)
        with util.transaction() as db_session:
            db_session.query(DBSession) \
                .filter(DBSession.session_id == session.session_id) \
                .update({DBSession.expire_at: util.now() - 10})
        with self.assertRaises(SessionExpired):
            sessions.load(cookie)

    def test_load_expired_cookie(self):
        """A cookie that claims to be expired is rejected."""
        session = sessions.create_session(self.user.user_id, self.user.email)
        stale = session._replace(
            expire_at=datetime.now(tz=UTC) - timedelta(seconds=10)
        )
        with self.assertRaises(SessionExpired):
            sessions.load(sessions.generate_cookie(stale))

    def test_forged_cookie(self):
        """A cookie signed with another secret is rejected."""
        session = sessions.create_session(self.user.user_id, self.user.email)
        forged = jwt.encode({'session_id': session.session_id,
                             'user_id': session.user_id,
                             'expires': session.expire_at.isoformat()},
                            'notthesecret', algorithm='HS256')
        with self.assertRaises(InvalidToken):
            sessions.load(forged)

    def test_cookie_for_another_user(self):
        """A valid token paired with another user id is rejected."""
        session = sessions.create_session(self.user.user_id, self.user.email)
        tampered = session._replace(user_id='someoneelse')
        with self.assertRaises(InvalidToken):
            sessions.load(sessions.generate_cookie(tampered))

    def test_garbage_cookie(self):
        """A cookie that is not a token at all is rejected."""
        with self.assertRaises(InvalidToken):
            sessions.load('foo')


class TestPurgeExpired(TestCase):
    """:func:`.sessions.purge_expired` removes only expired sessions."""

    def test_purge(self):
        with temporary_db() as db_session:
            user = users.create_user('the@user.com', 'theuser', 'foopass')
            live = sessions.create_session(user.user_id, user.email)
            dead = sessions.create_session(user.user_id, user.email)
            with util.transaction() as session:
                session.query(DBSession) \
                    .filter(DBSession.session_id == dead.session_id) \
                    .update({DBSession.expire_at: util.now() - 1})

            self.assertEqual(sessions.purge_expired(), 1)
            remaining = [row.session_id for row
                         in db_session.query(DBSession).all()]
            self.assertEqual(remaining, [live.session_id])


class TestCreateFailure(TestCase):
    """Storage errors on create are reported as creation failures."""

    @mock.patch(f'{sessions.__name__}.util.transaction')
    def test_database_unavailable(self, mock_transaction):
        mock_transaction.return_value.__enter__.side_effect = \
            IOError('Database error')
        with temporary_db():
            with self.assertRaises(SessionCreationFailed):
                sessions.create_session('1', 'the@user.com')
