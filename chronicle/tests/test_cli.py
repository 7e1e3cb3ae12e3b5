"""Tests for the command line interface."""

import os
from unittest import TestCase, mock

from ..factory import create_web_app
from ..services import sessions, users, util
from ..services.models import DBSession


class TestCommands(TestCase):
    def setUp(self):
        self.environ = mock.patch.dict(os.environ, {
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'CREATE_DB': '1',
            'LOGLEVEL': '40',
        })
        self.environ.start()
        self.app = create_web_app()
        self.runner = self.app.test_cli_runner()

    def tearDown(self):
        with self.app.app_context():
            util.drop_all()
        self.environ.stop()

    def test_create_user(self):
        result = self.runner.invoke(args=[
            'create-user', '--username', 'root', '--email', 'root@user.com',
            '--password', 'rootpass', '--admin'
        ])
        self.assertEqual(result.exit_code, 0, result.output)
        with self.app.app_context():
            user = users.authenticate('root@user.com', 'rootpass')
        self.assertTrue(user.isadmin)

    def test_purge_sessions(self):
        with self.app.app_context():
            user = users.create_user('the@user.com', 'theuser', 'foopass')
            sessions.create_session(user.user_id, user.email)
            expired = sessions.create_session(user.user_id, user.email)
            with util.transaction() as session:
                session.query(DBSession) \
                    .filter(DBSession.session_id == expired.session_id) \
                    .update({DBSession.expire_at: util.now() - 1})

        result = self.runner.invoke(args=['purge-sessions'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('Purged 1', result.output)
