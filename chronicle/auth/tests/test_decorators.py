"""Tests for :mod:`chronicle.auth.decorators`."""

from unittest import TestCase, mock

from flask import Flask

from .. import decorators
from ..authorization import is_admin
from ... import domain
from ...exceptions import Unauthorized, AdminRequired


class TestScoped(TestCase):
    """Tests for :func:`.decorators.scoped`."""

    def setUp(self):
        """Push a request context so ``mock.patch`` can inspect ``request``."""
        self.ctx = Flask('test').test_request_context()
        self.ctx.push()
        self.addCleanup(self.ctx.pop)

    @mock.patch(f'{decorators.__name__}.request')
    def test_no_session(self, mock_request):
        """No identity is attached to the request."""
        mock_request.auth = None

        @decorators.scoped()
        def protected():
            """A protected function."""

        with self.assertRaises(Unauthorized):
            protected()

    @mock.patch(f'{decorators.__name__}.request')
    def test_authorizer_denies(self, mock_request):
        """The authorizer returns ``False``."""
        mock_request.auth = domain.LoggedUser(user_id='1',
                                              email='foo@user.com')

        @decorators.scoped(authorizer=is_admin)
        def protected():
            """A protected function."""

        with self.assertRaises(AdminRequired):
            protected()

    @mock.patch(f'{decorators.__name__}.request')
    def test_authorizer_gets_route_params(self, mock_request):
        """The authorizer is called with the identity and URL params."""
        logged_user = domain.LoggedUser(user_id='1', email='foo@user.com')
        mock_request.auth = logged_user
        authorizer = mock.MagicMock(return_value=True)

        @decorators.scoped(authorizer=authorizer)
        def protected(user_id):
            """A protected function."""
            return user_id

        self.assertEqual(protected(user_id='1'), '1')
        authorizer.assert_called_once_with(logged_user, user_id='1')

    @mock.patch(f'{decorators.__name__}.request')
    def test_valid(self, mock_request):
        mock_request.auth = domain.LoggedUser(user_id='1',
                                              email='foo@user.com',
                                              isadmin=True)

        @decorators.scoped(authorizer=is_admin)
        def protected():
            """A protected function."""
            return 'ok'

        self.assertEqual(protected(), 'ok')
