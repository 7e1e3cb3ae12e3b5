"""Tests for :mod:`chronicle.controllers.registration`."""

from datetime import datetime, timedelta
from http import HTTPStatus as status
from unittest import TestCase, mock

from pytz import UTC

from .. import registration
from ... import domain
from ...exceptions import Unauthorized, BadRequest
from ...services.exceptions import NoSuchInvitation, NoSuchResetRequest, \
    ResetRequestExpired

INVITATION_ID = '2c4f8a3e-7d1b-4e6a-9f0c-5b8d2e1a3c7f'


class TestInvite(TestCase):
    """Tests for :func:`.registration.invite`."""

    @mock.patch(f'{registration.__name__}.mail')
    @mock.patch(f'{registration.__name__}.invitations')
    @mock.patch(f'{registration.__name__}.users')
    def test_existing_email(self, mock_users, mock_invitations, mock_mail):
        """No invitation is created for a registered email address."""
        mock_users.email_exists.return_value = True
        mock_users.username_exists.return_value = False
        with self.assertRaises(Unauthorized):
            registration.invite({'email': 'foo@user.com',
                                 'username': 'foo'})
        self.assertEqual(mock_invitations.create_invitation.call_count, 0)
        self.assertEqual(mock_mail.send_invitation.call_count, 0)

    @mock.patch(f'{registration.__name__}.mail')
    @mock.patch(f'{registration.__name__}.invitations')
    @mock.patch(f'{registration.__name__}.users')
    def test_invite(self, mock_users, mock_invitations, mock_mail):
        mock_users.email_exists.return_value = False
        mock_users.username_exists.return_value = False
        inviter = domain.LoggedUser(user_id='1', email='admin@user.com')
        data, code, _ = registration.invite(
            {'email': 'new@user.com', 'username': 'new',
             'password_plain': 'foopass'},
            inviter
        )
        self.assertEqual(code, status.OK)
        self.assertIsNone(data)
        mock_invitations.create_invitation.assert_called_once_with(
            'new@user.com', 'new', 'foopass', updated_by='admin@user.com'
        )
        mock_mail.send_invitation.assert_called_once_with(
            mock_invitations.create_invitation.return_value
        )


class TestRegister(TestCase):
    """Tests for :func:`.registration.register`."""

    @mock.patch(f'{registration.__name__}.invitations')
    def test_unknown_invitation(self, mock_invitations):
        mock_invitations.get_invitation.side_effect = NoSuchInvitation
        with self.assertRaises(Unauthorized):
            registration.register(INVITATION_ID, {'password': 'foopass'})
        self.assertEqual(mock_invitations.register.call_count, 0)

    def test_malformed_id(self):
        with self.assertRaises(BadRequest):
            registration.register('notanid', {'password': 'foopass'})

    @mock.patch(f'{registration.__name__}.invitations')
    def test_password_required(self, mock_invitations):
        """Without a password from either source, nothing is created."""
        mock_invitations.get_invitation.return_value = domain.Invitation(
            invitation_id=INVITATION_ID, email='new@user.com',
            username='new',
            expires_at=datetime.now(tz=UTC) + timedelta(hours=1)
        )
        with self.assertRaises(BadRequest):
            registration.register(INVITATION_ID, None)
        self.assertEqual(mock_invitations.register.call_count, 0)


class TestUpdatePassword(TestCase):
    """Tests for :func:`.registration.update_password`."""

    @mock.patch(f'{registration.__name__}.invitations')
    def test_failed_reset(self, mock_invitations):
        for error in (NoSuchResetRequest, ResetRequestExpired):
            mock_invitations.complete_reset.side_effect = error
            with self.assertRaises(Unauthorized):
                registration.update_password({
                    'id': INVITATION_ID, 'email': 'foo@user.com',
                    'password': 'newpass'
                })

    @mock.patch(f'{registration.__name__}.invitations')
    @mock.patch(f'{registration.__name__}.users')
    def test_reset_request_unknown_email(self, mock_users, mock_invitations):
        mock_users.email_exists.return_value = False
        with self.assertRaises(Unauthorized):
            registration.request_reset({'email': 'nobody@user.com'})
        self.assertEqual(mock_invitations.create_reset_request.call_count, 0)
