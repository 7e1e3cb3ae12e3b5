"""Tests for :mod:`chronicle.services.mail`."""

from datetime import datetime
from unittest import TestCase, mock

from flask import Flask
from pytz import UTC

from .. import mail
from ... import domain

INVITATION = domain.Invitation(invitation_id='fooid', email='new@user.com',
                               username='new',
                               expires_at=datetime.now(tz=UTC))


class TestSendInvitation(TestCase):
    """Invitations are sent when a mail server is configured."""

    def setUp(self):
        self.app = Flask('foo')
        mail.init_app(self.app)

    @mock.patch(f'{mail.__name__}.smtplib')
    def test_no_server(self, mock_smtplib):
        """Without a server, nothing is sent."""
        with self.app.app_context():
            mail.send_invitation(INVITATION)
        self.assertEqual(mock_smtplib.SMTP.call_count, 0)

    @mock.patch(f'{mail.__name__}.smtplib')
    def test_send(self, mock_smtplib):
        self.app.config['MAIL_SERVER'] = 'mail.foo.com'
        self.app.config['BASE_SERVER'] = 'chronicle.foo.com'
        with self.app.app_context():
            mail.send_invitation(INVITATION)

        mock_smtplib.SMTP.assert_called_once_with(host='mail.foo.com',
                                                  port=25)
        conn = mock_smtplib.SMTP.return_value.__enter__.return_value
        message = conn.send_message.call_args[0][0]
        self.assertEqual(message['To'], 'new@user.com')
        self.assertIn('https://chronicle.foo.com/app/register?id=fooid',
                      message.get_content())
