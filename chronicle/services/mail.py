"""Sends invitation and password reset emails."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from flask import Flask, current_app, g

from .. import domain

logger = logging.getLogger(__name__)

INVITATION_TEMPLATE = """You have been invited to Chronicle as {username}.

Register at {link} before {expires}.
"""

RESET_TEMPLATE = """A password reset was requested for {email}.

Choose a new password at {link} before {expires}.
"""


class MailSession(object):
    """
    Sends messages through an SMTP service.

    A connection is opened for each message. When no host is configured the
    message is logged and dropped.
    """

    def __init__(self, host: Optional[str] = None, port: int = 25,
                 sender: str = 'noreply@localhost') -> None:
        self._host = host
        self._port = port
        self._sender = sender

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port)

    def send_message(self, recipient: str, subject: str, body: str) -> None:
        """Send a plain-text message to ``recipient``."""
        if not self._host:
            logger.info('No mail server configured; not sending %r to %s',
                        subject, recipient)
            return
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = recipient
        message['Subject'] = subject
        message.set_content(body)
        with self._new_connection() as conn:
            conn.send_message(message)
        logger.debug('Sent %r to %s', subject, recipient)


def init_app(app: Flask) -> None:
    """Set default configuration parameters for an application instance."""
    app.config.setdefault('MAIL_SERVER', None)
    app.config.setdefault('MAIL_PORT', 25)
    app.config.setdefault('MAIL_SENDER', 'noreply@localhost')
    app.config.setdefault('BASE_SERVER', 'localhost:8086')


def get_session() -> MailSession:
    """Get/create a :class:`.MailSession` for this context."""
    if 'mail' not in g:
        config = current_app.config
        g.mail = MailSession(config['MAIL_SERVER'], int(config['MAIL_PORT']),
                             config['MAIL_SENDER'])
    session: MailSession = g.mail
    return session


def _link(path: str, identifier: str) -> str:
    return f"https://{current_app.config['BASE_SERVER']}{path}?id={identifier}"


def send_invitation(invitation: domain.Invitation) -> None:
    """Send the registration link for an invitation."""
    body = INVITATION_TEMPLATE.format(
        username=invitation.username,
        link=_link('/app/register', invitation.invitation_id),
        expires=invitation.expires_at.isoformat()
    )
    get_session().send_message(invitation.email, 'Invitation to Chronicle',
                               body)


def send_reset_request(request: domain.ResetPasswordRequest) -> None:
    """Send the link to complete a password reset."""
    body = RESET_TEMPLATE.format(
        email=request.email,
        link=_link('/app/forgotpassword', request.request_id),
        expires=request.expires_at.isoformat()
    )
    get_session().send_message(request.email, 'Reset your password', body)
