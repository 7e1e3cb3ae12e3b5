"""
Invitations, registration and password reset.

None of these require a session. An invitation or reset request that cannot
be honored is reported as :class:`.Unauthorized`, without saying why.
"""

import logging
import smtplib
from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..exceptions import Unauthorized, BadRequest, InternalServerError
from ..services import invitations, mail, users
from ..services.exceptions import NoSuchInvitation, InvitationExpired, \
    NoSuchResetRequest, ResetRequestExpired, RegistrationFailed
from .util import ResponseData, get_payload, require, optional, parse_id

logger = logging.getLogger(__name__)


def invite(payload: Optional[Any],
           logged_user: Optional[domain.LoggedUser] = None) -> ResponseData:
    """
    Invite a new user to register.

    Parameters
    ----------
    payload : dict
        Should include ``email`` and ``username``, and may include
        ``password_plain``.
    logged_user : :class:`domain.LoggedUser` or None
        The inviting user, if the request is authenticated.

    """
    data = get_payload(payload)
    email, username = require(data, 'email', 'username')
    password = optional(data, 'password_plain')
    if users.email_exists(email) or users.username_exists(username):
        logger.debug('Email or username already registered')
        raise Unauthorized()

    invitation = invitations.create_invitation(
        email, username, password,
        updated_by=logged_user.email if logged_user else ''
    )
    try:
        mail.send_invitation(invitation)
    except (smtplib.SMTPException, OSError) as e:
        logger.error('Could not send invitation: %s', e)
        raise InternalServerError('Could not send invitation') from e
    return None, status.OK, {}


def register(invitation_id: str, payload: Optional[Any]) -> ResponseData:
    """
    Create the invited user.

    The password may be given in ``payload``, or may have been chosen when the
    invitation was made.
    """
    invitation_id = parse_id(invitation_id)
    password = optional(get_payload(payload or {}), 'password')
    try:
        invitation = invitations.get_invitation(invitation_id)
    except NoSuchInvitation as e:
        logger.debug('No such invitation: %s', e)
        raise Unauthorized() from e
    if not password and not invitation.password_hash:
        raise BadRequest('A password is required')

    try:
        user = invitations.register(invitation_id, password)
    except (NoSuchInvitation, InvitationExpired, RegistrationFailed) as e:
        logger.debug('Registration failed: %s', e)
        raise Unauthorized() from e
    return domain.to_dict(user), status.CREATED, {}


def request_reset(payload: Optional[Any]) -> ResponseData:
    """Start a password reset for an existing user."""
    email, = require(get_payload(payload), 'email')
    if not users.email_exists(email):
        logger.debug('No user for reset request')
        raise Unauthorized()
    reset_request = invitations.create_reset_request(email)
    try:
        mail.send_reset_request(reset_request)
    except (smtplib.SMTPException, OSError) as e:
        logger.error('Could not send reset request: %s', e)
        raise InternalServerError('Could not send reset request') from e
    return None, status.OK, {}


def update_password(payload: Optional[Any]) -> ResponseData:
    """Complete a password reset."""
    request_id, email, password = require(get_payload(payload),
                                          'id', 'email', 'password')
    request_id = parse_id(request_id)
    try:
        invitations.complete_reset(request_id, email, password)
    except (NoSuchResetRequest, ResetRequestExpired) as e:
        logger.debug('Password reset failed: %s', e)
        raise Unauthorized() from e
    return None, status.OK, {}
