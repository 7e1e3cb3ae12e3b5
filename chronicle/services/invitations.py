"""
Invitations and password reset requests.

Both are short-lived, single-use records: an invitation is consumed when the
invited user registers, and a reset request is consumed when the password is
replaced. Their lifetime is ``INVITATION_DURATION`` seconds.
"""

import logging
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from .. import domain
from . import util
from .exceptions import NoSuchInvitation, InvitationExpired, \
    NoSuchResetRequest, ResetRequestExpired, RegistrationFailed
from .models import DBInvitation, DBResetRequest, DBUser, new_id
from .passwords import hash_password

logger = logging.getLogger(__name__)


def _expires_at() -> int:
    duration = int(current_app.config.get('INVITATION_DURATION', 86400))
    return util.now() + duration


def _invitation_to_domain(db_invitation: DBInvitation) -> domain.Invitation:
    return domain.Invitation(
        invitation_id=db_invitation.id,
        email=db_invitation.email,
        username=db_invitation.username,
        expires_at=util.from_epoch(db_invitation.expires_at),
        password_hash=db_invitation.password_hash,
        updated_by=db_invitation.updated_by
    )


def _request_to_domain(db_request: DBResetRequest) \
        -> domain.ResetPasswordRequest:
    return domain.ResetPasswordRequest(
        request_id=db_request.id,
        email=db_request.email,
        expires_at=util.from_epoch(db_request.expires_at)
    )


def create_invitation(email: str, username: str,
                      password: Optional[str] = None,
                      updated_by: str = '') -> domain.Invitation:
    """
    Store an invitation to register.

    Parameters
    ----------
    email : str
    username : str
    password : str or None
        Optional password chosen by the inviter. Only its hash is stored.
    updated_by : str
        Email of the acting user, if any.

    Returns
    -------
    :class:`domain.Invitation`

    """
    db_invitation = DBInvitation(
        id=new_id(),
        email=email,
        username=username,
        password_hash=hash_password(password) if password else None,
        expires_at=_expires_at(),
        updated_by=updated_by
    )
    with util.transaction() as session:
        session.add(db_invitation)
        invitation = _invitation_to_domain(db_invitation)
    logger.info('Created invitation %s', invitation.invitation_id)
    return invitation


def get_invitation(invitation_id: str) -> domain.Invitation:
    """Load an invitation. Raises :class:`NoSuchInvitation`."""
    with util.transaction() as session:
        db_invitation = session.get(DBInvitation, invitation_id)
        invitation = _invitation_to_domain(db_invitation) \
            if db_invitation else None
    if invitation is None:
        raise NoSuchInvitation(f'No invitation {invitation_id}')
    return invitation


def register(invitation_id: str,
             password: Optional[str] = None) -> domain.User:
    """
    Create the invited user, and consume the invitation.

    The user and the deletion of the invitation are committed together.

    Raises
    ------
    :class:`NoSuchInvitation`
    :class:`InvitationExpired`
    :class:`RegistrationFailed`
        No password is available, or the email or username is taken.

    """
    invitation = get_invitation(invitation_id)
    if invitation.expired:
        raise InvitationExpired(f'Invitation {invitation_id} has expired')
    password_hash = hash_password(password) if password \
        else invitation.password_hash
    if not password_hash:
        raise RegistrationFailed('A password is required')

    db_user = DBUser(
        id=new_id(),
        email=invitation.email,
        username=invitation.username,
        hash=password_hash,
        isadmin=False,
        created_at=util.now()
    )
    try:
        with util.transaction() as session:
            deleted = session.query(DBInvitation) \
                .filter(DBInvitation.id == invitation_id) \
                .delete(synchronize_session=False)
            if not deleted:     # Consumed by a concurrent registration.
                raise NoSuchInvitation(f'No invitation {invitation_id}')
            session.add(db_user)
            user = domain.User(user_id=db_user.id, email=db_user.email,
                               username=db_user.username, isadmin=False,
                               created_at=util.from_epoch(db_user.created_at))
    except IntegrityError as e:
        raise RegistrationFailed('Email or username already in use') from e
    logger.info('Registered user %s from invitation %s', user.user_id,
                invitation_id)
    return user


def create_reset_request(email: str) -> domain.ResetPasswordRequest:
    """Store a request to reset the password of the user with ``email``."""
    db_request = DBResetRequest(
        id=new_id(),
        email=email,
        expires_at=_expires_at()
    )
    with util.transaction() as session:
        session.add(db_request)
        request = _request_to_domain(db_request)
    logger.info('Created password reset request %s', request.request_id)
    return request


def get_reset_request(request_id: str) -> domain.ResetPasswordRequest:
    """Load a reset request. Raises :class:`NoSuchResetRequest`."""
    with util.transaction() as session:
        db_request = session.get(DBResetRequest, request_id)
        request = _request_to_domain(db_request) if db_request else None
    if request is None:
        raise NoSuchResetRequest(f'No reset request {request_id}')
    return request


def complete_reset(request_id: str, email: str, password: str) -> None:
    """
    Replace the password of a user, and consume the reset request.

    The request must exist, be unexpired, and have been made for ``email``.
    Otherwise the stored password is left unchanged.

    Raises
    ------
    :class:`NoSuchResetRequest`
    :class:`ResetRequestExpired`

    """
    request = get_reset_request(request_id)
    if request.email != email:
        raise NoSuchResetRequest(f'No reset request {request_id} for email')
    if request.expired:
        raise ResetRequestExpired(f'Reset request {request_id} has expired')

    password_hash = hash_password(password)
    with util.transaction() as session:
        deleted = session.query(DBResetRequest) \
            .filter(DBResetRequest.id == request_id) \
            .delete(synchronize_session=False)
        if not deleted:
            raise NoSuchResetRequest(f'No reset request {request_id}')
        session.query(DBUser) \
            .filter(DBUser.email == email) \
            .update({DBUser.hash: password_hash}, synchronize_session=False)
    logger.info('Completed password reset request %s', request_id)
