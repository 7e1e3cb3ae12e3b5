"""
Login, logout and the current identity.

On login the user receives a session cookie. On subsequent requests the
:class:`chronicle.auth.Auth` extension resolves that cookie to a
:class:`.domain.LoggedUser`, which the routes pass to the controllers here.
"""

import logging
from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..exceptions import Unauthorized, InternalServerError
from ..services import sessions, users
from ..services.exceptions import NoSuchUser, AuthenticationFailed, \
    HashingError, UnknownSession, SessionCreationFailed, \
    SessionDeletionFailed
from .util import ResponseData, get_payload, require

logger = logging.getLogger(__name__)


def login(payload: Optional[Any]) -> ResponseData:
    """
    Authenticate a user, and start a session.

    Parameters
    ----------
    payload : dict
        Should include ``email`` and ``password``.

    Returns
    -------
    dict
        Empty body, plus the ``cookies`` to set on the response.
    int
        HTTP status code.
    dict
        Headers to add to the response.

    """
    email, password = require(get_payload(payload), 'email', 'password')
    try:
        user = users.authenticate(email, password)
    except (NoSuchUser, AuthenticationFailed) as e:
        logger.debug('Authentication failed: %s', e)
        raise Unauthorized() from e
    except HashingError as e:
        logger.error('Stored password hash is malformed: %s', e)
        raise Unauthorized() from e

    try:
        session = sessions.create_session(user.user_id, user.email,
                                          user.isadmin)
    except SessionCreationFailed as e:
        logger.error('Could not create session: %s', e)
        raise InternalServerError('Cannot log in') from e
    logger.info('User %s logged in', user.user_id)
    data = {'cookies': {
        'auth_session_cookie': (sessions.generate_cookie(session),
                                session.expires)
    }}
    return data, status.OK, {}


def logout(logged_user: Optional[domain.LoggedUser]) -> ResponseData:
    """
    End the sessions of the requesting user, and clear the cookie.

    Logging out without a valid session still succeeds.
    """
    if logged_user is not None:
        try:
            sessions.delete_session(logged_user.user_id)
        except UnknownSession as e:
            logger.debug('No session to delete: %s', e)
        except SessionDeletionFailed as e:
            logger.error('Could not delete session: %s', e)
            raise InternalServerError('Cannot log out') from e
        logger.info('User %s logged out', logged_user.user_id)
    data = {'cookies': {'auth_session_cookie': ('', 0)}}
    return data, status.OK, {}


def whoami(logged_user: domain.LoggedUser) -> ResponseData:
    """Get the id of the requesting user."""
    return {'user_id': logged_user.user_id}, status.OK, {}
