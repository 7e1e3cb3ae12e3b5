"""Controllers for user accounts."""

import logging
from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..auth.authorization import authorize
from ..exceptions import NotFound, BadRequest, Empty
from ..services import users
from ..services.exceptions import NoSuchUser, UserExists
from .util import ResponseData, get_payload, optional, parse_id

logger = logging.getLogger(__name__)


def list_users(logged_user: domain.LoggedUser) -> ResponseData:
    """Get all users. Admin only."""
    authorize(logged_user, None)
    all_users = users.query_all()
    if not all_users:
        raise Empty()
    return [domain.to_dict(user) for user in all_users], status.OK, {}


def get_user(logged_user: domain.LoggedUser, user_id: str) -> ResponseData:
    """Get the profile of a user."""
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    try:
        user = users.get_user(user_id)
    except NoSuchUser as e:
        raise NotFound('No such user') from e
    return domain.to_dict(user), status.OK, {}


def update_user(logged_user: domain.LoggedUser, user_id: str,
                payload: Optional[Any]) -> ResponseData:
    """
    Update the profile of a user.

    ``email`` and ``username`` may be changed by the owner. Only an admin may
    change ``isadmin``.
    """
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    data = get_payload(payload)
    email = optional(data, 'email')
    username = optional(data, 'username')
    isadmin = data.get('isadmin')
    if isadmin is not None:
        if not isinstance(isadmin, bool):
            raise BadRequest('Invalid field: isadmin')
        authorize(logged_user, None)
    try:
        user = users.update_user(user_id, email=email, username=username,
                                 isadmin=isadmin)
    except NoSuchUser as e:
        raise NotFound('No such user') from e
    except UserExists as e:
        raise BadRequest('Email or username already in use') from e
    return domain.to_dict(user), status.OK, {}


def delete_user(logged_user: domain.LoggedUser, user_id: str) -> ResponseData:
    """Delete a user, and everything they own."""
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    try:
        users.delete_user(user_id)
    except NoSuchUser as e:
        raise NotFound('No such user') from e
    logger.info('User %s deleted by %s', user_id, logged_user.user_id)
    return None, status.OK, {}
