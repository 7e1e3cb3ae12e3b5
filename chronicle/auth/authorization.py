"""
The authorization gate.

A request may act on a resource when the caller is an admin, or owns the
resource. Admin-only operations are checked against no owner at all, so that
only the admin flag can let them through.
"""

import logging
from typing import Any, Optional

from .. import domain
from ..exceptions import AdminRequired

logger = logging.getLogger(__name__)


def allow(logged_user: domain.LoggedUser, owner_id: Optional[str]) -> bool:
    """Whether ``logged_user`` may act on a resource owned by ``owner_id``."""
    return bool(logged_user.isadmin
                or (owner_id is not None and logged_user.user_id == owner_id))


def authorize(logged_user: domain.LoggedUser,
              owner_id: Optional[str]) -> None:
    """
    Require that ``logged_user`` may act on a resource owned by ``owner_id``.

    Raises
    ------
    :class:`.AdminRequired`

    """
    if not allow(logged_user, owner_id):
        logger.debug('User %s denied access to resources of %s',
                     logged_user.user_id, owner_id)
        raise AdminRequired()


def is_admin(logged_user: domain.LoggedUser, *args: Any,
             **kwargs: Any) -> bool:
    """Authorizer for :func:`.decorators.scoped` on admin-only routes."""
    return allow(logged_user, None)
