"""
Authorization of requests to protected routes.

This module provides :func:`scoped`, a decorator factory used to protect Flask
routes that require an authenticated user. An authorizer function may also be
given, to check per request that the user may act on the requested resource.
The call signature of the authorizer function should be:
``(logged_user: domain.LoggedUser, *args, **kwargs) -> bool``, where `*args`
and `**kwargs` are the URL parameters passed by Flask to the route function.

.. code-block:: python

   from chronicle.auth.decorators import scoped
   from chronicle.auth.authorization import is_admin


   @blueprint.route('/users', methods=['GET'])
   @scoped(authorizer=is_admin)
   def list_users():
       ...

"""

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import request

from ..exceptions import Unauthorized, AdminRequired

logger = logging.getLogger(__name__)


def scoped(authorizer: Optional[Callable] = None) -> Callable:
    """
    Generate a decorator to enforce authorization requirements.

    Parameters
    ----------
    authorizer : function
        If the authorizer returns ``False``, an :class:`.AdminRequired`
        exception is raised.

    Returns
    -------
    function

    """
    def protector(func: Callable) -> Callable:
        """Decorator that provides identity enforcement."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """
            Check for an identity before executing the route.

            Raises
            ------
            :class:`.Unauthorized`
                Raised when no valid session is attached to the request.
            :class:`.AdminRequired`
                Raised when the provided authorizer returns ``False``.

            """
            logged_user = getattr(request, 'auth', None)
            if logged_user is None:
                logger.debug('No valid session; aborting')
                raise Unauthorized()

            if authorizer and not authorizer(logged_user, *args, **kwargs):
                logger.debug('Authorizer returned negative result')
                raise AdminRequired()

            logger.debug('Request is authorized, proceeding')
            return func(*args, **kwargs)
        return wrapper
    return protector
