"""Provides tools for working with authenticated user sessions."""

import logging
from typing import Optional

from flask import Flask, Request, current_app, request

from .. import domain
from ..exceptions import Unauthorized, InternalServerError
from ..services import sessions
from ..services.exceptions import InvalidToken, UnknownSession, \
    SessionExpired

logger = logging.getLogger(__name__)


def resolve_identity(req: Request) -> domain.LoggedUser:
    """
    Get the identity behind a request, from its session cookie.

    Parameters
    ----------
    req : :class:`flask.Request`

    Returns
    -------
    :class:`domain.LoggedUser`

    Raises
    ------
    :class:`.Unauthorized`
        The cookie is missing, malformed, forged, or its session is unknown
        or expired.

    """
    cookie = req.cookies.get(current_app.config['AUTH_SESSION_COOKIE_NAME'])
    if not cookie:
        raise Unauthorized()
    try:
        session = sessions.load(cookie)
    except InvalidToken as e:
        logger.debug('Invalid session cookie: %s', e)
        raise Unauthorized() from e
    except UnknownSession as e:
        logger.debug('No such session: %s', e)
        raise Unauthorized() from e
    except SessionExpired as e:
        logger.debug('Session is expired: %s', e)
        raise Unauthorized() from e
    return session.as_logged_user()


class Auth(object):
    """
    Attaches the authenticated identity to the request.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from chronicle.auth import Auth
       from chronicle.routes import api


       def create_web_app() -> Flask:
          app = Flask('chronicle')
          app.config.from_pyfile('config.py')
          Auth(app)
          app.register_blueprint(api.blueprint)
          return app


    After :meth:`.load_session` runs, ``request.auth`` is a
    :class:`domain.LoggedUser`, or ``None`` for anonymous requests.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Attach :meth:`.load_session` to the Flask app."""
        self.app = app
        self.app.config.setdefault('AUTH_SESSION_COOKIE_NAME',
                                   'chronicle_session')
        self.app.before_request(self.load_session)

    def load_session(self) -> None:
        """Look for an active session, and attach its identity to request."""
        logged_user: Optional[domain.LoggedUser] = None
        cookie_name = self.app.config['AUTH_SESSION_COOKIE_NAME']
        if request.cookies.get(cookie_name):
            try:
                logged_user = resolve_identity(request)
            except Unauthorized:
                logged_user = None
            except IOError as e:
                logger.error('Could not load session: %s', e)
                raise InternalServerError('Could not load session') from e
        request.auth = logged_user
