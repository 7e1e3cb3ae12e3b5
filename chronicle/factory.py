"""Application factory for the Chronicle service."""

import logging

import click
from flask import Flask, Response, jsonify
from flask.cli import with_appcontext
from werkzeug.exceptions import HTTPException

from . import auth
from .app_logging import setup_logger
from .routes import api
from .services import mail, sessions, users, util
from .services.exceptions import RegistrationFailed
from .services.sessions import SessionStore

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException) -> Response:
    """Render an HTTP exception as a JSON error body."""
    exc_resp = error.get_response()
    response = jsonify(reason=error.description,
                       error_type=type(error).__name__)
    response.status_code = exc_resp.status_code
    for header in ('WWW-Authenticate', 'Allow'):
        if header in exc_resp.headers:
            response.headers[header] = exc_resp.headers[header]
    return response


def create_web_app() -> Flask:
    """Initialize and configure the Chronicle application."""
    app = Flask('chronicle')
    app.config.from_pyfile('config.py')
    setup_logger(app.config['LOGLEVEL'], app.config['LOGFILE'])

    util.init_app(app)
    SessionStore.init_app(app)
    mail.init_app(app)

    app.register_blueprint(api.blueprint)
    auth.Auth(app)    # Resolves the session cookie on each request.
    app.errorhandler(HTTPException)(jsonify_exception)

    app.cli.add_command(create_db)
    app.cli.add_command(create_user)
    app.cli.add_command(purge_sessions)

    if app.config['CREATE_DB']:
        with app.app_context():
            util.create_all()

    return app


@click.command('create-db')
@with_appcontext
def create_db() -> None:
    """Create all of the tables."""
    util.create_all()
    click.echo('Created tables')


@click.command('create-user')
@click.option('--username', prompt='Username')
@click.option('--email', prompt='Email address')
@click.option('--password', prompt='Password', hide_input=True,
              confirmation_prompt=True)
@click.option('--admin', is_flag=True, default=False,
              help='Grant the admin flag.')
@with_appcontext
def create_user(username: str, email: str, password: str,
                admin: bool) -> None:
    """Create a new user, without an invitation."""
    try:
        user = users.create_user(email, username, password, isadmin=admin)
    except RegistrationFailed as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'Created user {user.user_id}')


@click.command('purge-sessions')
@with_appcontext
def purge_sessions() -> None:
    """Delete expired sessions."""
    click.echo(f'Purged {sessions.purge_expired()} expired session(s)')
