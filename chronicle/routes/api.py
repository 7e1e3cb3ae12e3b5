"""Provides the JSON API, mounted under ``/api``."""

import logging
from datetime import timedelta
from http import HTTPStatus as status
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, make_response, \
    request

from ..auth.authorization import is_admin
from ..auth.decorators import scoped
from ..controllers import authentication, registration, users, characters, \
    articles, tags
from ..services import util

logger = logging.getLogger(__name__)
blueprint = Blueprint('api', __name__, url_prefix='/api')


def set_cookies(response: Response, data: dict) -> None:
    """
    Update a :class:`.Response` with cookies in controller data.

    Controllers seeking to update cookies must include a 'cookies' key
    in their response data. An empty value with no lifetime clears the
    cookie.
    """
    cookies = data.pop('cookies', None)
    if cookies is None:
        return None
    for cookie_key, (cookie_value, expires) in cookies.items():
        cookie_name = current_app.config[f'{cookie_key.upper()}_NAME']
        max_age = timedelta(seconds=expires)
        domain = current_app.config['AUTH_SESSION_COOKIE_DOMAIN']
        params: dict = dict(httponly=True, domain=domain)
        if current_app.config['AUTH_SESSION_COOKIE_SECURE']:
            # Lax, to allow reasonable links to the app using GET requests.
            params.update({'secure': True, 'samesite': 'Lax'})
        if not cookie_value:
            params['expires'] = 0
        response.set_cookie(cookie_name, cookie_value, max_age=max_age,
                            **params)


def _respond(data: Any, code: int, headers: dict) -> Response:
    cookies = None
    if isinstance(data, dict) and 'cookies' in data:
        cookies = {'cookies': data.pop('cookies')}
        if not data:
            data = None
    if data is None:
        response = make_response('', code, headers)
    else:
        response = make_response(jsonify(data), code, headers)
    if cookies:
        set_cookies(response, cookies)
    return response


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Apply response headers to all responses."""
    # Prevent browsers and proxies from caching responses with identity.
    response.headers['Cache-Control'] = 'no-store'
    return response


@blueprint.route('/status', methods=['GET'])
def service_status() -> Response:
    """Health check endpoint."""
    if util.is_available():
        return make_response(jsonify({'status': 'OK'}), status.OK)
    return make_response(jsonify({'status': 'unavailable'}),
                         status.SERVICE_UNAVAILABLE)


# Authentication.

@blueprint.route('/auth', methods=['POST'])
def login() -> Response:
    """Log in with an email address and password."""
    return _respond(*authentication.login(request.get_json(silent=True)))


@blueprint.route('/auth', methods=['DELETE'])
def logout() -> Response:
    """Log out. Succeeds whether or not there is a session."""
    return _respond(*authentication.logout(request.auth))


@blueprint.route('/auth', methods=['GET'])
@scoped()
def whoami() -> Response:
    return _respond(*authentication.whoami(request.auth))


# Invitations, registration and password reset.

@blueprint.route('/invitations', methods=['POST'])
def invite() -> Response:
    return _respond(*registration.invite(request.get_json(silent=True),
                                         request.auth))


@blueprint.route('/register/<invitation_id>', methods=['POST'])
def register(invitation_id: str) -> Response:
    return _respond(*registration.register(invitation_id,
                                           request.get_json(silent=True)))


@blueprint.route('/resetpassword', methods=['POST'])
def request_reset() -> Response:
    return _respond(*registration.request_reset(
        request.get_json(silent=True)
    ))


@blueprint.route('/updatepassword', methods=['PUT'])
def update_password() -> Response:
    return _respond(*registration.update_password(
        request.get_json(silent=True)
    ))


# Users.

@blueprint.route('/users', methods=['GET'])
@scoped(authorizer=is_admin)
def list_users() -> Response:
    return _respond(*users.list_users(request.auth))


@blueprint.route('/users/<user_id>', methods=['GET'])
@scoped()
def get_user(user_id: str) -> Response:
    return _respond(*users.get_user(request.auth, user_id))


@blueprint.route('/users/<user_id>', methods=['PUT'])
@scoped()
def update_user(user_id: str) -> Response:
    return _respond(*users.update_user(request.auth, user_id,
                                       request.get_json(silent=True)))


@blueprint.route('/users/<user_id>', methods=['DELETE'])
@scoped()
def delete_user(user_id: str) -> Response:
    return _respond(*users.delete_user(request.auth, user_id))


# Characters.

@blueprint.route('/users/<user_id>/characters', methods=['GET'])
@scoped()
def list_characters(user_id: str) -> Response:
    return _respond(*characters.list_characters(request.auth, user_id))


@blueprint.route('/users/<user_id>/characters', methods=['POST'])
@scoped()
def create_character(user_id: str) -> Response:
    return _respond(*characters.create_character(
        request.auth, user_id, request.get_json(silent=True)
    ))


@blueprint.route('/users/<user_id>/characters/<character_id>',
                 methods=['GET'])
@scoped()
def get_character(user_id: str, character_id: str) -> Response:
    return _respond(*characters.get_character(request.auth, user_id,
                                              character_id))


@blueprint.route('/users/<user_id>/characters/<character_id>',
                 methods=['PUT'])
@scoped()
def update_character(user_id: str, character_id: str) -> Response:
    return _respond(*characters.update_character(
        request.auth, user_id, character_id, request.get_json(silent=True)
    ))


@blueprint.route('/users/<user_id>/characters/<character_id>',
                 methods=['DELETE'])
@scoped()
def delete_character(user_id: str, character_id: str) -> Response:
    return _respond(*characters.delete_character(request.auth, user_id,
                                                 character_id))


# Articles.

@blueprint.route('/users/<user_id>/characters/<character_id>/articles',
                 methods=['GET'])
@scoped()
def list_character_articles(user_id: str, character_id: str) -> Response:
    return _respond(*articles.list_character_articles(request.auth, user_id,
                                                      character_id))


@blueprint.route('/users/<user_id>/characters/<character_id>/articles',
                 methods=['POST'])
@scoped()
def create_article(user_id: str, character_id: str) -> Response:
    return _respond(*articles.create_article(
        request.auth, user_id, character_id, request.get_json(silent=True)
    ))


@blueprint.route('/users/<user_id>/articles', methods=['GET'])
@scoped()
def list_articles(user_id: str) -> Response:
    return _respond(*articles.list_articles(request.auth, user_id))


@blueprint.route('/users/<user_id>/articles/<article_id>', methods=['GET'])
@scoped()
def get_article(user_id: str, article_id: str) -> Response:
    return _respond(*articles.get_article(request.auth, user_id, article_id))


@blueprint.route('/users/<user_id>/articles/<article_id>', methods=['PUT'])
@scoped()
def update_article(user_id: str, article_id: str) -> Response:
    return _respond(*articles.update_article(
        request.auth, user_id, article_id, request.get_json(silent=True)
    ))


@blueprint.route('/users/<user_id>/articles/<article_id>',
                 methods=['DELETE'])
@scoped()
def delete_article(user_id: str, article_id: str) -> Response:
    return _respond(*articles.delete_article(request.auth, user_id,
                                             article_id))


# Tags attached to articles.

@blueprint.route('/users/<user_id>/articles/<article_id>/tags',
                 methods=['GET'])
@scoped()
def list_article_tags(user_id: str, article_id: str) -> Response:
    return _respond(*tags.list_article_tags(request.auth, user_id,
                                            article_id))


@blueprint.route('/users/<user_id>/articles/<article_id>/tags',
                 methods=['POST'])
@scoped()
def add_article_tag(user_id: str, article_id: str) -> Response:
    return _respond(*tags.add_article_tag(
        request.auth, user_id, article_id, request.get_json(silent=True)
    ))


@blueprint.route('/users/<user_id>/articles/<article_id>/tags/<tag_id>',
                 methods=['DELETE'])
@scoped()
def remove_article_tag(user_id: str, article_id: str,
                       tag_id: str) -> Response:
    return _respond(*tags.remove_article_tag(request.auth, user_id,
                                             article_id, tag_id))


# Global tags.

@blueprint.route('/tags', methods=['GET'])
@scoped()
def list_tags() -> Response:
    return _respond(*tags.list_tags())


@blueprint.route('/tags', methods=['POST'])
@scoped()
def create_tag() -> Response:
    return _respond(*tags.create_tag(request.auth,
                                     request.get_json(silent=True)))


@blueprint.route('/tags/<tag_id>', methods=['PUT'])
@scoped(authorizer=is_admin)
def update_tag(tag_id: str) -> Response:
    return _respond(*tags.update_tag(request.auth, tag_id,
                                     request.get_json(silent=True)))


@blueprint.route('/tags/<tag_id>', methods=['DELETE'])
@scoped(authorizer=is_admin)
def delete_tag(tag_id: str) -> Response:
    return _respond(*tags.delete_tag(request.auth, tag_id))
