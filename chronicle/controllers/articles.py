"""Controllers for articles."""

from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..auth.authorization import authorize
from ..exceptions import NotFound
from ..services import articles
from ..services.exceptions import NoSuchArticle, NoSuchCharacter
from .util import ResponseData, get_payload, require, optional, parse_id


def _text(payload: Optional[Any]) -> tuple:
    data = get_payload(payload)
    title, = require(data, 'title')
    return title, optional(data, 'ingress', ''), optional(data, 'body', '')


def list_articles(logged_user: domain.LoggedUser,
                  user_id: str) -> ResponseData:
    """Get all of the articles of a user."""
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    return [domain.to_dict(article) for article
            in articles.list_articles(user_id)], status.OK, {}


def list_character_articles(logged_user: domain.LoggedUser, user_id: str,
                            character_id: str) -> ResponseData:
    """Get the articles of one character."""
    user_id, character_id = parse_id(user_id), parse_id(character_id)
    authorize(logged_user, user_id)
    return [domain.to_dict(article) for article
            in articles.list_character_articles(user_id, character_id)], \
        status.OK, {}


def get_article(logged_user: domain.LoggedUser, user_id: str,
                article_id: str) -> ResponseData:
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    authorize(logged_user, user_id)
    try:
        article = articles.get_article(user_id, article_id)
    except NoSuchArticle as e:
        raise NotFound('No such article') from e
    return domain.to_dict(article), status.OK, {}


def create_article(logged_user: domain.LoggedUser, user_id: str,
                   character_id: str,
                   payload: Optional[Any]) -> ResponseData:
    """Write a new article for a character."""
    user_id, character_id = parse_id(user_id), parse_id(character_id)
    authorize(logged_user, user_id)
    title, ingress, body = _text(payload)
    try:
        article = articles.create_article(user_id, character_id, title,
                                          ingress, body,
                                          updated_by=logged_user.email)
    except NoSuchCharacter as e:
        raise NotFound('No such character') from e
    return domain.to_dict(article), status.CREATED, {}


def update_article(logged_user: domain.LoggedUser, user_id: str,
                   article_id: str, payload: Optional[Any]) -> ResponseData:
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    authorize(logged_user, user_id)
    title, ingress, body = _text(payload)
    try:
        article = articles.update_article(user_id, article_id, title,
                                          ingress, body,
                                          updated_by=logged_user.email)
    except NoSuchArticle as e:
        raise NotFound('No such article') from e
    return domain.to_dict(article), status.OK, {}


def delete_article(logged_user: domain.LoggedUser, user_id: str,
                   article_id: str) -> ResponseData:
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    authorize(logged_user, user_id)
    try:
        articles.delete_article(user_id, article_id)
    except NoSuchArticle as e:
        raise NotFound('No such article') from e
    return None, status.OK, {}
