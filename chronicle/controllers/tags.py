"""
Controllers for tags, and for the tags attached to articles.

Tags are global: any authenticated user may list or create them, but only an
admin may rename or delete one. Attaching a tag to an article requires owning
the article.
"""

import logging
from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..auth.authorization import authorize
from ..exceptions import NotFound, BadRequest
from ..services import articles, tags
from ..services.exceptions import NoSuchTag, DuplicateTag, NoSuchArticle
from .util import ResponseData, get_payload, require, parse_id

logger = logging.getLogger(__name__)


def list_tags() -> ResponseData:
    return [domain.to_dict(tag) for tag in tags.list_tags()], status.OK, {}


def create_tag(logged_user: domain.LoggedUser,
               payload: Optional[Any]) -> ResponseData:
    title, = require(get_payload(payload), 'title')
    try:
        tag = tags.create_tag(title, updated_by=logged_user.email)
    except DuplicateTag as e:
        raise BadRequest('Tag already exists') from e
    return domain.to_dict(tag), status.CREATED, {}


def update_tag(logged_user: domain.LoggedUser, tag_id: str,
               payload: Optional[Any]) -> ResponseData:
    """Rename a tag. Admin only."""
    tag_id = parse_id(tag_id)
    authorize(logged_user, None)
    title, = require(get_payload(payload), 'title')
    try:
        tag = tags.update_tag(tag_id, title, updated_by=logged_user.email)
    except NoSuchTag as e:
        raise NotFound('No such tag') from e
    except DuplicateTag as e:
        raise BadRequest('Tag already exists') from e
    return domain.to_dict(tag), status.OK, {}


def delete_tag(logged_user: domain.LoggedUser, tag_id: str) -> ResponseData:
    """Delete a tag. Admin only."""
    tag_id = parse_id(tag_id)
    authorize(logged_user, None)
    try:
        tags.delete_tag(tag_id)
    except NoSuchTag as e:
        raise NotFound('No such tag') from e
    logger.info('Tag %s deleted by %s', tag_id, logged_user.user_id)
    return None, status.OK, {}


def _owned_article(logged_user: domain.LoggedUser, user_id: str,
                   article_id: str) -> domain.Article:
    authorize(logged_user, user_id)
    try:
        return articles.get_article(user_id, article_id)
    except NoSuchArticle as e:
        raise NotFound('No such article') from e


def list_article_tags(logged_user: domain.LoggedUser, user_id: str,
                      article_id: str) -> ResponseData:
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    article = _owned_article(logged_user, user_id, article_id)
    return [domain.to_dict(content_tag) for content_tag
            in tags.list_content_tags(article.article_id)], status.OK, {}


def add_article_tag(logged_user: domain.LoggedUser, user_id: str,
                    article_id: str, payload: Optional[Any]) -> ResponseData:
    """Attach the tag ``tag_id`` from ``payload`` to an article."""
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    tag_id, = require(get_payload(payload), 'tag_id')
    tag_id = parse_id(tag_id)
    article = _owned_article(logged_user, user_id, article_id)
    try:
        content_tag = tags.add_content_tag(article.article_id, tag_id,
                                           updated_by=logged_user.email)
    except NoSuchTag as e:
        raise NotFound('No such tag') from e
    except DuplicateTag as e:
        raise BadRequest('Tag already on article') from e
    return domain.to_dict(content_tag), status.CREATED, {}


def remove_article_tag(logged_user: domain.LoggedUser, user_id: str,
                       article_id: str, tag_id: str) -> ResponseData:
    user_id, article_id = parse_id(user_id), parse_id(article_id)
    tag_id = parse_id(tag_id)
    article = _owned_article(logged_user, user_id, article_id)
    try:
        tags.remove_content_tag(article.article_id, tag_id)
    except NoSuchTag as e:
        raise NotFound('Tag is not on article') from e
    return None, status.OK, {}
