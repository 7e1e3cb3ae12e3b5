"""Storage for articles."""

import logging
from typing import List

from .. import domain
from . import util
from .exceptions import NoSuchArticle, NoSuchCharacter
from .models import DBArticle, DBCharacter, DBContentTag, new_id

logger = logging.getLogger(__name__)


def _to_domain(db_article: DBArticle) -> domain.Article:
    return domain.Article(
        article_id=db_article.id,
        character_id=db_article.character_id,
        user_id=db_article.user_id,
        title=db_article.title,
        ingress=db_article.ingress,
        body=db_article.body,
        created_at=util.from_epoch(db_article.created_at),
        updated_by=db_article.updated_by
    )


def list_articles(user_id: str) -> List[domain.Article]:
    """Get all of the articles owned by a user, newest first."""
    with util.transaction() as session:
        return [
            _to_domain(db_article) for db_article
            in session.query(DBArticle)
            .filter(DBArticle.user_id == user_id)
            .order_by(DBArticle.created_at.desc())
            .all()
        ]


def list_character_articles(user_id: str,
                            character_id: str) -> List[domain.Article]:
    """Get the articles of one character, newest first."""
    with util.transaction() as session:
        return [
            _to_domain(db_article) for db_article
            in session.query(DBArticle)
            .filter(DBArticle.user_id == user_id)
            .filter(DBArticle.character_id == character_id)
            .order_by(DBArticle.created_at.desc())
            .all()
        ]


def get_article(user_id: str, article_id: str) -> domain.Article:
    """
    Get an article owned by ``user_id``.

    Raises
    ------
    :class:`NoSuchArticle`

    """
    with util.transaction() as session:
        db_article = session.query(DBArticle) \
            .filter(DBArticle.id == article_id) \
            .filter(DBArticle.user_id == user_id) \
            .first()
        article = _to_domain(db_article) if db_article else None
    if article is None:
        raise NoSuchArticle(f'No article {article_id}')
    return article


def create_article(user_id: str, character_id: str, title: str,
                   ingress: str, body: str,
                   updated_by: str) -> domain.Article:
    """
    Create an article for a character owned by ``user_id``.

    Raises
    ------
    :class:`NoSuchCharacter`

    """
    db_article = DBArticle(
        id=new_id(),
        character_id=character_id,
        user_id=user_id,
        title=title,
        ingress=ingress,
        body=body,
        created_at=util.now(),
        updated_by=updated_by
    )
    with util.transaction() as session:
        owned = session.query(DBCharacter.id) \
            .filter(DBCharacter.id == character_id) \
            .filter(DBCharacter.user_id == user_id) \
            .first()
        if owned:
            session.add(db_article)
            article = _to_domain(db_article)
    if not owned:
        raise NoSuchCharacter(f'No character {character_id}')
    logger.debug('Created article %s', article.article_id)
    return article


def update_article(user_id: str, article_id: str, title: str, ingress: str,
                   body: str, updated_by: str) -> domain.Article:
    """
    Replace the text of an article.

    Raises
    ------
    :class:`NoSuchArticle`

    """
    with util.transaction() as session:
        updated = session.query(DBArticle) \
            .filter(DBArticle.id == article_id) \
            .filter(DBArticle.user_id == user_id) \
            .update({DBArticle.title: title,
                     DBArticle.ingress: ingress,
                     DBArticle.body: body,
                     DBArticle.updated_by: updated_by},
                    synchronize_session=False)
    if not updated:
        raise NoSuchArticle(f'No article {article_id}')
    return get_article(user_id, article_id)


def delete_article(user_id: str, article_id: str) -> None:
    """
    Delete an article and its tags.

    Raises
    ------
    :class:`NoSuchArticle`

    """
    deleted = 0
    with util.transaction() as session:
        owned = session.query(DBArticle.id) \
            .filter(DBArticle.id == article_id) \
            .filter(DBArticle.user_id == user_id) \
            .first()
        if owned:
            session.query(DBContentTag) \
                .filter(DBContentTag.content_id == article_id) \
                .delete(synchronize_session=False)
            deleted = session.query(DBArticle) \
                .filter(DBArticle.id == article_id) \
                .filter(DBArticle.user_id == user_id) \
                .delete(synchronize_session=False)
    if not deleted:
        raise NoSuchArticle(f'No article {article_id}')
    logger.debug('Deleted article %s', article_id)
