"""Storage for characters."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .. import domain
from . import util
from .exceptions import NoSuchCharacter, NoSuchUser
from .models import DBCharacter, DBArticle, DBContentTag, new_id

logger = logging.getLogger(__name__)


def _to_domain(db_character: DBCharacter) -> domain.Character:
    return domain.Character(
        character_id=db_character.id,
        user_id=db_character.user_id,
        name=db_character.name,
        description=db_character.description,
        created_at=util.from_epoch(db_character.created_at),
        updated_by=db_character.updated_by
    )


def list_characters(user_id: str) -> List[domain.Character]:
    """Get all of the characters owned by a user, oldest first."""
    with util.transaction() as session:
        return [
            _to_domain(db_character) for db_character
            in session.query(DBCharacter)
            .filter(DBCharacter.user_id == user_id)
            .order_by(DBCharacter.created_at)
            .all()
        ]


def get_character(user_id: str, character_id: str) -> domain.Character:
    """
    Get a character owned by ``user_id``.

    Raises
    ------
    :class:`NoSuchCharacter`
        The character does not exist, or belongs to another user.

    """
    with util.transaction() as session:
        db_character = session.query(DBCharacter) \
            .filter(DBCharacter.id == character_id) \
            .filter(DBCharacter.user_id == user_id) \
            .first()
        character = _to_domain(db_character) if db_character else None
    if character is None:
        raise NoSuchCharacter(f'No character {character_id}')
    return character


def create_character(user_id: str, name: str, description: str,
                     updated_by: str) -> domain.Character:
    """
    Create a new character for ``user_id``.

    Raises
    ------
    :class:`NoSuchUser`

    """
    db_character = DBCharacter(
        id=new_id(),
        user_id=user_id,
        name=name,
        description=description,
        created_at=util.now(),
        updated_by=updated_by
    )
    try:
        with util.transaction() as session:
            session.add(db_character)
            character = _to_domain(db_character)
    except IntegrityError as e:
        raise NoSuchUser(f'No user with id {user_id}') from e
    logger.debug('Created character %s', character.character_id)
    return character


def update_character(user_id: str, character_id: str, name: str,
                     description: str, updated_by: str) -> domain.Character:
    """
    Replace the name and description of a character.

    Raises
    ------
    :class:`NoSuchCharacter`

    """
    with util.transaction() as session:
        updated = session.query(DBCharacter) \
            .filter(DBCharacter.id == character_id) \
            .filter(DBCharacter.user_id == user_id) \
            .update({DBCharacter.name: name,
                     DBCharacter.description: description,
                     DBCharacter.updated_by: updated_by},
                    synchronize_session=False)
    if not updated:
        raise NoSuchCharacter(f'No character {character_id}')
    return get_character(user_id, character_id)


def delete_character(user_id: str, character_id: str) -> None:
    """
    Delete a character, with its articles and their tags.

    Raises
    ------
    :class:`NoSuchCharacter`

    """
    deleted = 0
    with util.transaction() as session:
        owned = session.query(DBCharacter.id) \
            .filter(DBCharacter.id == character_id) \
            .filter(DBCharacter.user_id == user_id) \
            .first()
        if owned:
            # Children first, so that foreign keys hold at every statement.
            article_ids = select(DBArticle.id) \
                .where(DBArticle.character_id == character_id)
            session.query(DBContentTag) \
                .filter(DBContentTag.content_id.in_(article_ids)) \
                .delete(synchronize_session=False)
            session.query(DBArticle) \
                .filter(DBArticle.character_id == character_id) \
                .delete(synchronize_session=False)
            deleted = session.query(DBCharacter) \
                .filter(DBCharacter.id == character_id) \
                .filter(DBCharacter.user_id == user_id) \
                .delete(synchronize_session=False)
    if not deleted:
        raise NoSuchCharacter(f'No character {character_id}')
    logger.debug('Deleted character %s', character_id)
