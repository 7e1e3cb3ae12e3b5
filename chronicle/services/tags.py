"""Storage for tags and their association with content."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .. import domain
from . import util
from .exceptions import NoSuchTag, DuplicateTag
from .models import DBTag, DBContentTag, new_id

logger = logging.getLogger(__name__)


def _to_domain(db_tag: DBTag) -> domain.Tag:
    return domain.Tag(
        tag_id=db_tag.id,
        title=db_tag.title,
        created_at=util.from_epoch(db_tag.created_at),
        updated_by=db_tag.updated_by
    )


def _content_tag_to_domain(db_content_tag: DBContentTag,
                           title: Optional[str] = None) \
        -> domain.ContentTag:
    return domain.ContentTag(
        content_tag_id=db_content_tag.id,
        tag_id=db_content_tag.tag_id,
        content_id=db_content_tag.content_id,
        created_at=util.from_epoch(db_content_tag.created_at),
        updated_by=db_content_tag.updated_by,
        title=title
    )


def list_tags() -> List[domain.Tag]:
    """Get all tags, by title."""
    with util.transaction() as session:
        return [_to_domain(db_tag) for db_tag
                in session.query(DBTag).order_by(DBTag.title).all()]


def get_tag(tag_id: str) -> domain.Tag:
    """Get a tag. Raises :class:`NoSuchTag`."""
    with util.transaction() as session:
        db_tag = session.get(DBTag, tag_id)
        tag = _to_domain(db_tag) if db_tag else None
    if tag is None:
        raise NoSuchTag(f'No tag {tag_id}')
    return tag


def create_tag(title: str, updated_by: str) -> domain.Tag:
    """
    Create a tag.

    Raises
    ------
    :class:`DuplicateTag`
        A tag with this title already exists.

    """
    db_tag = DBTag(id=new_id(), title=title, created_at=util.now(),
                   updated_by=updated_by)
    try:
        with util.transaction() as session:
            session.add(db_tag)
            tag = _to_domain(db_tag)
    except IntegrityError as e:
        raise DuplicateTag(f'Tag {title} already exists') from e
    logger.debug('Created tag %s', tag.tag_id)
    return tag


def update_tag(tag_id: str, title: str, updated_by: str) -> domain.Tag:
    """Rename a tag. Raises :class:`NoSuchTag` or :class:`DuplicateTag`."""
    try:
        with util.transaction() as session:
            updated = session.query(DBTag) \
                .filter(DBTag.id == tag_id) \
                .update({DBTag.title: title, DBTag.updated_by: updated_by},
                        synchronize_session=False)
    except IntegrityError as e:
        raise DuplicateTag(f'Tag {title} already exists') from e
    if not updated:
        raise NoSuchTag(f'No tag {tag_id}')
    return get_tag(tag_id)


def delete_tag(tag_id: str) -> None:
    """Delete a tag, and detach it from all content."""
    with util.transaction() as session:
        session.query(DBContentTag) \
            .filter(DBContentTag.tag_id == tag_id) \
            .delete(synchronize_session=False)
        deleted = session.query(DBTag) \
            .filter(DBTag.id == tag_id) \
            .delete(synchronize_session=False)
    if not deleted:
        raise NoSuchTag(f'No tag {tag_id}')
    logger.debug('Deleted tag %s', tag_id)


def list_content_tags(content_id: str) -> List[domain.ContentTag]:
    """Get the tags attached to a content item, with their titles."""
    with util.transaction() as session:
        rows = session.query(DBContentTag, DBTag.title) \
            .join(DBTag, DBTag.id == DBContentTag.tag_id) \
            .filter(DBContentTag.content_id == content_id) \
            .order_by(DBTag.title) \
            .all()
        return [_content_tag_to_domain(db_content_tag, title)
                for db_content_tag, title in rows]


def add_content_tag(content_id: str, tag_id: str,
                    updated_by: str) -> domain.ContentTag:
    """
    Attach a tag to a content item.

    Raises
    ------
    :class:`NoSuchTag`
    :class:`DuplicateTag`
        The tag is already attached to this item.

    """
    tag = get_tag(tag_id)
    db_content_tag = DBContentTag(id=new_id(), tag_id=tag_id,
                                  content_id=content_id,
                                  created_at=util.now(),
                                  updated_by=updated_by)
    try:
        with util.transaction() as session:
            session.add(db_content_tag)
            content_tag = _content_tag_to_domain(db_content_tag, tag.title)
    except IntegrityError as e:
        raise DuplicateTag(f'Tag {tag_id} already on {content_id}') from e
    return content_tag


def remove_content_tag(content_id: str, tag_id: str) -> None:
    """Detach a tag from a content item. Raises :class:`NoSuchTag`."""
    with util.transaction() as session:
        deleted = session.query(DBContentTag) \
            .filter(DBContentTag.content_id == content_id) \
            .filter(DBContentTag.tag_id == tag_id) \
            .delete(synchronize_session=False)
    if not deleted:
        raise NoSuchTag(f'Tag {tag_id} is not on {content_id}')
