"""Provide methods for working with user accounts."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .. import domain
from . import util
from .exceptions import NoSuchUser, RegistrationFailed, UserExists, \
    AuthenticationFailed
from .models import DBUser, DBSession, DBCharacter, DBArticle, \
    DBContentTag, new_id
from .passwords import hash_password, check_password

logger = logging.getLogger(__name__)


def _to_domain(db_user: DBUser) -> domain.User:
    return domain.User(
        user_id=db_user.id,
        email=db_user.email,
        username=db_user.username,
        isadmin=bool(db_user.isadmin),
        created_at=util.from_epoch(db_user.created_at)
    )


def username_exists(username: str) -> bool:
    """
    Determine whether a user with a particular username already exists.

    Parameters
    ----------
    username : str

    Returns
    -------
    bool

    """
    with util.transaction() as session:
        data = session.query(DBUser) \
            .filter(DBUser.username == username) \
            .first()
        return bool(data)


def email_exists(email: str) -> bool:
    """
    Determine whether a user with a particular address already exists.

    Parameters
    ----------
    email : str

    Returns
    -------
    bool

    """
    with util.transaction() as session:
        data = session.query(DBUser).filter(DBUser.email == email).first()
        return bool(data)


def get_user(user_id: str) -> domain.User:
    """Load a user by id. Raises :class:`NoSuchUser`."""
    with util.transaction() as session:
        db_user: Optional[DBUser] = session.get(DBUser, user_id)
        user = _to_domain(db_user) if db_user else None
    if user is None:
        raise NoSuchUser(f'No user with id {user_id}')
    return user


def get_user_by_email(email: str) -> domain.User:
    """Load a user by email address. Raises :class:`NoSuchUser`."""
    with util.transaction() as session:
        db_user = session.query(DBUser).filter(DBUser.email == email).first()
        user = _to_domain(db_user) if db_user else None
    if user is None:
        raise NoSuchUser('No user with that email')
    return user


def query_all() -> List[domain.User]:
    """Load all users, ordered by username."""
    with util.transaction() as session:
        return [_to_domain(db_user) for db_user in
                session.query(DBUser).order_by(DBUser.username).all()]


def authenticate(email: str, password: str) -> domain.User:
    """
    Validate the credentials of a user.

    Parameters
    ----------
    email : str
    password : str

    Returns
    -------
    :class:`domain.User`

    Raises
    ------
    :class:`NoSuchUser`
        No user has this email address.
    :class:`AuthenticationFailed`
        The password does not match.
    :class:`HashingError`
        The stored hash is malformed.

    """
    with util.transaction() as session:
        db_user = session.query(DBUser).filter(DBUser.email == email).first()
        if db_user is None:
            stored, user = None, None
        else:
            stored, user = db_user.hash, _to_domain(db_user)
    if user is None or stored is None:
        raise NoSuchUser('No user with that email')
    if not check_password(stored, password):
        raise AuthenticationFailed('Invalid password')
    return user


def create_user(email: str, username: str, password: Optional[str] = None,
                password_hash: Optional[str] = None,
                isadmin: bool = False) -> domain.User:
    """
    Create a new user.

    Exactly one of ``password`` (plain) or ``password_hash`` (as produced by
    :func:`.passwords.hash_password`) is used; ``password`` wins if both are
    given.

    Raises
    ------
    :class:`RegistrationFailed`
        No password was given, or the email or username is taken.

    """
    if password:
        password_hash = hash_password(password)
    if not password_hash:
        raise RegistrationFailed('A password is required')
    db_user = DBUser(
        id=new_id(),
        email=email,
        username=username,
        hash=password_hash,
        isadmin=isadmin,
        created_at=util.now()
    )
    try:
        with util.transaction() as session:
            session.add(db_user)
            user = _to_domain(db_user)
    except IntegrityError as e:
        raise RegistrationFailed('Email or username already in use') from e
    logger.info('Created user %s', user.user_id)
    return user


def update_user(user_id: str, email: Optional[str] = None,
                username: Optional[str] = None,
                isadmin: Optional[bool] = None) -> domain.User:
    """
    Update the profile of a user. Only the fields that are given change.

    Raises
    ------
    :class:`NoSuchUser`
    :class:`UserExists`
        The new email or username belongs to another user.

    """
    values = {}
    if email is not None:
        values[DBUser.email] = email
    if username is not None:
        values[DBUser.username] = username
    if isadmin is not None:
        values[DBUser.isadmin] = isadmin
    if values:
        try:
            with util.transaction() as session:
                updated = session.query(DBUser) \
                    .filter(DBUser.id == user_id) \
                    .update(values, synchronize_session=False)
        except IntegrityError as e:
            raise UserExists('Email or username already in use') from e
        if not updated:
            raise NoSuchUser(f'No user with id {user_id}')
    return get_user(user_id)


def set_password(email: str, password: str) -> None:
    """Replace the password hash of the user with this email address."""
    with util.transaction() as session:
        updated = session.query(DBUser) \
            .filter(DBUser.email == email) \
            .update({DBUser.hash: hash_password(password)},
                    synchronize_session=False)
    if not updated:
        raise NoSuchUser('No user with that email')


def delete_user(user_id: str) -> None:
    """
    Delete a user, along with their sessions and content.

    Raises
    ------
    :class:`NoSuchUser`

    """
    with util.transaction() as session:
        article_ids = select(DBArticle.id).where(DBArticle.user_id == user_id)
        session.query(DBContentTag) \
            .filter(DBContentTag.content_id.in_(article_ids)) \
            .delete(synchronize_session=False)
        session.query(DBArticle) \
            .filter(DBArticle.user_id == user_id) \
            .delete(synchronize_session=False)
        session.query(DBCharacter) \
            .filter(DBCharacter.user_id == user_id) \
            .delete(synchronize_session=False)
        session.query(DBSession) \
            .filter(DBSession.user_id == user_id) \
            .delete(synchronize_session=False)
        deleted = session.query(DBUser) \
            .filter(DBUser.id == user_id) \
            .delete(synchronize_session=False)
    if not deleted:
        raise NoSuchUser(f'No user with id {user_id}')
    logger.info('Deleted user %s', user_id)
