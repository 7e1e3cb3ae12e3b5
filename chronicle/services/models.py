"""Database models."""

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, \
    UniqueConstraint, text
from flask_sqlalchemy import SQLAlchemy

db: SQLAlchemy = SQLAlchemy()


def new_id() -> str:
    """Generate a fresh primary key."""
    return str(uuid.uuid4())


class DBUser(db.Model):  # type: ignore
    """
    User accounts.

    +------------+--------------+------+-----+---------+
    | Field      | Type         | Null | Key | Default |
    +------------+--------------+------+-----+---------+
    | id         | varchar(36)  | NO   | PRI | NULL    |
    | isadmin    | tinyint(1)   | NO   |     | 0       |
    | email      | varchar(255) | NO   | UNI | NULL    |
    | username   | varchar(64)  | NO   | UNI | NULL    |
    | hash       | varchar(255) | NO   |     | NULL    |
    | created_at | int(11)      | NO   |     | 0       |
    +------------+--------------+------+-----+---------+
    """

    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=new_id)
    isadmin = Column(Boolean, nullable=False, server_default=text('0'))
    email = Column(String(255), nullable=False, unique=True)
    username = Column(String(64), nullable=False, unique=True)
    hash = Column(String(255), nullable=False)
    created_at = Column(Integer, nullable=False, server_default=text('0'))


class DBSession(db.Model):  # type: ignore
    """
    Active login sessions.

    Identity snapshots are kept on the row so that resolving a session costs
    a single primary key lookup.
    """

    __tablename__ = 'active_sessions'

    session_id = Column(String(64), primary_key=True)
    user_id = Column(ForeignKey('users.id'), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    expire_at = Column(Integer, nullable=False, index=True)
    isadmin = Column(Boolean, nullable=False, server_default=text('0'))


class DBResetRequest(db.Model):  # type: ignore
    """Pending password reset requests."""

    __tablename__ = 'reset_requests'

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, index=True)
    expires_at = Column(Integer, nullable=False)


class DBInvitation(db.Model):  # type: ignore
    """Pending invitations to register."""

    __tablename__ = 'invitations'

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False)
    username = Column(String(64), nullable=False)
    password_hash = Column(String(255))
    expires_at = Column(Integer, nullable=False)
    updated_by = Column(String(255), nullable=False, server_default=text("''"))


class DBCharacter(db.Model):  # type: ignore
    __tablename__ = 'characters'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(ForeignKey('users.id'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default='')
    created_at = Column(Integer, nullable=False, server_default=text('0'))
    updated_by = Column(String(255), nullable=False, server_default=text("''"))


class DBArticle(db.Model):  # type: ignore
    __tablename__ = 'articles'

    id = Column(String(36), primary_key=True, default=new_id)
    character_id = Column(ForeignKey('characters.id'), nullable=False,
                          index=True)
    user_id = Column(ForeignKey('users.id'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    ingress = Column(Text, nullable=False, default='')
    body = Column(Text, nullable=False, default='')
    created_at = Column(Integer, nullable=False, server_default=text('0'))
    updated_by = Column(String(255), nullable=False, server_default=text("''"))


class DBTag(db.Model):  # type: ignore
    __tablename__ = 'tags'

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False, unique=True)
    created_at = Column(Integer, nullable=False, server_default=text('0'))
    updated_by = Column(String(255), nullable=False, server_default=text("''"))


class DBContentTag(db.Model):  # type: ignore
    """Many-to-many association between tags and content items."""

    __tablename__ = 'contenttags'
    __table_args__ = (UniqueConstraint('tag_id', 'content_id'),)

    id = Column(String(36), primary_key=True, default=new_id)
    tag_id = Column(ForeignKey('tags.id'), nullable=False, index=True)
    content_id = Column(ForeignKey('articles.id'), nullable=False, index=True)
    created_at = Column(Integer, nullable=False, server_default=text('0'))
    updated_by = Column(String(255), nullable=False, server_default=text("''"))
