"""Defines the core data structures for the Chronicle service."""

from typing import Any, Optional, NamedTuple
from datetime import datetime
from pytz import UTC


class User(NamedTuple):
    """Represents a registered user."""

    user_id: str
    """Unique identifier for the user."""

    email: str
    """The user's e-mail address. Unique."""

    username: str
    """Slug-like username. Unique."""

    isadmin: bool = False
    """Whether or not the user may act on resources that they do not own."""

    created_at: Optional[datetime] = None
    """When the account was created."""


class LoggedUser(NamedTuple):
    """
    The identity behind an authenticated request.

    Reconstructed from a valid :class:`.Session` on every request, and never
    persisted.
    """

    user_id: str
    email: str
    isadmin: bool = False


class Session(NamedTuple):
    """Represents an authenticated session."""

    session_id: str
    """Unique identifier for the session; the token bound to the cookie."""

    user_id: str
    """The user for which the session was created."""

    email: str
    """Snapshot of the user's e-mail address at login."""

    isadmin: bool
    """Snapshot of the user's admin flag at login."""

    expire_at: datetime
    """The datetime after which the session is no longer valid."""

    @property
    def expired(self) -> bool:
        """Expired if the current time is later than :attr:`.expire_at`."""
        return bool(datetime.now(tz=UTC) >= self.expire_at)

    @property
    def expires(self) -> int:
        """
        Number of seconds until the session expires.

        If the session is already expired, returns 0.
        """
        duration = (self.expire_at - datetime.now(tz=UTC)).total_seconds()
        return max(int(duration), 0)

    def as_logged_user(self) -> LoggedUser:
        """Get the request-scoped identity carried by this session."""
        return LoggedUser(user_id=self.user_id, email=self.email,
                          isadmin=self.isadmin)


class Invitation(NamedTuple):
    """An invitation to register a new account."""

    invitation_id: str
    email: str
    username: str
    expires_at: datetime
    password_hash: Optional[str] = None
    """Hash of a password chosen at invitation time, if any."""

    updated_by: str = ''

    @property
    def expired(self) -> bool:
        """Expired if the current time is later than :attr:`.expires_at`."""
        return bool(datetime.now(tz=UTC) >= self.expires_at)


class ResetPasswordRequest(NamedTuple):
    """A request to reset the password of an existing user."""

    request_id: str
    email: str
    expires_at: datetime

    @property
    def expired(self) -> bool:
        """Expired if the current time is later than :attr:`.expires_at`."""
        return bool(datetime.now(tz=UTC) >= self.expires_at)


class Character(NamedTuple):
    """A character, owned by a single user."""

    character_id: str
    user_id: str
    name: str
    description: str
    created_at: datetime
    updated_by: str


class Article(NamedTuple):
    """
    An article written for a character.

    ``user_id`` duplicates the owner of the character, so that ownership can
    be checked without loading the character.
    """

    article_id: str
    character_id: str
    user_id: str
    title: str
    ingress: str
    body: str
    created_at: datetime
    updated_by: str


class Tag(NamedTuple):
    """A global label that can be attached to content."""

    tag_id: str
    title: str
    created_at: datetime
    updated_by: str


class ContentTag(NamedTuple):
    """Association between a :class:`.Tag` and a content item."""

    content_tag_id: str
    tag_id: str
    content_id: str
    created_at: datetime
    updated_by: str
    title: Optional[str] = None
    """Title of the associated tag, when loaded together with it."""


# Helpers and private functions.


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    Child NamedTuple instances are cast recursively, and datetimes are
    rendered in ISO-8601 format, so that the result can be serialized as
    JSON.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore

    def _cast(value: Any) -> Any:
        if hasattr(value, '_asdict'):
            value = to_dict(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, list):
            value = [_cast(o) for o in value]
        return value

    return {key: _cast(value) for key, value in data.items()}
