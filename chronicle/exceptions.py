"""
HTTP-facing error taxonomy.

Controllers translate service exceptions into these classes, and the JSON
error handler installed by :func:`chronicle.factory.create_web_app` renders
them with their status code. :class:`Unauthorized` and :class:`AdminRequired`
are kept apart so that denied and unauthenticated requests can be logged and
tested separately.
"""

from werkzeug import exceptions


class Unauthorized(exceptions.Unauthorized):
    """Missing, invalid or expired credentials."""

    description = 'Not a valid session'


class AdminRequired(exceptions.Forbidden):
    """Authenticated, but not permitted to act on this resource."""

    description = 'Admin required'


class NotFound(exceptions.NotFound):
    """The targeted entity does not exist."""


class BadRequest(exceptions.BadRequest):
    """Malformed identifier or request payload."""


class Empty(exceptions.NotFound):
    """A query returned no rows where at least one was expected."""

    description = 'Nothing found'


class InternalServerError(exceptions.InternalServerError):
    """The storage backend is unavailable, or a unit of work failed."""
