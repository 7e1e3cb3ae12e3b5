"""Exceptions raised by the storage services."""


class NoSuchUser(RuntimeError):
    """User does not exist."""


class RegistrationFailed(RuntimeError):
    """Could not create a user; typically a duplicate email or username."""


class HashingError(RuntimeError):
    """A stored password hash is malformed."""


class InvalidToken(RuntimeError):
    """A session cookie is malformed, forged or does not match its session."""


class UnknownSession(RuntimeError):
    """Failed to locate a session in the session store."""


class SessionExpired(RuntimeError):
    """User's session has expired."""


class SessionCreationFailed(RuntimeError):
    """Failed to create a session in the session store."""


class SessionDeletionFailed(RuntimeError):
    """Failed to delete a session in the session store."""


class NoSuchInvitation(RuntimeError):
    """Invitation does not exist."""


class InvitationExpired(RuntimeError):
    """Invitation is past its expiry time."""


class NoSuchResetRequest(RuntimeError):
    """Password reset request does not exist."""


class ResetRequestExpired(RuntimeError):
    """Password reset request is past its expiry time."""


class NoSuchCharacter(RuntimeError):
    """Character does not exist, or is not owned by the given user."""


class NoSuchArticle(RuntimeError):
    """Article does not exist, or is not owned by the given user."""


class NoSuchTag(RuntimeError):
    """Tag or content tag does not exist."""


class DuplicateTag(RuntimeError):
    """A tag with the same title, or the same content tag, already exists."""


class AuthenticationFailed(RuntimeError):
    """Password does not match the stored hash."""


class UserExists(RuntimeError):
    """Another user already has this email or username."""
