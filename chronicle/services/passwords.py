"""Password hashing and verification."""

import hashlib
import hmac
import binascii
import secrets
from base64 import b64encode, b64decode

from .exceptions import HashingError


SALT_LENGTH = 16
ITERATIONS = 260000
_DIGEST_LENGTH = hashlib.sha256().digest_size


def _hash_salt_and_password(salt: bytes, password: str) -> bytes:
    return hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt,
                               ITERATIONS)


def hash_password(password: str) -> str:
    """Generate a salted hash of a password, for storage."""
    salt = secrets.token_bytes(SALT_LENGTH)
    hashed = _hash_salt_and_password(salt, password)
    return b64encode(salt + hashed).decode('ascii')


def check_password(encrypted: str, password: str) -> bool:
    """
    Check a password against a stored hash.

    Parameters
    ----------
    encrypted : str
        Hash generated by :func:`hash_password`.
    password : str
        Password (as entered).

    Returns
    -------
    bool
        ``True`` if the password matches.

    Raises
    ------
    :class:`HashingError`
        Raised if the stored hash is malformed. A wrong password is not an
        error.

    """
    try:
        decoded = b64decode(encrypted.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise HashingError('Stored hash is not valid base64') from e
    if len(decoded) != SALT_LENGTH + _DIGEST_LENGTH:
        raise HashingError('Stored hash has an unexpected length')
    salt = decoded[:SALT_LENGTH]
    enc_hashed = decoded[SALT_LENGTH:]
    return hmac.compare_digest(_hash_salt_and_password(salt, password),
                               enc_hashed)
