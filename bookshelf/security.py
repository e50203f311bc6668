"""Password salting, hashing and verification.

Passwords are stored as bcrypt hashes of ``password + salt`` where the salt
is a random printable string kept in its own table next to the hash. The
salted password is reduced with SHA-256 first, so every byte of it counts
even past bcrypt's 72-byte input limit.
"""

import base64
import hashlib
import logging
import secrets
import string

import bcrypt

from bookshelf.config import Config

logger = logging.getLogger(__name__)

# Printable ASCII from '!' to '~': no spaces, no control characters
SALT_ALPHABET = "".join(
    c for c in string.printable if c not in string.whitespace
)


def generate_salt(length: int) -> str:
    """
    Generate a random salt.

    Args:
        length: Number of characters to return

    Returns:
        Salt string drawn from printable, non-whitespace ASCII
    """
    if length < 0:
        raise ValueError("Salt length must not be negative")
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def _to_bcrypt_bytes(secret: str) -> bytes:
    # 44 base64 characters, always under bcrypt's 72-byte limit
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, salt: str, rounds: int = Config.BCRYPT_ROUNDS) -> str:
    """
    Hash a password combined with its salt.

    Args:
        password: Plain text password
        salt: Salt returned by generate_salt
        rounds: bcrypt work factor

    Returns:
        Encoded bcrypt hash; cost and bcrypt salt are embedded in it

    Raises:
        UnicodeEncodeError: If the password cannot be encoded
    """
    hashed = bcrypt.hashpw(_to_bcrypt_bytes(password + salt), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_hash(candidate: str, stored_hash: str) -> bool:
    """
    Check a salted candidate password against a stored hash.

    Args:
        candidate: Password with the stored salt already appended
        stored_hash: Hash produced by hash_password

    Returns:
        True if they match, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(_to_bcrypt_bytes(candidate), stored_hash.encode("utf-8"))
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False
