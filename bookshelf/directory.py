"""User directory.

This module owns user identities and their credentials: registration,
authentication and creation of the initial administrator.
"""

import logging
import sqlite3
from typing import Optional, Tuple

from bookshelf.config import Config
from bookshelf.database import Database
from bookshelf.exceptions import ConflictError, StoreError, ValidationError
from bookshelf.models import User
from bookshelf.security import generate_salt, hash_password, verify_hash
from bookshelf.validators import is_valid_name, normalize_email, password_problems

logger = logging.getLogger(__name__)


class UserDirectory:
    """Manages users and credentials stored in the database."""

    def __init__(
        self,
        db: Database,
        salt_length: int = Config.SALT_LENGTH,
        rounds: int = Config.BCRYPT_ROUNDS,
    ):
        """
        Initialize UserDirectory.

        Args:
            db: Open database.
            salt_length: Length of generated password salts.
            rounds: bcrypt work factor for new hashes.
        """
        self.db = db
        self.salt_length = salt_length
        self.rounds = rounds
        self._dummy_hash = None

    def email_exists(self, email: str) -> bool:
        """Check whether an email is already registered (case-insensitive)."""
        email = _lookup_email(email)
        if email is None:
            return False
        row = self.db.query_one(
            "SELECT EXISTS(SELECT 1 FROM users WHERE email = ?)", (email,)
        )
        return bool(row[0])

    def register(self, email: str, firstname: str, lastname: str, password: str) -> int:
        """Register a new user.

        Args:
            email: Email address, stored lowercased.
            firstname: First name.
            lastname: Last name.
            password: Plain text password meeting the strength policy.

        Returns:
            The new user's ID.

        Raises:
            ValidationError: If any field is malformed.
            ConflictError: If the email is already registered.
        """
        return self._create_user(email, firstname, lastname, password, admin=False)

    def register_administrator(
        self, email: str, firstname: str, lastname: str, password: str
    ) -> int:
        """Register a user and grant administrator rights in one transaction."""
        return self._create_user(email, firstname, lastname, password, admin=True)

    def _create_user(self, email, firstname, lastname, password, admin):
        email = normalize_email(email)
        firstname = (firstname or "").strip()
        lastname = (lastname or "").strip()
        if not is_valid_name(firstname):
            raise ValidationError("Invalid first name")
        if not is_valid_name(lastname):
            raise ValidationError("Invalid last name")
        problems = password_problems(password or "")
        if problems:
            raise ValidationError("Password must include " + ", ".join(problems))

        if self.email_exists(email):
            raise ConflictError(f"Email '{email}' already exists")

        salt = generate_salt(self.salt_length)
        hashed = hash_password(password, salt, rounds=self.rounds)

        try:
            with self.db.transaction() as cur:
                cur.execute(
                    "INSERT INTO users (email, firstname, lastname) VALUES (?, ?, ?)",
                    (email, firstname, lastname),
                )
                user_id = cur.lastrowid
                cur.execute(
                    "INSERT INTO salts (user_id, salt) VALUES (?, ?)", (user_id, salt)
                )
                cur.execute(
                    "INSERT INTO passwords (user_id, password) VALUES (?, ?)",
                    (user_id, hashed),
                )
                if admin:
                    cur.execute("INSERT INTO admins (user_id) VALUES (?)", (user_id,))
        except sqlite3.IntegrityError as e:
            if "unique" not in str(e).lower():
                raise StoreError(f"Could not register {email}: {e}") from e
            # Another registration won the race for this email
            raise ConflictError(f"Email '{email}' already exists") from e

        logger.info(f"Registered {'administrator' if admin else 'user'} {user_id}")
        return user_id

    def authenticate(self, email: str, password: str) -> Tuple[Optional[User], bool]:
        """Verify an email/password pair.

        Unknown emails and wrong passwords fail the same way so callers
        cannot tell which one was wrong.

        Returns:
            (user, True) on success, (None, False) otherwise.
        """
        email = _lookup_email(email)
        row = None
        if email is not None:
            row = self.db.query_one(
                """
                SELECT u.user_id, s.salt, p.password
                FROM users u
                JOIN salts s ON s.user_id = u.user_id
                JOIN passwords p ON p.user_id = u.user_id
                WHERE u.email = ?
                """,
                (email,),
            )

        if row is None:
            # Same bcrypt cost as a wrong password
            verify_hash(password or "", self._unknown_user_hash())
            logger.warning("Failed login attempt")
            return None, False
        if not verify_hash((password or "") + row["salt"].strip(), row["password"]):
            logger.warning("Failed login attempt")
            return None, False

        user = self.get_user(row["user_id"])
        logger.info(f"User {user.user_id} logged in")
        return user, True

    def _unknown_user_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(
                generate_salt(self.salt_length), generate_salt(self.salt_length), rounds=self.rounds
            )
        return self._dummy_hash

    def get_user(self, user_id: int) -> Optional[User]:
        """Load a user profile, including the admin flag."""
        row = self.db.query_one(
            """
            SELECT u.user_id, u.email, u.firstname, u.lastname,
                   EXISTS(SELECT 1 FROM admins a WHERE a.user_id = u.user_id) AS is_admin
            FROM users u WHERE u.user_id = ?
            """,
            (user_id,),
        )
        if row is None:
            return None
        return User(
            user_id=row["user_id"],
            email=row["email"],
            firstname=row["firstname"],
            lastname=row["lastname"],
            is_admin=bool(row["is_admin"]),
        )

    def has_administrator(self) -> bool:
        row = self.db.query_one("SELECT EXISTS(SELECT 1 FROM admins)")
        return bool(row[0])


def _lookup_email(email: str) -> Optional[str]:
    """Canonical form used to store and find addresses; None if malformed."""
    try:
        return normalize_email(email)
    except ValidationError:
        return None
