"""Tests for registration and authentication."""
import pytest

from bookshelf import directory as directory_module
from bookshelf.config import Config
from bookshelf.directory import UserDirectory
from bookshelf.exceptions import ConflictError, ValidationError
from tests.conftest import PASSWORD


def test_register_stores_salted_hash(db, directory):
    """Test that registration writes user, salt and hash rows."""
    user_id = directory.register("Carol@Example.com", "Carol", "White", PASSWORD)

    user = directory.get_user(user_id)
    assert user.email == "carol@example.com"
    assert user.firstname == "Carol"
    assert user.is_admin is False

    salt = db.query_one("SELECT salt FROM salts WHERE user_id = ?", (user_id,))["salt"]
    hashed = db.query_one("SELECT password FROM passwords WHERE user_id = ?", (user_id,))["password"]
    assert len(salt) == 25
    assert PASSWORD not in hashed


def test_duplicate_email_differing_in_case(directory, alice):
    """Test case-insensitive email uniqueness."""
    with pytest.raises(ConflictError):
        directory.register("ALICE@example.com", "Alice", "Other", PASSWORD)


@pytest.mark.parametrize(
    "email, firstname, lastname, password",
    [
        ("not-an-email", "Dan", "Brown", PASSWORD),
        ("dan@example.com", "", "Brown", PASSWORD),
        ("dan@example.com", "Dan", "Br0wn", PASSWORD),
        ("dan@example.com", "Dan", "Brown", "weakpass"),
    ],
)
def test_register_rejects_invalid_input(db, directory, email, firstname, lastname, password):
    """Test that invalid input leaves no partial state."""
    with pytest.raises(ValidationError):
        directory.register(email, firstname, lastname, password)
    assert db.query_one("SELECT COUNT(*) FROM users")[0] == 0
    assert db.query_one("SELECT COUNT(*) FROM salts")[0] == 0


def test_authenticate_success(directory, alice):
    """Test a correct login returns the full profile."""
    user, ok = directory.authenticate("Alice@Example.com", PASSWORD)

    assert ok is True
    assert user.user_id == alice
    assert user.email == "alice@example.com"
    assert user.lastname == "Smith"
    assert user.is_admin is False


def test_authenticate_wrong_password_and_unknown_email_look_the_same(directory, alice):
    """Test that failures do not reveal which factor was wrong."""
    assert directory.authenticate("alice@example.com", "Wrong#123") == (None, False)
    assert directory.authenticate("nobody@example.com", PASSWORD) == (None, False)
    assert directory.authenticate("", "") == (None, False)


@pytest.mark.parametrize("email, password", [
    ("alice@example.com", "Wrong#123"),
    ("nobody@example.com", PASSWORD),
    ("not-an-email", PASSWORD),
])
def test_every_failed_login_runs_one_hash_check(monkeypatch, directory, alice, email, password):
    """Test that unknown emails cost the same bcrypt check as wrong passwords."""
    calls = []
    real_verify = directory_module.verify_hash

    def counting_verify(candidate, stored_hash):
        calls.append(stored_hash)
        return real_verify(candidate, stored_hash)

    monkeypatch.setattr(directory_module, "verify_hash", counting_verify)

    assert directory.authenticate(email, password) == (None, False)
    assert len(calls) == 1
    assert calls[0].startswith("$2b$04$")


def test_lookups_use_the_stored_email_form(directory, alice):
    """Test that existence checks and logins normalize like registration."""
    assert directory.email_exists("  Alice@EXAMPLE.com ")
    assert not directory.email_exists("not-an-email")
    user, ok = directory.authenticate("  ALICE@example.com", PASSWORD)
    assert ok and user.user_id == alice


def test_administrator_bootstrap(directory):
    """Test that only register_administrator produces an admin."""
    assert not directory.has_administrator()

    admin_id = directory.register_administrator("root@example.com", "Root", "Admin", PASSWORD)

    assert directory.has_administrator()
    user, ok = directory.authenticate("root@example.com", PASSWORD)
    assert ok and user.user_id == admin_id and user.is_admin is True


def test_credentials_deleted_with_user(db, directory, alice):
    """Test cascading delete of salts, passwords and admin rows."""
    with db.transaction() as cur:
        cur.execute("DELETE FROM users WHERE user_id = ?", (alice,))

    assert db.query_one("SELECT COUNT(*) FROM salts")[0] == 0
    assert db.query_one("SELECT COUNT(*) FROM passwords")[0] == 0
    assert directory.get_user(alice) is None


def test_defaults_come_from_config(db):
    directory = UserDirectory(db)
    assert directory.salt_length == Config.SALT_LENGTH
    assert directory.rounds == Config.BCRYPT_ROUNDS
