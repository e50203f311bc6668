"""Interactive prompts that repeat until the answer is valid."""
from enum import IntEnum
from typing import Optional, Type, TypeVar

from bookshelf import menus
from bookshelf.console import Console
from bookshelf.directory import UserDirectory
from bookshelf.exceptions import ValidationError
from bookshelf.validators import is_valid_isbn, is_valid_name, normalize_email, password_problems

C = TypeVar("C", bound=IntEnum)


def ask_email(console: Console, directory: Optional[UserDirectory] = None) -> str:
    """
    Ask for an email address.

    When a directory is given the address must not be registered yet.
    """
    while True:
        try:
            email = normalize_email(console.read("Enter email:"))
        except ValidationError:
            console.write("Invalid email address. Please try again.")
            continue

        if directory is not None and directory.email_exists(email):
            console.write(f"Email '{email}' already exists in the database.")
            console.write("Please enter a different email.")
            continue
        return email


def ask_name(console: Console, name_type: str) -> str:
    while True:
        name = console.read(f"Enter your {name_type}:")
        if is_valid_name(name):
            return name
        console.write("Invalid name. Please use letters, spaces and hyphens only.")


def ask_new_password(console: Console) -> str:
    """Ask for a strong password and its confirmation."""
    while True:
        password = console.read_secret("Enter a strong password:")
        problems = password_problems(password)
        if problems:
            console.write("Password does not meet safety criteria. Please try again.")
            console.write("Must include: " + ", ".join(problems) + ".")
            continue

        confirm = console.read_secret("Re-enter your password to confirm:")
        if password != confirm:
            console.write("Passwords do not match. Please try again.")
            continue
        return password


def ask_isbn(console: Console) -> str:
    while True:
        isbn = console.read("Enter ISBN (10 or 13):")
        if is_valid_isbn(isbn):
            return isbn
        console.write(f"Invalid ISBN {isbn}. Please try again.")


def ask_yes_no(console: Console, question: str) -> bool:
    while True:
        answer = console.read(f"{question} (y/n)").lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        console.write("Please answer 'y' or 'n'.")


def ask_command(console: Console, command_type: Type[C]) -> C:
    """Show a menu and return the decoded command."""
    while True:
        console.write(menus.render(command_type))
        try:
            return menus.decode(command_type, console.read("Enter your choice:"))
        except ValidationError as e:
            console.write(str(e))
