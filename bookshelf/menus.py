"""Menu commands decoded from the user's numeric choice."""
from enum import IntEnum
from typing import Type, TypeVar

from bookshelf.exceptions import ValidationError

C = TypeVar("C", bound=IntEnum)


class LoginCommand(IntEnum):
    LOGIN = 1
    REGISTER = 2
    EXIT = 3


class UserCommand(IntEnum):
    SEARCH = 1
    ADD = 2
    DELETE = 3
    MODIFY = 4
    LOGOUT = 0


# Keyed by menu type: members of different IntEnums compare equal by value
LABELS = {
    LoginCommand: {
        LoginCommand.LOGIN: "Login",
        LoginCommand.REGISTER: "Register",
        LoginCommand.EXIT: "Exit",
    },
    UserCommand: {
        UserCommand.SEARCH: "Search Your Books",
        UserCommand.ADD: "Add Book",
        UserCommand.DELETE: "Delete Book",
        UserCommand.MODIFY: "Modify Personal Information",
        UserCommand.LOGOUT: "Logout",
    },
}


def decode(command_type: Type[C], raw: str) -> C:
    """
    Turn a typed menu choice into a command.

    Args:
        command_type: LoginCommand or UserCommand
        raw: Text entered by the user

    Returns:
        The matching command

    Raises:
        ValidationError: If the text is not a number or not a menu option
    """
    try:
        number = int(raw.strip())
    except (AttributeError, ValueError):
        raise ValidationError("Invalid input. Please enter a valid number.") from None
    try:
        return command_type(number)
    except ValueError:
        raise ValidationError("Invalid menu option. Please try again.") from None


def render(command_type: Type[IntEnum]) -> str:
    """Menu text listing every command of a type."""
    labels = LABELS[command_type]
    lines = ["Choose from the options below:"]
    for command in command_type:
        lines.append(f"\t{command.value}. {labels[command]}")
    return "\n".join(lines)
