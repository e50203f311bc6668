"""Interactive terminal application: setup, login and the user menu."""
import logging
from typing import Optional

from bookshelf import prompts
from bookshelf.config import Config
from bookshelf.console import Console
from bookshelf.directory import UserDirectory
from bookshelf.exceptions import LibraryError
from bookshelf.menus import LoginCommand, UserCommand
from bookshelf.models import User
from bookshelf.service import CatalogService, Session

logger = logging.getLogger(__name__)


class Application:
    """Login menu, registration and the per-user menu loop."""

    def __init__(
        self,
        console: Console,
        directory: UserDirectory,
        service: CatalogService,
        max_attempts: int = Config.MAX_LOGIN_ATTEMPTS,
    ):
        self.console = console
        self.directory = directory
        self.service = service
        self.max_attempts = max_attempts

    def run(self) -> int:
        """
        Run until the user chooses Exit.

        Returns:
            Process exit code
        """
        if not self.directory.has_administrator():
            self.console.write("No administrator found. Running initial setup...")
            if not self.setup():
                return 1

        self.console.clear()
        while True:
            command = prompts.ask_command(self.console, LoginCommand)
            if command is LoginCommand.EXIT:
                self.console.write("Exiting program...")
                return 0
            if command is LoginCommand.REGISTER:
                self.register()
                continue

            user = self.login()
            if user is not None:
                self.user_loop(Session(user=user))

    def setup(self) -> bool:
        """Create the initial administrator account."""
        self.console.write("Create the administrator account.")
        email = prompts.ask_email(self.console, self.directory)
        firstname = prompts.ask_name(self.console, "firstname")
        lastname = prompts.ask_name(self.console, "lastname")
        password = prompts.ask_new_password(self.console)
        try:
            self.directory.register_administrator(email, firstname, lastname, password)
        except LibraryError as e:
            self.console.write(f"Failed to create initial administrator account: {e}")
            return False
        self.console.write("Initial administrator account created successfully!")
        return True

    def register(self) -> Optional[int]:
        self.console.write("## Register ##")
        email = prompts.ask_email(self.console, self.directory)
        firstname = prompts.ask_name(self.console, "firstname")
        lastname = prompts.ask_name(self.console, "lastname")
        password = prompts.ask_new_password(self.console)
        try:
            user_id = self.directory.register(email, firstname, lastname, password)
        except LibraryError as e:
            self.console.write(f"Registration failed: {e}")
            return None
        self.console.write("Registration successful! You can now log in.")
        return user_id

    def login(self) -> Optional[User]:
        """
        Ask for credentials up to max_attempts times.

        Failures never say whether the email or the password was wrong.
        """
        for attempt in range(1, self.max_attempts + 1):
            email = self.console.read("Enter user email:")
            password = self.console.read_secret("Enter your password:")
            user, ok = self.directory.authenticate(email, password)
            if ok:
                self.console.write("Login successful!")
                return user
            self.console.write(f"Invalid credentials. Attempt {attempt}/{self.max_attempts}.")

        self.console.write("Too many login attempts.")
        return None

    def user_loop(self, session: Session):
        """Show the user menu until logout."""
        handlers = {
            UserCommand.SEARCH: self.service.show_collection,
            UserCommand.ADD: self.service.add_new_book_to_collection,
            UserCommand.DELETE: self.service.delete_book_from_collection,
            UserCommand.MODIFY: self.modify_personal_information,
        }
        self.console.write(self.welcome_header(session.user))
        while True:
            command = prompts.ask_command(self.console, UserCommand)
            if command is UserCommand.LOGOUT:
                self.console.write("Logging out...")
                return
            try:
                handlers[command](session)
            except LibraryError as e:
                logger.error(f"{command.name} failed: {e}")
                self.console.write(f"Operation failed: {e}")

    def modify_personal_information(self, session: Session):
        self.console.write("Changing personal information is not available yet.")

    @staticmethod
    def welcome_header(user: User) -> str:
        title = f"== Welcome back, {user.firstname}{' [admin]' if user.is_admin else ''} =="
        border = "=" * len(title)
        return f"{border}\n{title}\n{border}"
