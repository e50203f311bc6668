"""Terminal input and output."""
import getpass
import sys

CLEAR_SCREEN = "\033[2J\033[H"


class Console:
    """Reads answers from and writes messages to the terminal."""

    def read(self, prompt: str) -> str:
        """Show a prompt and return the trimmed line typed by the user."""
        print(prompt)
        return input("> ").strip()

    def read_secret(self, prompt: str) -> str:
        """Like read, without echoing what is typed."""
        return getpass.getpass(f"{prompt}\n> ").strip()

    def write(self, message: str = ""):
        print(message)

    def clear(self):
        if sys.stdout.isatty():
            print(CLEAR_SCREEN, end="", flush=True)
