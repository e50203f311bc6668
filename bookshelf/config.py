"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Database
    DB_FILE = os.getenv("LIBRARY_DB_FILE", "library.sqlite")

    # Catalog API
    OPENLIBRARY_URL = os.getenv("OPENLIBRARY_URL", "https://openlibrary.org")
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))

    # Credentials
    SALT_LENGTH = int(os.getenv("SALT_LENGTH", "25"))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
    MAX_LOGIN_ATTEMPTS = int(os.getenv("MAX_LOGIN_ATTEMPTS", "3"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

    @property
    def BOOKS_API_URL(self):
        """Build the Open Library Books API endpoint."""
        return f"{self.OPENLIBRARY_URL.rstrip('/')}/api/books"
