#!/usr/bin/env python3
"""Personal Library Manager CLI."""
import argparse
import functools
import logging
import sys
from contextlib import ExitStack

from bookshelf.app import Application
from bookshelf.async_client import lookup_blocking
from bookshelf.catalog import BookCatalog
from bookshelf.client import OpenLibraryClient
from bookshelf.config import Config
from bookshelf.console import Console
from bookshelf.database import Database
from bookshelf.directory import UserDirectory
from bookshelf.display import format_record, record_to_json
from bookshelf.exceptions import LibraryError, ValidationError
from bookshelf.service import CatalogService

logger = logging.getLogger(__name__)


def setup_logging(config: Config, verbose: bool = False):
    """Configure root logging from the config level or --verbose."""
    logging.basicConfig(
        level=logging.INFO if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def setup_database(config: Config) -> Database:
    """Open the database and make sure the schema exists."""
    db = Database(config.DB_FILE)
    db.init_schema()
    return db


def build_lookup(config: Config, use_async: bool, stack: ExitStack):
    """Pick the sync (requests) or async (httpx) catalog client."""
    if use_async:
        return functools.partial(
            lookup_blocking,
            base_url=config.BOOKS_API_URL,
            timeout=config.DEFAULT_TIMEOUT
        )
    client = stack.enter_context(
        OpenLibraryClient(base_url=config.BOOKS_API_URL, timeout=config.DEFAULT_TIMEOUT)
    )
    return client.lookup


def build_directory(db: Database, config: Config) -> UserDirectory:
    return UserDirectory(db, salt_length=config.SALT_LENGTH, rounds=config.BCRYPT_ROUNDS)


def run_interactive(args, config: Config) -> int:
    """Run the login and collection menus."""
    console = Console()
    with ExitStack() as stack:
        db = stack.enter_context(setup_database(config))
        lookup = build_lookup(config, getattr(args, "use_async", False), stack)
        service = CatalogService(BookCatalog(db), lookup, console)
        app = Application(
            console,
            build_directory(db, config),
            service,
            max_attempts=config.MAX_LOGIN_ATTEMPTS
        )
        return app.run()


def init_library(args, config: Config) -> int:
    """Create the schema and the first administrator."""
    console = Console()
    with setup_database(config) as db:
        directory = build_directory(db, config)
        console.write(f"Your database file is:\n\t{config.DB_FILE}")
        if directory.has_administrator():
            console.write("Library is already initialised.")
            return 0
        app = Application(console, directory, service=None)
        return 0 if app.setup() else 1


def lookup_isbn(args, config: Config) -> int:
    """Print the catalog record for one ISBN."""
    with ExitStack() as stack:
        lookup = build_lookup(config, args.use_async, stack)
        try:
            record = lookup(args.isbn)
        except ValidationError as e:
            print(e)
            return 1
        except LibraryError as e:
            print(f"Error fetching book information: {e}")
            return 1

    if args.format == "json":
        print(record_to_json(record))
    else:
        print(format_record(record))
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Personal Library Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # First run: create the database and the administrator
  %(prog)s init

  # Log in and manage your collection
  %(prog)s run --db my_library.sqlite

  # Look up a book without saving it
  %(prog)s lookup 978-0-306-40615-7 --format json
        """
    )
    parser.add_argument("--db", help="SQLite database file (default: $LIBRARY_DB_FILE or library.sqlite)")
    parser.add_argument("--verbose", action="store_true", help="Show info-level logs")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    run_parser = subparsers.add_parser("run", help="Start the interactive menu (default)")
    run_parser.add_argument("--async", dest="use_async", action="store_true", help="Use async client")

    subparsers.add_parser("init", help="Create the database and the administrator account")

    lookup_parser = subparsers.add_parser("lookup", help="Show catalog data for an ISBN")
    lookup_parser.add_argument("isbn", help="ISBN-10 or ISBN-13")
    lookup_parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")
    lookup_parser.add_argument("--async", dest="use_async", action="store_true", help="Use async client")

    args = parser.parse_args()

    config = Config()
    if args.db:
        config.DB_FILE = args.db
    setup_logging(config, args.verbose)

    try:
        if args.command == "init":
            code = init_library(args, config)
        elif args.command == "lookup":
            code = lookup_isbn(args, config)
        else:
            code = run_interactive(args, config)
    except (KeyboardInterrupt, EOFError):
        print("\nExiting program...")
        code = 0
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
