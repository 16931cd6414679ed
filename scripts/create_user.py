#!/usr/bin/env python3
"""
Create a ShipDesk user account.

Users are normally created by the customer-facing application. This script
seeds the admin database for local development and support work.

Usage:
    python scripts/create_user.py customer@example.com --name "Jane Dealer" --dealer --balance 50
"""

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from shipdesk.auth.security import hash_password
from shipdesk.errors import Conflict
from shipdesk.storage.database import Database
from shipdesk.storage.user_store import UserStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a ShipDesk user")
    parser.add_argument("email", help="Unique email address for login")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument("--balance", type=float, default=0.0, help="Starting available balance")
    parser.add_argument("--dealer", action="store_true", help="Mark the user as a dealer")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to DATABASE_PATH)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


async def create_user(args: argparse.Namespace, password: str) -> int:
    database = Database(Path(args.db_path) if args.db_path else None)
    await database.initialize()

    store = UserStore(database)
    try:
        user = await store.create_user(
            email=args.email,
            password_hash=hash_password(password),
            name=args.name,
            available_balance=args.balance,
            is_dealer=args.dealer,
        )
    except Conflict as exc:
        logger.error(f"Error: {exc.message}")
        return 1

    logger.info(f"Created user {user.id} <{user.email}>")
    return 0


def main() -> int:
    args = parse_args()
    password = prompt_for_password()
    return asyncio.run(create_user(args, password))


if __name__ == "__main__":
    raise SystemExit(main())
