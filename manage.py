#!/usr/bin/env python3
"""
Maintenance commands that run against the database without starting the API.

    python manage.py setup                  # create indexes, apply ADMIN_EMAILS
    python manage.py grant-admin a@b.org    # flag extra admin accounts
"""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=True)

from common.logging.logger import log_info  # noqa: E402
from domain.users.services.user_service import UserService  # noqa: E402
from infrastructure.database.mongodb.connection import MongoDBConnection  # noqa: E402
from infrastructure.database.mongodb.mongo_client import BADGES_COLLECTION, REPORTS_COLLECTION, USERS_COLLECTION  # noqa: E402
from infrastructure.database.mongodb.repository import MongoRepository  # noqa: E402
from infrastructure.setup.initial_setup import setup_indexes_and_admins  # noqa: E402


async def run_setup():
    db = await MongoDBConnection.connect()
    try:
        await setup_indexes_and_admins(db)
    finally:
        await MongoDBConnection.disconnect()


async def run_grant_admin(emails):
    db = await MongoDBConnection.connect()
    try:
        users = UserService(
            MongoRepository(db, USERS_COLLECTION),
            MongoRepository(db, BADGES_COLLECTION),
            MongoRepository(db, REPORTS_COLLECTION),
        )
        return await users.flag_admins(emails)
    finally:
        await MongoDBConnection.disconnect()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Civic reports maintenance tasks.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("setup", help="Create MongoDB indexes and flag ADMIN_EMAILS as admins.")

    grant = commands.add_parser("grant-admin", help="Flag existing users as admins by email.")
    grant.add_argument("emails", nargs="+", help="Emails of users who already signed in once.")

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    log_info("Manage command started", extra={"command": args.command})

    if args.command == "setup":
        asyncio.run(run_setup())
        print("Indexes ensured and admin flags applied.")
    elif args.command == "grant-admin":
        flagged = asyncio.run(run_grant_admin(args.emails))
        print(f"Flagged {flagged} of {len(args.emails)} account(s) as admin.")


if __name__ == "__main__":
    main()
