"""Create a console admin account with a bcrypt-hashed password."""

import argparse
import asyncio
import getpass
import sys

from loyalty.config import Config
from loyalty.core.core import Core
from loyalty.errors import UserError
from loyalty.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a loyalty console admin")
    parser.add_argument("username", help="Login name for the admin")
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


async def create_admin(config: Config, username: str, password: str) -> int:
    core = Core(config)
    async with core.lifespan():
        try:
            admin = await core.services.admin.create_admin(username, password)
        except UserError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    print(f"Created admin '{admin.username}'")
    return 0


def main() -> int:
    args = parse_args()
    config = Config()
    setup_logging(config.debug)
    password = prompt_for_password()
    return asyncio.run(create_admin(config, args.username, password))


if __name__ == "__main__":
    raise SystemExit(main())
