"""
Operator account seeding.

Usage:
    python -m tuning_backend.scripts.seed_operator
    python -m tuning_backend.scripts.seed_operator --email ops@example.com

Creates the database tables if missing and makes sure an operator account
exists. Does nothing when an operator is already present.

Dependencies: tuning_backend.application, tuning_backend.boundary
System role: Development bootstrap helper
"""

import asyncio
import logging
import sys

from tuning_backend.application.services import UserService
from tuning_backend.boundary.db import get_async_session_factory
from tuning_backend.boundary.db.create_tables import create_all_tables
from tuning_backend.configs import get_settings

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


async def seed(email: str) -> bool:
    await create_all_tables()
    async with get_async_session_factory()() as db:
        operator = await UserService(db).ensure_default_operator(email)
    if operator is None:
        logger.error(f"{email} is already registered as a requester; choose another --email")
        return False
    logger.info(f"Operator account: {operator.email} ({operator.id})")
    return True


def main():
    """CLI entry point."""
    email = get_settings().default_operator_email

    # Parse --email flag
    if "--email" in sys.argv:
        idx = sys.argv.index("--email")
        if idx + 1 >= len(sys.argv):
            print("Usage: python -m tuning_backend.scripts.seed_operator [--email EMAIL]")
            sys.exit(1)
        email = sys.argv[idx + 1]

    if not asyncio.run(seed(email)):
        sys.exit(1)


if __name__ == "__main__":
    main()
