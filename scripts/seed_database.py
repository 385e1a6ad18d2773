#!/usr/bin/env python3
"""
Create the statuses schema and seed the demo author, statuses and banners.

Uses the same repository as the service, so the target database is taken
from BIRDHOUSE_DATABASE_URL unless --database-url is given.
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

from shared.logging import configure_logging

from service_statuses.app.storage.database import DatabaseRepository
from service_statuses.app.storage.seed import seed_demo_data


async def seed(database_url: str, *, echo: bool) -> Optional[str]:
    """Ensure the schema, seed demo data and return the new author id."""
    repository = DatabaseRepository(database_url, echo=echo)
    try:
        await repository.create_schema()
        author = await seed_demo_data(repository)
    finally:
        await repository.close()
    return author.id if author is not None else None


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the statuses database with demo data.")
    parser.add_argument(
        "--database-url",
        default=os.getenv("BIRDHOUSE_DATABASE_URL", "sqlite+aiosqlite:///./birdhouse.db"),
        help="SQLAlchemy async database URL",
    )
    parser.add_argument("--echo", action="store_true", help="Log emitted SQL")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    configure_logging("statuses", "info")
    try:
        author_id = asyncio.run(seed(args.database_url, echo=args.echo))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[seed] failed: {exc}", file=sys.stderr)
        return 1

    if author_id is None:
        print("Database already holds data, nothing seeded")
    else:
        print(f"Created user with id: {author_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
