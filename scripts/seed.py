#!/usr/bin/env python
"""
Generate seed data for development.

    python scripts/seed.py --scenario default --admin-email admin@example.com
    python scripts/seed.py --scenario demo --create-schema
"""

import argparse
import asyncio
import sys

from workforce.core.database import Base, get_engine, get_session_factory
from workforce.modules import discover_modules
from workforce.seed import seed_default, seed_demo


DEMO_PASSWORD = "Demo!Passw0rd"


async def create_schema() -> None:
    """Create any missing tables."""
    discover_modules()  # registers every module's models on Base.metadata
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def main(args: argparse.Namespace) -> None:
    """Run the seeding based on scenario."""
    if args.create_schema:
        await create_schema()

    async with get_session_factory()() as session:
        if args.scenario == "default":
            user = await seed_default(session, args.admin_email, args.admin_password)
            print(f"Super admin: {user.email}")
        elif args.scenario == "demo":
            await seed_default(session, args.admin_email, args.admin_password)
            companies = await seed_demo(session, DEMO_PASSWORD)
            print(f"Seeded {len(companies)} companies (password {DEMO_PASSWORD})")
        else:
            print(f"Unknown scenario: {args.scenario}")
            print("Available scenarios: default, demo")
            sys.exit(1)
        await session.commit()

    await get_engine().dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with demo data")
    parser.add_argument(
        "--scenario",
        "-s",
        default="default",
        help="Seed scenario to run (default, demo)",
    )
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="Admin!Passw0rd")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    asyncio.run(main(args))
