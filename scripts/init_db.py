#!/usr/bin/env python3
"""
Initialize Database
===================

Drops and recreates every table, then loads the sample dataset.

Usage:
    python scripts/init_db.py [--seed-file seed_data.yaml] [--keep-tables]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import settings
from src.infrastructure.database import (
    init_database, close_database, create_tables, drop_tables, get_session_context
)
from src.infrastructure.database.seed import load_seed_file, seed_database
from src.shared.infrastructure.logging import setup_logging


async def main(seed_file: Path, keep_tables: bool) -> None:
    setup_logging(settings.log_level, settings.environment)
    init_database()

    try:
        if not keep_tables:
            print("Dropping existing tables...")
            await drop_tables()
        await create_tables()

        data = load_seed_file(seed_file)
        async with get_session_context() as session:
            counts = await seed_database(session, data)

        print("Database initialized successfully!")
        for table, count in counts.items():
            print(f"  {table}: {count}")
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Recreate the schema and load sample data")
    parser.add_argument("--seed-file", type=Path, default=settings.seed_file_path)
    parser.add_argument("--keep-tables", action="store_true", help="Do not drop existing tables first")
    args = parser.parse_args()

    asyncio.run(main(args.seed_file, args.keep_tables))
