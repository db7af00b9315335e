"""Database initialization script.

Creates the tables and seeds the default categories. With ``--reset`` all
tables are dropped first, deleting every template, saved form and history
entry.

Usage:
    python -m scripts.init_db
    python -m scripts.init_db --reset
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from docgen.core.config import get_settings
from docgen.db.session import close_db, drop_all_tables, init_db


async def main(reset: bool = False) -> None:
    """Initialize (or reset) the database."""
    settings = get_settings()
    try:
        if reset:
            print("Dropping all database tables...")
            await drop_all_tables(settings)
            print("All tables dropped successfully!")

        await init_db(settings)
        print("Database initialized successfully!")
    finally:
        await close_db(settings)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args()
    asyncio.run(main(reset=args.reset))
