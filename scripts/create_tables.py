#!/usr/bin/env python3
"""
Create All Database Tables Script

Creates every BookVerse table from the SQLAlchemy models. Intended for local
setups; deployed databases are managed with Alembic.

Usage:
    python scripts/create_tables.py
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from bookverse.core.database import create_tables, engine
from bookverse.core.settings import settings


def create_all_tables() -> bool:
    """Create all database tables."""
    print("Creating BookVerse database tables")
    print("=" * 40)
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Database: {settings.DATABASE_URL[:50]}...")
    print()

    try:
        # Test connection first
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            print("Database connection successful")

        create_tables()

        inspector = inspect(engine)
        table_names = sorted(inspector.get_table_names())
        print(f"Successfully created {len(table_names)} tables:")
        for table in table_names:
            unique_count = len(inspector.get_unique_constraints(table))
            print(f"  - {table} ({unique_count} unique constraints)")

        engine.dispose()
        return True

    except SQLAlchemyError as e:
        print(f"Database error: {str(e)}")
        return False


def main():
    if create_all_tables():
        print("\nAll tables created successfully!")
        sys.exit(0)
    print("\nTable creation failed!")
    sys.exit(1)


if __name__ == "__main__":
    main()
