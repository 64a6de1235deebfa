#!/usr/bin/env python3
"""
Migration script to add the sort_order column to an existing games table.
Catalogs created before display ordering existed have no such column; after
the migration every existing game has a null position and is placed the next
time the catalog is listed.
"""

import sys
import os

# Add the parent directory to the path so we can import database module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import database
from sqlalchemy import inspect, text


def check_sort_order_column_exists(engine) -> bool:
    """Check if the sort_order column already exists in the games table."""
    inspector = inspect(engine)
    columns = [col['name'] for col in inspector.get_columns('games')]
    return 'sort_order' in columns


def add_sort_order_column(engine) -> bool:
    """Add sort_order column to the games table if it doesn't exist."""
    if engine is None:
        print("Error: Database engine not available. Check your DATABASE_URL environment variable.")
        return False

    try:
        if not inspect(engine).has_table('games'):
            print("No games table yet - start the app to create it")
            return True

        if check_sort_order_column_exists(engine):
            print("✓ sort_order column already exists in games table")
            return True

        print("Adding sort_order column to games table...")

        with engine.begin() as conn:
            conn.execute(text("ALTER TABLE games ADD COLUMN sort_order INTEGER"))

        print("✓ Successfully added sort_order column to games table")
        return True

    except Exception as e:
        print(f"✗ Error adding sort_order column: {e}")
        return False


def main():
    print("=" * 60)
    print("Game Library Database Migration: Add sort_order Column")
    print("=" * 60)
    print()

    if not database.engine:
        print("✗ Error: Cannot connect to database")
        print("  Make sure the database is running and DATABASE_URL is set correctly")
        print(f"  Current DATABASE_URL: {database.DATABASE_URL}")
        return 1

    print(f"Database URL: {database.DATABASE_URL}")
    print()

    if not add_sort_order_column(database.engine):
        return 1

    print()
    print("=" * 60)
    print("Migration Complete!")
    print("=" * 60)
    print()
    print("Next steps:")
    print("1. Start the app to create any missing tables")
    print("2. List the catalog once (GET /api/games) to assign positions")
    print()

    return 0


if __name__ == '__main__':
    sys.exit(main())
