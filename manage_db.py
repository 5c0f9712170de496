#!/usr/bin/env python3
"""
Database management script for the invoicing engine.
Creates and drops the tables behind the SQL storage backend.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy import inspect

from invoicing.config import get_settings
from invoicing.infrastructure.db.database import create_db_engine, create_all_tables, drop_all_tables


def get_engine():
    settings = get_settings()
    return create_db_engine(settings.database_url)


def create_tables():
    """Create all tables that do not exist yet."""
    engine = get_engine()
    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}...")
    create_all_tables(engine)
    print("Done.")


def drop_tables():
    """Drop all tables - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        drop_all_tables(get_engine())
        print("Tables dropped.")
    else:
        print("Drop cancelled.")


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        engine = get_engine()
        print("Resetting database...")
        drop_all_tables(engine)
        create_all_tables(engine)
    else:
        print("Database reset cancelled.")


def show_tables():
    """List the tables present in the database."""
    for name in sorted(inspect(get_engine()).get_table_names()):
        print(name)


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create         - Create missing tables")
        print("  drop           - Drop all tables (WARNING: drops all data)")
        print("  reset          - Drop and recreate all tables (WARNING: drops all data)")
        print("  tables         - List existing tables")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_tables()
    elif command_name == "drop":
        drop_tables()
    elif command_name == "reset":
        reset_database()
    elif command_name == "tables":
        show_tables()
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
