"""
Database Migrator Entry Point.

Applies the SQL files in migrations/ in name order, tracking what has been
applied in the _migrations table.

Usage:
    python cmd/migrator/main.py                   # apply pending migrations
    python cmd/migrator/main.py status            # list pending migrations
    python cmd/migrator/main.py rollback <name>   # forget an applied migration
"""
import asyncio
import sys
from pathlib import Path
from typing import Optional

import asyncpg
from dotenv import load_dotenv

from config.settings import get_settings


MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


async def get_applied_migrations(conn: asyncpg.Connection) -> set[str]:
    """
    Get names of already applied migrations.

    Creates the tracking table on first use.
    """
    await conn.execute("""
        CREATE TABLE IF NOT EXISTS _migrations (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL UNIQUE,
            applied_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    rows = await conn.fetch("SELECT name FROM _migrations")
    return {row["name"] for row in rows}


def get_pending_migrations(applied: set[str], migrations_dir: Path = MIGRATIONS_DIR) -> list[Path]:
    """
    List migration files that have not been applied yet, in name order.

    Args:
        applied: Names of applied migrations.
        migrations_dir: Directory holding *.sql files.
    """
    if not migrations_dir.exists():
        return []
    return [p for p in sorted(migrations_dir.glob("*.sql")) if p.name not in applied]


async def apply_migration(conn: asyncpg.Connection, migration_path: Path) -> None:
    """Apply a single migration inside a transaction."""
    sql = migration_path.read_text(encoding="utf-8")

    async with conn.transaction():
        await conn.execute(sql)
        await conn.execute(
            "INSERT INTO _migrations (name) VALUES ($1)",
            migration_path.name,
        )

    print(f"  applied: {migration_path.name}")


async def run_migrations(database_url: str) -> None:
    """Apply all pending migrations."""
    conn = await asyncpg.connect(database_url)
    try:
        pending = get_pending_migrations(await get_applied_migrations(conn))
        if not pending:
            print("All migrations already applied")
            return

        print(f"Pending migrations: {len(pending)}")
        for migration_path in pending:
            await apply_migration(conn, migration_path)
        print("All migrations applied successfully")
    finally:
        await conn.close()


async def show_status(database_url: str) -> None:
    """Print applied and pending migrations."""
    conn = await asyncpg.connect(database_url)
    try:
        applied = await get_applied_migrations(conn)
    finally:
        await conn.close()

    print(f"Applied: {len(applied)}")
    for path in get_pending_migrations(applied):
        print(f"  pending: {path.name}")


async def rollback_migration(database_url: str, migration_name: str) -> None:
    """
    Remove a migration from the tracking table.

    Schema changes are not reverted; do that by hand.
    """
    conn = await asyncpg.connect(database_url)
    try:
        result = await conn.execute(
            "DELETE FROM _migrations WHERE name = $1",
            migration_name,
        )
    finally:
        await conn.close()

    if result == "DELETE 1":
        print(f"  rolled back: {migration_name}")
    else:
        print(f"  not found: {migration_name}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    database_url = get_settings().database_url
    args = sys.argv[1:] if argv is None else argv

    if not args:
        asyncio.run(run_migrations(database_url))
    elif args[0] == "status":
        asyncio.run(show_status(database_url))
    elif args[0] == "rollback" and len(args) == 2:
        asyncio.run(rollback_migration(database_url, args[1]))
    else:
        print(__doc__)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
