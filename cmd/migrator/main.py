"""
Database Migrator Entry Point.

Applies the SQL files in migrations/ that are not yet recorded in the
_migrations table.

Usage:
    python main.py                     # apply pending migrations
    python main.py rollback <name>     # forget a migration
"""
import asyncio
import sys
from pathlib import Path

import asyncpg
from dotenv import load_dotenv

from config import get_settings
from pkg.logger.logger import get_logger, setup_logging


# Load environment variables
load_dotenv()

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent.parent / "migrations"


async def get_applied_migrations(conn: asyncpg.Connection) -> set[str]:
    """
    Get list of already applied migrations.

    Args:
        conn: Database connection.

    Returns:
        Set of applied migration names.
    """
    await conn.execute("""
        CREATE TABLE IF NOT EXISTS _migrations (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL UNIQUE,
            applied_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
        )
    """)

    rows = await conn.fetch("SELECT name FROM _migrations")
    return {row["name"] for row in rows}


def pending_migrations(migration_files: list[Path], applied: set[str]) -> list[Path]:
    """Files not yet applied, in name order."""
    return sorted(
        (f for f in migration_files if f.name not in applied),
        key=lambda f: f.name,
    )


async def apply_migration(
    conn: asyncpg.Connection,
    migration_path: Path,
) -> None:
    """
    Apply a single migration in its own transaction.

    Args:
        conn: Database connection.
        migration_path: Path to migration SQL file.
    """
    migration_name = migration_path.name
    logger.info("Applying migration", migration=migration_name)

    sql = migration_path.read_text(encoding="utf-8")

    async with conn.transaction():
        await conn.execute(sql)
        await conn.execute(
            "INSERT INTO _migrations (name) VALUES ($1)",
            migration_name,
        )

    logger.info("Migration applied", migration=migration_name)


async def run_migrations(database_url: str) -> None:
    """Run all pending migrations."""
    conn = await asyncpg.connect(database_url)

    try:
        applied = await get_applied_migrations(conn)

        if not MIGRATIONS_DIR.exists():
            logger.error("Migrations directory not found", path=str(MIGRATIONS_DIR))
            return

        pending = pending_migrations(list(MIGRATIONS_DIR.glob("*.sql")), applied)
        if not pending:
            logger.info("All migrations already applied", applied=len(applied))
            return

        logger.info("Pending migrations", count=len(pending))
        for migration_path in pending:
            await apply_migration(conn, migration_path)

        logger.info("All migrations applied successfully")

    finally:
        await conn.close()


async def rollback_migration(database_url: str, migration_name: str) -> None:
    """
    Rollback a specific migration.

    Only removes the migration from the tracking table; schema changes
    must be reverted by hand.

    Args:
        database_url: Database connection string.
        migration_name: Name of migration to rollback.
    """
    conn = await asyncpg.connect(database_url)

    try:
        result = await conn.execute(
            "DELETE FROM _migrations WHERE name = $1",
            migration_name,
        )

        if result == "DELETE 1":
            logger.info("Migration rolled back", migration=migration_name)
        else:
            logger.warning("Migration not found", migration=migration_name)
    finally:
        await conn.close()


def main() -> None:
    """Main entry point."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    args = sys.argv[1:]
    if not args:
        asyncio.run(run_migrations(settings.database_url))
    elif args[0] == "rollback" and len(args) == 2:
        asyncio.run(rollback_migration(settings.database_url, args[1]))
    else:
        logger.error("Unknown command", argv=args)
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
