#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def ensure_migrations_table(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def migration_status(conn, db_manager):
    """Return (available, applied) migration file names, both sorted."""
    ensure_migrations_table(conn)
    applied = {
        row[0]
        for row in conn.execute("SELECT migration_file FROM schema_migrations")
    }
    migrations_dir = db_manager.get_migrations_dir()
    available = (
        sorted(p.name for p in migrations_dir.glob("*.sql"))
        if migrations_dir.exists()
        else []
    )
    return available, sorted(applied)


def apply_pending(db_manager):
    """Apply every migration not yet recorded.

    Returns:
        Names of the migrations that were applied.
    """
    with db_manager.connect() as conn:
        available, applied = migration_status(conn, db_manager)
        pending = [m for m in available if m not in applied]

        for migration in pending:
            sql = (db_manager.get_migrations_dir() / migration).read_text()
            try:
                conn.executescript(sql)
                conn.execute(
                    "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                    (migration,),
                )
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Error applying migration {migration}: {e}")
                raise
            logger.info(f"Applied migration: {migration}")

    return pending


def cmd_status(args, db_manager):
    """Show migration status."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    with db_manager.connect() as conn:
        available, applied = migration_status(conn, db_manager)

    if not available:
        logger.info("No migrations found.")
        return

    logger.info("Migration Status:")
    logger.info("================")
    for migration in available:
        logger.info(f"{migration}: {'APPLIED' if migration in applied else 'PENDING'}")

    pending_count = len([m for m in available if m not in applied])
    logger.info(f"\nTotal migrations: {len(available)}")
    logger.info(f"Pending: {pending_count}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    applied = apply_pending(db_manager)
    if not applied:
        logger.info("No pending migrations.")
    else:
        logger.info(f"Successfully applied {len(applied)} migration(s).")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
