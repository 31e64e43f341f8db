#!/usr/bin/env python3
"""
Stock ledger management CLI.

Usage:
    python manage.py migrate                 Apply pending schema migrations
    python manage.py status                  Show schema version and pending migrations
    python manage.py verify-db               Run SQLite and schema integrity checks
    python manage.py verify-ledger [--branch N]
                                             Compare ledger entries with their movements
    python manage.py serve                   Start the API server
"""

import argparse
import asyncio
import sys
from pathlib import Path

from stockledger.config import configure_logging, get_settings


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.db_path) if args.db_path else get_settings().storage.db_path


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from stockledger.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(
        initialize_database(_db_path(args), create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        mark = "OK" if result.success else "FAILED"
        print(f"  [{mark}] {result.version} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         {result.error}")
    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Show the schema version."""
    from stockledger.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status(_db_path(args)))
    if not status["exists"]:
        print(f"Database not found: {_db_path(args)}")
    print(f"Current version: {status['current_version'] or 'none'}")
    print(f"Applied: {', '.join(status['applied_migrations']) or 'none'}")
    print(f"Pending: {', '.join(status['pending_migrations']) or 'none'}")


def cmd_verify_db(args: argparse.Namespace) -> None:
    """Run the schema integrity checks."""
    from stockledger.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity(_db_path(args)))
    failed = False
    for check in checks:
        extra = {k: v for k, v in check.items() if k not in ("check", "status")}
        print(f"  [{check['status']}] {check['check']} {extra or ''}")
        failed = failed or check["status"] != "PASS"
    if failed:
        sys.exit(1)


async def _verify_ledger(db_path: Path, branch_id: int | None):
    from stockledger.application.dto.requests import VerifyLedgerRequest
    from stockledger.application.use_cases import VerifyLedgerUseCase
    from stockledger.infrastructure.storage.sqlite import ConnectionPool, SQLiteInventoryStore

    settings = get_settings()
    pool = ConnectionPool(db_path, pool_size=1, busy_timeout=settings.storage.busy_timeout)
    await pool.initialize()
    try:
        use_case = VerifyLedgerUseCase(inventory_store=SQLiteInventoryStore(pool))
        return await use_case.execute(VerifyLedgerRequest(branch_id=branch_id))
    finally:
        await pool.close()


def cmd_verify_ledger(args: argparse.Namespace) -> None:
    """Fold every entry's movements and report drift."""
    db_path = _db_path(args)
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        sys.exit(1)

    result = asyncio.run(_verify_ledger(db_path, args.branch))
    print(f"Checked {result.checked_entries} ledger entries.")
    if result.ok:
        print("Ledger is consistent with its movements.")
        return

    for d in result.discrepancies:
        print(
            f"  product {d.product_id} @ branch {d.branch_id}: "
            f"quantity {d.ledger_quantity} != {d.folded_quantity}, "
            f"average cost {d.ledger_average_cost} != {d.folded_average_cost} "
            f"({d.movement_count} movements)"
        )
    sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:create_app",
        factory=True,
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stock ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--db-path", help="Database file (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show schema version")
    p_status.set_defaults(func=cmd_status)

    # verify-db
    p_verify_db = sub.add_parser("verify-db", help="Run schema integrity checks")
    p_verify_db.set_defaults(func=cmd_verify_db)

    # verify-ledger
    p_verify = sub.add_parser("verify-ledger", help="Compare ledger entries with movements")
    p_verify.add_argument("--branch", type=int, default=None, help="Only check one branch")
    p_verify.set_defaults(func=cmd_verify_ledger)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default from settings)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default from settings)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
