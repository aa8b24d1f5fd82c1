# portfolio/scripts/portfolio_admin.py
"""Admin chores from the command line.

    python -m portfolio.scripts.portfolio_admin export [DIR]
    python -m portfolio.scripts.portfolio_admin import FILE
    python -m portfolio.scripts.portfolio_admin reset
    python -m portfolio.scripts.portfolio_admin migrate-resumes
    python -m portfolio.scripts.portfolio_admin sync-cloud

Runs against the database directly unless PORTFOLIO_ADMIN_MODE=api, in which
case ADMIN_PASSWORD is used to log in to the HTTP API first.
"""
import argparse
import asyncio
import logging
import os
import sys

from portfolio.client.bootstrap import Managers, connect_api, connect_database

log = logging.getLogger("portfolio.admin")


async def _managers() -> Managers:
    if os.getenv("PORTFOLIO_ADMIN_MODE", "db").lower() != "api":
        return connect_database()
    m = connect_api()
    if not m.session.is_authenticated():
        password = os.getenv("ADMIN_PASSWORD", "")
        if not await m.session.login(m.api, password):
            raise SystemExit("Login failed (set ADMIN_PASSWORD)")
    return m


async def run(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="portfolio-admin")
    sub = parser.add_subparsers(dest="command", required=True)
    p_exp = sub.add_parser("export")
    p_exp.add_argument("directory", nargs="?", default=".")
    p_imp = sub.add_parser("import")
    p_imp.add_argument("file")
    sub.add_parser("reset")
    sub.add_parser("migrate-resumes")
    sub.add_parser("sync-cloud")
    args = parser.parse_args(argv)

    m = await _managers()
    try:
        if args.command == "export":
            path = await m.data.export_data(args.directory)
            print(f"✅ Exported to {path}" if path else "❌ Export failed")
            return 0 if path else 1
        if args.command == "import":
            ok = await m.data.import_data(args.file)
            print("✅ Imported" if ok else "❌ Import failed")
            return 0 if ok else 1
        if args.command == "reset":
            ok = await m.data.reset_to_defaults()
            print("✅ Reset to defaults" if ok else "❌ Reset failed")
            return 0 if ok else 1
        if args.command == "migrate-resumes":
            result = await m.resumes.migrate_to_cloud()
            print(f"✅ Migrated {result.success_count}, failed {result.failed_count}")
            return 0 if result.failed_count == 0 else 1
        if args.command == "sync-cloud":
            imported = await m.resumes.sync_cloud_files()
            print(f"✅ Imported {len(imported)} cloud files")
            return 0
    finally:
        await m.aclose()
    return 2


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
