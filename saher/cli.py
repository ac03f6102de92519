"""
saher.cli
=========

Command-line front end.

Examples
--------
$ python -m saher status                  # overall status counts
$ python -m saher list leaseContract      # one category, most urgent first
$ python -m saher notify                  # records expiring within 120 days
$ python -m saher export backups/         # write SAHER_Backup_<date>.json
$ python -m saher import backup.json      # replace the store with a backup
$ python -m saher seed                    # overwrite saved data with samples
$ python -m saher serve                   # run the local HTTP API
"""

from __future__ import annotations

import argparse
import textwrap
from pathlib import Path
from typing import List, Optional

from .dashboard import overview, sort_records, unified_records
from .errors import SnapshotImportError
from .log import setup_logging
from .models import Category
from .session import StoreSession
from .settings import API_HOST, API_PORT
from .status import EXPIRY_WINDOW_DAYS, describe_remaining


def _cmd_status(session: StoreSession, args) -> int:
    data = overview(session.store).as_dict()
    print(f"Records:     {data['totalRecords']}")
    print(f"Active:      {data['activeCount']}")
    print(f"Soon:        {data['soonCount']}")
    print(f"Expired:     {data['expiredCount']}")
    print(f"Compliance:  {data['complianceRate']}%")
    print(f"Total cost:  {data['totalCost']:,}")
    return 0


def _cmd_list(session: StoreSession, args) -> int:
    category = Category.parse(args.category)
    if category is None:
        print(f"unknown category {args.category!r}; choose from: {', '.join(c.value for c in Category)}")
        return 2
    if not category.has_status:
        for rec in session.store.records(category):
            print(f"#{rec.id!s:<15} {rec.license_name} – {rec.authority}")
        return 0
    rows = [r for r in unified_records(session.store) if r.category is category]
    today = session.store.today()
    for row in sort_records(rows):
        remaining = describe_remaining(row.expiry_date, today)
        print(f"#{row.id!s:<15} {row.status.value:<13} {row.expiry_date or '-':<11} {remaining:<22} {row.name}")
    return 0


def _cmd_notify(session: StoreSession, args) -> int:
    result = session.check_notifications()
    if not result.expiring:
        print(f"Nothing expires within {EXPIRY_WINDOW_DAYS} days.")
        return 0
    for rec in result.expiring:
        print(f"#{rec.id!s:<15} {rec.status.value:<13} {', '.join(rec.dates()):<24} {rec.name}")
    return 0


def _cmd_export(session: StoreSession, args) -> int:
    filename, blob = session.export_backup()
    target = Path(args.path or ".")
    if target.is_dir():
        target = target / filename
    target.write_bytes(blob)
    print(f"✅ backup written to {target}")
    return 0


def _cmd_import(session: StoreSession, args) -> int:
    try:
        saved = session.restore_backup(Path(args.path).read_bytes())
    except (OSError, SnapshotImportError) as e:
        print(f"❌ backup rejected: {e}")
        return 1
    if not saved:
        print(f"⚠️  backup loaded but not saved: {session.last_error}")
        return 1
    print(f"✅ restored {len(session.store)} records")
    return 0


def _cmd_seed(session: StoreSession, args) -> int:
    from .seed import seed_database

    count = seed_database(session.gateway)
    print(f"✅ seeded {count} records")
    return 0


def _cmd_serve(session: StoreSession, args) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port)
    return 0


COMMANDS = {
    "status": _cmd_status,
    "list": _cmd_list,
    "notify": _cmd_notify,
    "export": _cmd_export,
    "import": _cmd_import,
    "seed": _cmd_seed,
    "serve": _cmd_serve,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m saher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            SAHER record keeper
            -------------------
            Track licenses, contracts and procedures and their expiry dates.
            """
        ),
    )
    parser.add_argument("--log-level", default=None, help="override SAHER_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="overall status counts")
    p_list = sub.add_parser("list", help="list one category")
    p_list.add_argument("category", help="category tag, e.g. commercialLicense")
    sub.add_parser("notify", help="show records expiring soon")
    p_export = sub.add_parser("export", help="write a JSON backup")
    p_export.add_argument("path", nargs="?", help="target file or directory (default: .)")
    p_import = sub.add_parser("import", help="restore a JSON backup")
    p_import.add_argument("path", help="backup file")
    sub.add_parser("seed", help="overwrite saved data with the sample dataset")
    p_serve = sub.add_parser("serve", help="run the local HTTP API")
    p_serve.add_argument("--host", default=API_HOST)
    p_serve.add_argument("--port", type=int, default=API_PORT)
    return parser


def main(argv: Optional[List[str]] = None, session: Optional[StoreSession] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    if args.command in ("seed", "serve"):
        session = session or StoreSession()
    else:
        session = session or StoreSession().open()
    return COMMANDS[args.command](session, args)
