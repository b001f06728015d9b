"""
jsondb/__main__.py
Interactive shell for a jsondb database directory.

Usage:
    python -m jsondb ./data/app              # open an existing database
    python -m jsondb ./data/app --create     # create it first if missing
    python -m jsondb ./data/app -v           # log loads and saves to stderr

Every mutating command loads the table, applies the change and saves it
straight away. Type .help inside the shell for the command list.
"""

from __future__ import annotations
import argparse
import json
import logging
import shlex
import sys

from jsondb.database import Database
from jsondb.errors import JsonDBError
from jsondb.table import Table

HELP = """
Commands:
  .tables                       List all tables
  .create NAME                  Create an empty table
  .drop NAME                    Delete a table and its metadata
  .show NAME [PAGE]             Show one page of rows
  .insert NAME JSON             Insert a JSON object (or an array of objects)
  .set NAME ID FIELD JSON       Set a field on the row with the given id
  .unset NAME ID FIELD          Remove a field from a row
  .delete NAME ID               Delete a row
  .meta NAME [KEY [JSON]]       Show all metadata, one key, or set a key
  .rename NAME NEW              Rename a table
  .help                         Show this help
  .quit                         Exit  (also: exit, quit, .exit)

Example:
  .create users
  .insert users '{"name": "Alice"}'
  .set users 1 age 30
  .show users
"""


class CommandError(Exception):
    """Bad usage of a shell command."""


# ── ASCII table formatter ─────────────────────────────────────────────

def _fmt_table(rows: list[dict]) -> str:
    if not rows:
        return "(0 rows)"
    cols: list[str] = []
    for row in rows:
        for c in row:
            if c not in cols:
                cols.append(c)
    widths = {c: len(c) for c in cols}
    str_rows = []
    for row in rows:
        str_row = {c: _fmt_value(row.get(c)) for c in cols}
        for c in cols:
            widths[c] = max(widths[c], len(str_row[c]))
        str_rows.append(str_row)

    sep = "+" + "+".join("-" * (widths[c] + 2) for c in cols) + "+"
    header = "|" + "|".join(f" {c:<{widths[c]}} " for c in cols) + "|"
    lines = [sep, header, sep]
    for str_row in str_rows:
        lines.append("|" + "|".join(f" {str_row[c]:<{widths[c]}} " for c in cols) + "|")
    lines.append(sep)
    lines.append(f"({len(rows)} row{'s' if len(rows) != 1 else ''})")
    return "\n".join(lines)


def _fmt_value(value: object) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


# ── Commands ─────────────────────────────────────────────────────────

def _parse_json(text: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CommandError(f"invalid JSON: {e.msg}") from e


def _args(parts: list[str], count: int, usage: str) -> list[str]:
    if len(parts) < count:
        raise CommandError(f"usage: {usage}")
    return parts


def _row(table: Table, row_id: str):
    try:
        row = table.find(row_id)
    except ValueError:
        raise CommandError(f"row id must be an integer, got {row_id!r}") from None
    if row is None:
        raise CommandError(f"{table.name} has no row with id {row_id}")
    return row


def _save(table: Table) -> None:
    result = table.save()
    if result is False:
        print(f"Error: {table.name} could not be saved")
    elif result is None:
        print("OK (nothing to save)")
    else:
        print("OK")


def _handle_command(line: str, db: Database, per_page: int = 10) -> None:
    try:
        parts = shlex.split(line)
    except ValueError as e:
        raise CommandError(str(e)) from e
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in (".quit", ".exit"):
        print("Bye!")
        sys.exit(0)
    elif cmd == ".help":
        print(HELP)
    elif cmd == ".tables":
        tables = db.tables()
        if tables:
            for t in tables:
                print(f"  {t}")
        else:
            print("  (no tables)")
    elif cmd == ".create":
        (name,) = _args(args, 1, ".create NAME")[:1]
        db.create_table(name)
        print("OK")
    elif cmd == ".drop":
        (name,) = _args(args, 1, ".drop NAME")[:1]
        print("OK" if db.drop_table(name) else f"{name}: no such table")
    elif cmd == ".show":
        name = _args(args, 1, ".show NAME [PAGE]")[0]
        page = 1
        if len(args) > 1:
            if not args[1].isdigit():
                raise CommandError(f"page must be a positive integer, got {args[1]!r}")
            page = int(args[1])
        pagination = db.table(name).paginate(per_page, page)
        print(_fmt_table(pagination.data["data"]))
        print(f"page {pagination.data['current_page']} of {pagination.data['last_page']}")
    elif cmd == ".insert":
        name, payload = _args(args, 2, ".insert NAME JSON")[:2]
        documents = _parse_json(payload)
        if isinstance(documents, dict):
            documents = [documents]
        if not isinstance(documents, list) or not all(isinstance(d, dict) for d in documents):
            raise CommandError("insert expects a JSON object or an array of objects")
        table = db.table(name)
        table.insert(*documents)
        _save(table)
    elif cmd == ".set":
        name, row_id, field, payload = _args(args, 4, ".set NAME ID FIELD JSON")[:4]
        table = db.table(name)
        _row(table, row_id).set(field, _parse_json(payload))
        _save(table)
    elif cmd == ".unset":
        name, row_id, field = _args(args, 3, ".unset NAME ID FIELD")[:3]
        table = db.table(name)
        _row(table, row_id).unset(field)
        _save(table)
    elif cmd == ".delete":
        name, row_id = _args(args, 2, ".delete NAME ID")[:2]
        table = db.table(name)
        _row(table, row_id).delete()
        _save(table)
    elif cmd == ".meta":
        name = _args(args, 1, ".meta NAME [KEY [JSON]]")[0]
        table = db.table(name)
        if len(args) == 1:
            for key, value in table.meta.to_dict().items():
                print(f"  {key} = {json.dumps(value, ensure_ascii=False)}")
        elif len(args) == 2:
            print(json.dumps(table.meta.get(args[1]), ensure_ascii=False))
        else:
            table.meta.set(args[1], _parse_json(args[2]))
            print("OK" if table.meta.save() is not False else "Error: metadata could not be saved")
    elif cmd == ".rename":
        name, new_name = _args(args, 2, ".rename NAME NEW")[:2]
        db.table(name).rename(new_name)
        print("OK")
    else:
        print(f"Unknown command: {cmd}  (type .help)")


# ── REPL ─────────────────────────────────────────────────────────────

def run_repl(db: Database, per_page: int = 10) -> None:
    print(f"jsondb shell  (database={db.name})  Type .help for help, exit or .quit to exit.")
    print()

    while True:
        try:
            line = input("jsondb> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("exit", "quit"):
            print("Bye!")
            sys.exit(0)

        try:
            _handle_command(stripped, db, per_page)
        except (JsonDBError, CommandError) as e:
            print(f"Error: {e}")


# ── Entry point ───────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="python -m jsondb", description="jsondb interactive shell")
    parser.add_argument("path", metavar="PATH", help="Database directory")
    parser.add_argument("--create", action="store_true",
                        help="Create the database directory if it does not exist")
    parser.add_argument("--per-page", type=int, default=10, metavar="N",
                        help="Rows per page for .show (default: 10)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log file activity to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.create and not Database.exists(args.path):
            db = Database.create(args.path)
        else:
            db = Database.connect(args.path)
    except JsonDBError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    run_repl(db, args.per_page)


if __name__ == "__main__":
    main()
