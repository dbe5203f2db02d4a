# MIT License © 2025 Motohiro Suzuki
"""
User lookup demo: the sole consumer of the driver layer.

- initialize the driver, open users.db, seed a small users table
- read a username from stdin, build the lookup query, execute it

The username is substituted into the query template as-is. Input such as
  ' OR 1=1 --
changes the meaning of the statement; the driver forwards whatever it is
given.

How to run:
  python3 run_lookup.py
  python3 run_lookup.py --db /tmp/users.db --library /opt/sqlite/lib/libsqlite3.so
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from diagnostics.logging_config import setup_logging
from drv_core.driver import initialize
from drv_core.policy import DriverPolicy

LIBRARY_ENV = "DRV_SQLITE_LIBRARY"

SCHEMA = (
    "CREATE TABLE IF NOT EXISTS users ("
    "  id INTEGER PRIMARY KEY,"
    "  name TEXT NOT NULL,"
    "  role TEXT NOT NULL"
    ");"
)
SEED = (
    "INSERT OR IGNORE INTO users VALUES (1, 'alice', 'admin');",
    "INSERT OR IGNORE INTO users VALUES (2, 'bob',   'user');",
)
LOOKUP = "SELECT * FROM users WHERE name = '%s';"


def make_policy(library: str | None) -> DriverPolicy:
    policy = DriverPolicy()
    library = library or os.environ.get(LIBRARY_ENV, "").strip()
    if library:
        policy = policy.with_library_first(library)
    return policy


def run(db_path: str, policy: DriverPolicy) -> int:
    driver = initialize(policy)

    conn = driver.open(db_path)
    if conn is None:
        return 1

    try:
        driver.execute(conn, SCHEMA)
        for stmt in SEED:
            driver.execute(conn, stmt)

        username = driver.read_line("Enter username to look up: ", policy.input_buffer)
        if username is None:
            print("Failed to read input", file=sys.stderr)
            return 1

        query = driver.format_string(LOOKUP, username, policy.format_buffer)
        print(f"Running query: {query}")
        driver.execute(conn, query)
    finally:
        driver.close(conn)
    return 0


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", default="users.db", help="database file to open/create")
    ap.add_argument("--library", default=None, help=f"sqlite3 library tried first (or ${LIBRARY_ENV})")
    ap.add_argument("--verbose", action="store_true", help="debug logging")
    args = ap.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    raise SystemExit(run(args.db, make_policy(args.library)))


if __name__ == "__main__":
    main()
