#!/usr/bin/env python3
"""
part_e_user_search.py

Look up users by exact name without building SQL from user input.

The search term is validated against a small character whitelist and then
passed to the database as a bound parameter. Credentials come from the
environment, never from source:

    DB_URL                                  full SQLAlchemy URL, or
    DB_SERVER, DB_USER, DB_PASSWORD, DB_NAME  MySQL (PyMySQL driver)
"""

from __future__ import annotations
import argparse
import logging
import os
import re
from typing import List, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine

MAX_SEARCH_LENGTH = 100
RESULT_LIMIT = 10
SEARCH_QUERY = text("SELECT name FROM users WHERE name = :name LIMIT :limit")

_SEARCH_RE = re.compile(r"^[A-Za-z0-9 _-]+$")
_CREDENTIAL_VARS = ("DB_SERVER", "DB_USER", "DB_PASSWORD", "DB_NAME")

logger = logging.getLogger("UserSearch")


class ConfigError(RuntimeError):
    """Database credentials missing from the environment."""


def validate_search_input(search: Optional[str]) -> str:
    """
    Accept 1-100 characters of letters, digits, space, '-' and '_'.

    Returns the search term unchanged; raises ValueError otherwise.
    """
    if search is None:
        raise ValueError("Search term is required")
    if not 1 <= len(search) <= MAX_SEARCH_LENGTH:
        raise ValueError(f"Invalid search length (must be 1-{MAX_SEARCH_LENGTH} characters)")
    if not _SEARCH_RE.match(search):
        raise ValueError("Invalid characters in search term")
    return search


def load_database_url(env: Mapping[str, str] = os.environ):
    """
    Database URL from the environment.

    DB_URL wins when set; otherwise all four DB_SERVER/DB_USER/DB_PASSWORD/DB_NAME
    variables are required and a mysql+pymysql URL is built from them.
    """
    if env.get("DB_URL"):
        return env["DB_URL"]
    missing = [name for name in _CREDENTIAL_VARS if not env.get(name)]
    if missing:
        raise ConfigError(
            "Database credentials not found in environment variables; "
            f"please set: {', '.join(_CREDENTIAL_VARS)} (missing: {', '.join(missing)})")
    return URL.create(
        "mysql+pymysql",
        username=env["DB_USER"],
        password=env["DB_PASSWORD"],
        host=env["DB_SERVER"],
        database=env["DB_NAME"],
    )


def query_database(search: str, engine: Optional[Engine] = None) -> List[str]:
    """
    Names of users whose name equals `search` (at most 10).

    Args:
        search: exact name to look for.
        engine: SQLAlchemy engine; built from the environment when omitted
            and disposed after the query.
    """
    validate_search_input(search)
    owns_engine = engine is None
    if owns_engine:
        engine = create_engine(load_database_url(), echo=False)
    try:
        with engine.connect() as conn:
            rows = conn.execute(SEARCH_QUERY, {"name": search, "limit": RESULT_LIMIT}).fetchall()
    finally:
        if owns_engine:
            engine.dispose()
    names = [row[0] for row in rows if row[0] is not None]
    logger.info("Search returned %d user(s)", len(names))
    return names


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Part E: parameterized user search")
    parser.add_argument("name", nargs="?", help="Exact user name (prompted when omitted)")
    args = parser.parse_args(argv)

    search = args.name
    if search is None:
        try:
            search = input("Enter user name to search: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 1

    try:
        names = query_database(search)
    except (ValueError, ConfigError) as e:
        logger.error("%s", e)
        return 1

    print("\n=== Search Results ===")
    for name in names:
        print(f"User: {name}")
    if names:
        print(f"Total: {len(names)} user(s) found")
    else:
        print(f"No users found matching '{search}'")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
