#!/usr/bin/env python3
"""
part_a_library_system.py

Small library management system backed by a single SQLite database file.

Books, members, loans and returns live in four tables. Loans and returns are
multi-step operations (insert ledger row, adjust book availability, record
overdue penalties) that run inside one transaction so a failure at any step
leaves no partial state behind. Reports are returned as pandas DataFrames and
can be exported to CSV files and bar charts.

Typical usage:
    python part_a_library_system.py --db database/library.db
"""

from __future__ import annotations
import argparse
import datetime
import logging
import math
import os
import pathlib
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

import date_utils

# Configuration
DEFAULT_LOAN_DAYS = 14
SUSPENSION_MULTIPLIER = 2
DEFAULT_DB_PATH = "database/library.db"
POPULAR_BOOKS_LIMIT = 10

# Logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("LibrarySystem")


# ---------------- Errors ----------------
class LibraryError(Exception):
    """Base exception for library system errors."""


class NotFoundError(LibraryError):
    """Requested book, member or loan does not exist."""


class InvalidParameterError(LibraryError, ValueError):
    """Input rejected before touching the database."""


class ConstraintViolationError(LibraryError):
    """Operation would break a database or business constraint."""


class LoanRuleError(ConstraintViolationError):
    """Loan/return refused by the lending rules."""


# ---------------- Records ----------------
@dataclass
class Book:
    book_id: int
    title: str
    author: str = ""
    publisher: str = ""
    publication_year: Optional[int] = None
    isbn: str = ""
    genre: str = ""
    quantity: int = 1
    available: int = 1


@dataclass
class Member:
    """
    A registered member.

    `overdue_days` is computed at lookup time from unreturned loans;
    `penalty_days` is the accumulated suspension recorded on overdue returns.
    """
    member_id: int
    name: str
    phone: str = ""
    address: str = ""
    registration_date: str = ""
    penalty_days: int = 0
    suspended_until: Optional[str] = None
    overdue_days: int = 0

    @property
    def suspension_days(self) -> int:
        return calculate_suspension_days(self.overdue_days)


@dataclass
class Loan:
    loan_id: int
    book_id: int
    member_id: int
    loan_date: str
    due_date: str
    is_returned: bool = False


@dataclass
class Return:
    return_id: int
    loan_id: int
    return_date: str
    overdue_days: int = 0

    @property
    def suspension_days(self) -> int:
        return calculate_suspension_days(self.overdue_days)


def calculate_suspension_days(overdue_days: int) -> int:
    """Borrowing suspension earned by returning a book `overdue_days` late."""
    return max(0, int(overdue_days)) * SUSPENSION_MULTIPLIER


# ---------------- Schema ----------------
SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS Books (
        book_id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        author TEXT,
        publisher TEXT,
        publication_year INTEGER,
        isbn TEXT UNIQUE,
        genre TEXT,
        quantity INTEGER DEFAULT 1,
        available INTEGER DEFAULT 1,
        CHECK (available >= 0 AND available <= quantity)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Members (
        member_id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        phone TEXT,
        address TEXT,
        registration_date TEXT,
        penalty_days INTEGER DEFAULT 0,
        suspended_until TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Loans (
        loan_id INTEGER PRIMARY KEY AUTOINCREMENT,
        book_id INTEGER NOT NULL,
        member_id INTEGER NOT NULL,
        loan_date TEXT NOT NULL,
        due_date TEXT NOT NULL,
        is_returned INTEGER DEFAULT 0,
        FOREIGN KEY (book_id) REFERENCES Books(book_id),
        FOREIGN KEY (member_id) REFERENCES Members(member_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Returns (
        return_id INTEGER PRIMARY KEY AUTOINCREMENT,
        loan_id INTEGER NOT NULL UNIQUE,
        return_date TEXT NOT NULL,
        overdue_days INTEGER DEFAULT 0,
        FOREIGN KEY (loan_id) REFERENCES Loans(loan_id)
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_books_title ON Books(title)",
    "CREATE INDEX IF NOT EXISTS idx_books_author ON Books(author)",
    "CREATE INDEX IF NOT EXISTS idx_books_isbn ON Books(isbn)",
    "CREATE INDEX IF NOT EXISTS idx_members_name ON Members(name)",
    "CREATE INDEX IF NOT EXISTS idx_loans_book_id ON Loans(book_id)",
    "CREATE INDEX IF NOT EXISTS idx_loans_member_id ON Loans(member_id)",
    "CREATE INDEX IF NOT EXISTS idx_loans_is_returned ON Loans(is_returned)",
    "CREATE INDEX IF NOT EXISTS idx_returns_loan_id ON Returns(loan_id)",
]

# Columns that UpdateBuilder may touch, per table.
UPDATABLE_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "Books": ("title", "author", "publisher", "publication_year", "genre", "quantity", "available"),
    "Members": ("name", "phone", "address", "penalty_days", "suspended_until"),
}


class LibraryDatabase:
    """
    Owns the SQLite connection for one library database file.

    The connection runs in autocommit mode; multi-statement work goes through
    `transaction()`, which issues BEGIN/COMMIT itself and rolls back on any
    exception.
    """

    def __init__(self, path: str = DEFAULT_DB_PATH):
        self.path = str(path)
        self.conn: Optional[sqlite3.Connection] = None

    # ---------------- Lifecycle ----------------
    def open(self) -> "LibraryDatabase":
        """
        Open the connection, enable foreign keys and create tables and indexes.

        Returns self so that `LibraryDatabase(path).open()` can be chained.
        """
        if self.conn is not None:
            return self
        if self.path != ":memory:":
            pathlib.Path(self.path).resolve().parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.path, isolation_level=None)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.create_tables()
        self.create_indexes()
        logger.info("Database ready: %s", self.path)
        return self

    def close(self) -> None:
        if self.conn is None:
            return
        self.conn.close()
        self.conn = None
        logger.info("Database closed: %s", self.path)

    def __enter__(self) -> "LibraryDatabase":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def create_tables(self) -> None:
        for ddl in SCHEMA:
            self.execute(ddl)
        # databases created before suspensions were tracked
        self._ensure_column("Members", "suspended_until", "TEXT")
        self._ensure_column("Members", "penalty_days", "INTEGER DEFAULT 0")

    def create_indexes(self) -> None:
        for ddl in INDEXES:
            self.execute(ddl)

    def _ensure_column(self, table: str, column: str, decl: str) -> None:
        cols = {row["name"] for row in self.query(f"PRAGMA table_info({table})")}
        if column not in cols:
            self.execute(f"ALTER TABLE {table} ADD COLUMN {column} {decl}")
            logger.info("Added missing column %s.%s", table, column)

    # ---------------- Statements ----------------
    def _require_conn(self) -> sqlite3.Connection:
        if self.conn is None:
            raise LibraryError("Database not initialized")
        return self.conn

    def execute(self, sql: str, params: Sequence = ()) -> sqlite3.Cursor:
        """
        Execute one parameterized statement.

        sqlite3.IntegrityError is re-raised as ConstraintViolationError.
        """
        conn = self._require_conn()
        try:
            return conn.execute(sql, tuple(params))
        except sqlite3.IntegrityError as e:
            raise ConstraintViolationError(str(e)) from e

    def query(self, sql: str, params: Sequence = ()) -> List[sqlite3.Row]:
        return self.execute(sql, params).fetchall()

    def query_one(self, sql: str, params: Sequence = ()) -> Optional[sqlite3.Row]:
        return self.execute(sql, params).fetchone()

    def read_frame(self, sql: str, params: Sequence = ()) -> pd.DataFrame:
        return pd.read_sql_query(sql, self._require_conn(), params=list(params))

    @contextmanager
    def transaction(self) -> Iterator["LibraryDatabase"]:
        """
        Run the enclosed statements atomically.

        Nested use joins the outer transaction.
        """
        conn = self._require_conn()
        if conn.in_transaction:
            yield self
            return
        conn.execute("BEGIN")
        try:
            yield self
        except BaseException:
            conn.execute("ROLLBACK")
            logger.warning("Transaction rolled back")
            raise
        conn.execute("COMMIT")


class UpdateBuilder:
    """
    Builds a parameterized `UPDATE <table> SET ... WHERE <key> = ?` statement.

    Only whitelisted columns are accepted and `None` values are skipped, so
    callers can pass optional fields straight through:

        sql, params = (UpdateBuilder("Books", "book_id")
                       .set("title", title).set("genre", None)
                       .build(book_id))
    """

    def __init__(self, table: str, key_column: str):
        if table not in UPDATABLE_COLUMNS:
            raise InvalidParameterError(f"Table not updatable: {table}")
        self.table = table
        self.key_column = key_column
        self._assignments: List[Tuple[str, object]] = []

    def set(self, column: str, value) -> "UpdateBuilder":
        if column not in UPDATABLE_COLUMNS[self.table]:
            raise InvalidParameterError(f"Column not updatable: {self.table}.{column}")
        if value is not None:
            self._assignments.append((column, value))
        return self

    def is_empty(self) -> bool:
        return not self._assignments

    def build(self, key) -> Tuple[str, List]:
        if self.is_empty():
            raise InvalidParameterError("No fields to update")
        clause = ", ".join(f"{col} = ?" for col, _ in self._assignments)
        params = [val for _, val in self._assignments] + [key]
        return f"UPDATE {self.table} SET {clause} WHERE {self.key_column} = ?", params


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class LibrarySystem:
    """
    LibrarySystem manages books, members, loans and returns stored in a LibraryDatabase.

    It provides CRUD operations for the catalog and member registry, the loan
    lifecycle (loan, return, overdue penalties) and read-only reports. The
    current date comes from the `today` callable so date-dependent rules can
    be exercised deterministically.
    """

    def __init__(self, db: LibraryDatabase, loan_days: int = DEFAULT_LOAN_DAYS,
                 today: Optional[Callable[[], datetime.date]] = None):
        """
        Initialize the LibrarySystem.

        Args:
            db: database handle; opened here when not already open.
            loan_days: default number of days for a loan.
            today: callable returning the current date (defaults to date.today).
        """
        self.db = db.open()
        self.loan_days = int(loan_days) if int(loan_days) > 0 else DEFAULT_LOAN_DAYS
        self._today = today or datetime.date.today

    def today(self) -> str:
        return date_utils.format_date(self._today())

    # ---------------- Books ----------------
    def add_book(self, title: str, author: str = "", publisher: str = "",
                 publication_year: Optional[int] = None, isbn: str = "",
                 genre: str = "", quantity: int = 1) -> int:
        """
        Add a new book to the catalog with every copy available.

        Returns the new book id. Raises InvalidParameterError for a missing
        title/ISBN or negative quantity, ConstraintViolationError for a
        duplicate ISBN.
        """
        title = (title or "").strip()
        isbn = (isbn or "").strip()
        if not title or not isbn:
            raise InvalidParameterError("Title and ISBN are required")
        quantity = int(quantity)
        if quantity < 0:
            raise InvalidParameterError("Quantity must not be negative")
        try:
            cur = self.db.execute(
                "INSERT INTO Books (title, author, publisher, publication_year, isbn, genre, quantity, available) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (title, author or "", publisher or "", publication_year, isbn, genre or "", quantity, quantity))
        except ConstraintViolationError as e:
            if "UNIQUE" in str(e):
                raise ConstraintViolationError(f"Duplicate ISBN: {isbn}") from e
            raise
        logger.info("Added book %s (%s)", cur.lastrowid, isbn)
        return cur.lastrowid

    def get_book(self, book_id: int) -> Book:
        row = self.db.query_one("SELECT * FROM Books WHERE book_id = ?", (book_id,))
        if row is None:
            logger.debug("Book not found: %s", book_id)
            raise NotFoundError(f"Book not found (ID: {book_id})")
        return Book(**dict(row))

    def _find_books(self, where: str, params: Sequence) -> List[Book]:
        rows = self.db.query(f"SELECT * FROM Books {where} ORDER BY book_id", params)
        return [Book(**dict(r)) for r in rows]

    def list_books(self) -> List[Book]:
        return self._find_books("", ())

    def search_books(self, keyword: str) -> List[Book]:
        """
        Search books by title, author or ISBN using a case-insensitive substring match.

        Returns an empty list for a blank keyword.
        """
        kw = (keyword or "").strip()
        if kw == "":
            return []
        pattern = f"%{_escape_like(kw)}%"
        return self._find_books(
            "WHERE title LIKE ? ESCAPE '\\' OR author LIKE ? ESCAPE '\\' OR isbn LIKE ? ESCAPE '\\'",
            (pattern, pattern, pattern))

    def search_books_by_genre(self, genre: str) -> List[Book]:
        g = (genre or "").strip()
        if g == "":
            return []
        return self._find_books("WHERE genre LIKE ? ESCAPE '\\'", (f"%{_escape_like(g)}%",))

    def search_books_by_author(self, author: str) -> List[Book]:
        a = (author or "").strip()
        if a == "":
            return []
        return self._find_books("WHERE author LIKE ? ESCAPE '\\'", (f"%{_escape_like(a)}%",))

    def update_book(self, book_id: int, title: Optional[str] = None, author: Optional[str] = None,
                    publisher: Optional[str] = None, publication_year: Optional[int] = None,
                    genre: Optional[str] = None, quantity: Optional[int] = None) -> Book:
        """
        Update the given (non-None) fields of a book.

        Changing `quantity` shifts `available` by the same amount; the new
        quantity may not be lower than the number of copies currently on loan.
        Returns the updated book.
        """
        if title is not None:
            title = title.strip()
            if not title:
                raise InvalidParameterError("Title must not be empty")
        builder = (UpdateBuilder("Books", "book_id")
                   .set("title", title).set("author", author).set("publisher", publisher)
                   .set("publication_year", publication_year).set("genre", genre))
        with self.db.transaction():
            book = self.get_book(book_id)
            if quantity is not None:
                quantity = int(quantity)
                on_loan = book.quantity - book.available
                if quantity < on_loan:
                    raise ConstraintViolationError(
                        f"Quantity {quantity} is below the {on_loan} copies currently on loan")
                builder.set("quantity", quantity).set("available", quantity - on_loan)
            sql, params = builder.build(book_id)
            self.db.execute(sql, params)
        logger.info("Updated book %s", book_id)
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> None:
        """Delete a book that has never been loaned."""
        with self.db.transaction():
            self.get_book(book_id)
            active = self.db.query_one(
                "SELECT COUNT(*) AS n FROM Loans WHERE book_id = ? AND is_returned = 0", (book_id,))["n"]
            if active:
                raise ConstraintViolationError(f"Book {book_id} has {active} active loan(s)")
            history = self.db.query_one("SELECT COUNT(*) AS n FROM Loans WHERE book_id = ?", (book_id,))["n"]
            if history:
                raise ConstraintViolationError(f"Cannot delete book {book_id} with loan history")
            self.db.execute("DELETE FROM Books WHERE book_id = ?", (book_id,))
        logger.info("Deleted book %s", book_id)

    def check_book_availability(self, book_id: int) -> bool:
        return self.get_book(book_id).available > 0

    def update_book_availability(self, book_id: int, change: int) -> int:
        """
        Shift the available count of a book by `change`.

        The update is guarded so that 0 <= available <= quantity always holds.
        Returns the new available count.
        """
        cur = self.db.execute(
            "UPDATE Books SET available = available + ? "
            "WHERE book_id = ? AND available + ? BETWEEN 0 AND quantity",
            (change, book_id, change))
        if cur.rowcount == 0:
            book = self.get_book(book_id)
            raise ConstraintViolationError(
                f"Availability of book {book_id} would leave range 0..{book.quantity} "
                f"(available {book.available}, change {change:+d})")
        return self.get_book(book_id).available

    # ---------------- Members ----------------
    def add_member(self, name: str, phone: str = "", address: str = "") -> int:
        """Register a member; the registration date is today. Returns the member id."""
        name = (name or "").strip()
        if not name:
            raise InvalidParameterError("Member name is required")
        cur = self.db.execute(
            "INSERT INTO Members (name, phone, address, registration_date) VALUES (?, ?, ?, ?)",
            (name, phone or "", address or "", self.today()))
        logger.info("Registered member %s", cur.lastrowid)
        return cur.lastrowid

    def _member_from_row(self, row: sqlite3.Row) -> Member:
        member = Member(**dict(row))
        member.penalty_days = member.penalty_days or 0
        member.overdue_days = self.check_member_overdue(member.member_id)
        return member

    def get_member(self, member_id: int) -> Member:
        row = self.db.query_one("SELECT * FROM Members WHERE member_id = ?", (member_id,))
        if row is None:
            logger.debug("Member not found: %s", member_id)
            raise NotFoundError(f"Member not found (ID: {member_id})")
        return self._member_from_row(row)

    def search_members_by_name(self, name: str) -> List[Member]:
        n = (name or "").strip()
        if n == "":
            return []
        rows = self.db.query("SELECT * FROM Members WHERE name LIKE ? ESCAPE '\\' ORDER BY member_id",
                             (f"%{_escape_like(n)}%",))
        return [self._member_from_row(r) for r in rows]

    def list_members(self) -> List[Member]:
        rows = self.db.query("SELECT * FROM Members ORDER BY member_id")
        return [self._member_from_row(r) for r in rows]

    def member_count(self) -> int:
        return self.db.query_one("SELECT COUNT(*) AS n FROM Members")["n"]

    def update_member(self, member_id: int, name: Optional[str] = None, phone: Optional[str] = None,
                      address: Optional[str] = None) -> Member:
        if name is not None and not name.strip():
            raise InvalidParameterError("Member name must not be empty")
        sql, params = (UpdateBuilder("Members", "member_id")
                       .set("name", name).set("phone", phone).set("address", address)
                       .build(member_id))
        with self.db.transaction():
            self.get_member(member_id)
            self.db.execute(sql, params)
        logger.info("Updated member %s", member_id)
        return self.get_member(member_id)

    def delete_member(self, member_id: int) -> None:
        """Delete a member that has no loan history."""
        with self.db.transaction():
            self.get_member(member_id)
            loans = self.db.query_one("SELECT COUNT(*) AS n FROM Loans WHERE member_id = ?", (member_id,))["n"]
            if loans:
                raise ConstraintViolationError(f"Cannot delete member {member_id} with loan history")
            self.db.execute("DELETE FROM Members WHERE member_id = ?", (member_id,))
        logger.info("Deleted member %s", member_id)

    def check_member_overdue(self, member_id: int) -> int:
        """
        Largest number of days any unreturned loan of the member is past due.

        Returns 0 when nothing is overdue.
        """
        row = self.db.query_one(
            "SELECT MAX(CAST(julianday(?) - julianday(due_date) AS INTEGER)) AS days "
            "FROM Loans WHERE member_id = ? AND is_returned = 0",
            (self.today(), member_id))
        days = row["days"] if row is not None else None
        return int(days) if days is not None and days > 0 else 0

    def is_member_suspended(self, member: Member) -> bool:
        return bool(member.suspended_until) and self.today() < member.suspended_until

    def can_member_borrow(self, member_id: int) -> bool:
        """
        True when the member has no overdue loans and no running suspension.
        """
        member = self.get_member(member_id)
        return member.overdue_days == 0 and not self.is_member_suspended(member)

    def _record_penalty(self, member_id: int, suspension_days: int, from_date: str) -> None:
        member = self.get_member(member_id)
        until = date_utils.add_days(from_date, suspension_days)
        if member.suspended_until and member.suspended_until > until:
            until = member.suspended_until
        sql, params = (UpdateBuilder("Members", "member_id")
                       .set("penalty_days", member.penalty_days + suspension_days)
                       .set("suspended_until", until)
                       .build(member_id))
        self.db.execute(sql, params)
        logger.warning("Member %s suspended for %d day(s) until %s", member_id, suspension_days, until)

    # ---------------- Loans ----------------
    def process_loan(self, book_id: int, member_id: int, loan_period: Optional[int] = None) -> Loan:
        """
        Lend a copy of a book to a member.

        Preconditions: the member may borrow (no overdue loans, no suspension)
        and the book has an available copy. Inserts the loan and decrements
        availability in one transaction. `loan_period` values <= 0 fall back to
        the default loan period.
        """
        period = int(loan_period) if loan_period is not None else self.loan_days
        if period <= 0:
            period = self.loan_days

        with self.db.transaction():
            if not self.can_member_borrow(member_id):
                logger.warning("Member %s is not eligible to borrow", member_id)
                raise LoanRuleError(f"Member {member_id} is suspended or has overdue books")
            if not self.check_book_availability(book_id):
                logger.warning("Book %s has no available copy", book_id)
                raise LoanRuleError(f"Book {book_id} is not available for loan")

            loan_date = self.today()
            due_date = date_utils.add_days(loan_date, period)
            cur = self.db.execute(
                "INSERT INTO Loans (book_id, member_id, loan_date, due_date, is_returned) VALUES (?, ?, ?, ?, 0)",
                (book_id, member_id, loan_date, due_date))
            loan_id = cur.lastrowid
            self.update_book_availability(book_id, -1)

        logger.info("Loan %s: book %s to member %s until %s", loan_id, book_id, member_id, due_date)
        return self.get_loan(loan_id)

    def process_return(self, loan_id: int, return_date: Optional[str] = None) -> Return:
        """
        Close a loan.

        Computes overdue days against the due date, inserts the return record,
        flags the loan returned, restores one available copy and, when the book
        came back late, records a suspension of overdue_days * 2 against the
        member. Everything happens in one transaction.
        """
        if return_date is None:
            return_date = self.today()
        elif not date_utils.is_valid_date_string(return_date):
            raise InvalidParameterError(f"Invalid return date: {return_date!r}")
        else:
            return_date = date_utils.format_date(date_utils.parse_date(return_date))

        with self.db.transaction():
            loan = self.get_loan(loan_id)
            if loan.is_returned:
                raise LoanRuleError(f"Loan {loan_id} has already been returned")

            overdue_days = date_utils.calculate_overdue_days(loan.due_date, return_date)
            cur = self.db.execute(
                "INSERT INTO Returns (loan_id, return_date, overdue_days) VALUES (?, ?, ?)",
                (loan_id, return_date, overdue_days))
            return_id = cur.lastrowid
            self.db.execute("UPDATE Loans SET is_returned = 1 WHERE loan_id = ?", (loan_id,))
            self.update_book_availability(loan.book_id, 1)
            if overdue_days > 0:
                self._record_penalty(loan.member_id, calculate_suspension_days(overdue_days), return_date)

        logger.info("Loan %s returned on %s (overdue %d day(s))", loan_id, return_date, overdue_days)
        return Return(return_id=return_id, loan_id=loan_id, return_date=return_date, overdue_days=overdue_days)

    def _find_loans(self, where: str, params: Sequence, order: str = "loan_date DESC, loan_id DESC") -> List[Loan]:
        rows = self.db.query(
            f"SELECT loan_id, book_id, member_id, loan_date, due_date, is_returned FROM Loans {where} ORDER BY {order}",
            params)
        return [Loan(**{**dict(r), "is_returned": bool(r["is_returned"])}) for r in rows]

    def get_loan(self, loan_id: int) -> Loan:
        loans = self._find_loans("WHERE loan_id = ?", (loan_id,))
        if not loans:
            raise NotFoundError(f"Loan not found (ID: {loan_id})")
        return loans[0]

    def get_active_loans_by_member(self, member_id: int) -> List[Loan]:
        return self._find_loans("WHERE member_id = ? AND is_returned = 0", (member_id,), order="due_date ASC, loan_id")

    def get_active_loans_by_book(self, book_id: int) -> List[Loan]:
        return self._find_loans("WHERE book_id = ? AND is_returned = 0", (book_id,))

    def get_loan_history_by_member(self, member_id: int) -> List[Loan]:
        return self._find_loans("WHERE member_id = ?", (member_id,))

    def get_loan_history_by_book(self, book_id: int) -> List[Loan]:
        return self._find_loans("WHERE book_id = ?", (book_id,))

    def get_overdue_loans(self) -> List[Loan]:
        return self._find_loans("WHERE is_returned = 0 AND due_date < ?", (self.today(),),
                                order="due_date ASC, loan_id")

    def check_loan_overdue(self, loan_id: int) -> int:
        """Days the loan is currently past due; 0 for returned or on-time loans."""
        loan = self.get_loan(loan_id)
        if loan.is_returned:
            return 0
        return date_utils.calculate_overdue_days(loan.due_date, self.today())

    # ---------------- Reports / Queries ----------------
    def active_loans_report(self) -> pd.DataFrame:
        return self.db.read_frame(
            "SELECT l.loan_id, b.title, m.name AS member, l.loan_date, l.due_date "
            "FROM Loans l JOIN Books b ON l.book_id = b.book_id "
            "JOIN Members m ON l.member_id = m.member_id "
            "WHERE l.is_returned = 0 ORDER BY l.loan_date DESC, l.loan_id DESC")

    def overdue_report(self) -> pd.DataFrame:
        """
        Unreturned loans past their due date, most overdue first.

        Columns: loan_id, title, member, loan_date, due_date, overdue_days, suspension_days.
        """
        today = self.today()
        df = self.db.read_frame(
            "SELECT l.loan_id, b.title, m.name AS member, l.loan_date, l.due_date, "
            "CAST(julianday(?) - julianday(l.due_date) AS INTEGER) AS overdue_days "
            "FROM Loans l JOIN Books b ON l.book_id = b.book_id "
            "JOIN Members m ON l.member_id = m.member_id "
            "WHERE l.is_returned = 0 AND l.due_date < ? "
            "ORDER BY overdue_days DESC, l.loan_id", (today, today))
        df["suspension_days"] = df["overdue_days"] * SUSPENSION_MULTIPLIER
        return df

    def popular_books_report(self, limit: int = POPULAR_BOOKS_LIMIT) -> pd.DataFrame:
        return self.db.read_frame(
            "SELECT b.book_id, b.title, b.author, COUNT(l.loan_id) AS loan_count "
            "FROM Books b LEFT JOIN Loans l ON b.book_id = l.book_id "
            "GROUP BY b.book_id ORDER BY loan_count DESC, b.book_id LIMIT ?", (int(limit),))

    def inventory_report(self) -> pd.DataFrame:
        df = self.db.read_frame(
            "SELECT book_id, title, author, genre, quantity, available FROM Books ORDER BY book_id")
        df["on_loan"] = df["quantity"] - df["available"]
        return df

    def member_statistics(self) -> Dict[str, int]:
        row = self.db.query_one(
            "SELECT COUNT(DISTINCT member_id) AS n FROM Loans WHERE is_returned = 0 AND due_date < ?",
            (self.today(),))
        return {"total_members": self.member_count(), "overdue_members": row["n"]}

    def export_reports(self, out_dir: str) -> List[pathlib.Path]:
        """
        Write every report as CSV under `out_dir` plus bar charts for popular and overdue books.

        Returns the list of files written.
        """
        out = pathlib.Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        written: List[pathlib.Path] = []

        reports = {
            "active_loans": self.active_loans_report(),
            "overdue_loans": self.overdue_report(),
            "popular_books": self.popular_books_report(),
            "inventory": self.inventory_report(),
        }
        for name, df in reports.items():
            path = out / f"{name}.csv"
            df.to_csv(path, index=False)
            written.append(path)
            logger.info("Saved %d %s rows to %s", len(df), name, path)

        popular_fig = self.popular_books_chart(reports["popular_books"])
        if popular_fig is not None:
            path = out / "popular_books.png"
            save_plot(popular_fig, path)
            written.append(path)

        overdue_fig = self.overdue_chart(reports["overdue_loans"])
        if overdue_fig is not None:
            path = out / "overdue_loans.png"
            save_plot(overdue_fig, path)
            written.append(path)

        return written

    def popular_books_chart(self, popular: Optional[pd.DataFrame] = None):
        """One bar per book, labelled "title #book_id". Returns None when there is nothing to plot."""
        if popular is None:
            popular = self.popular_books_report()
        if popular.empty:
            return None
        return bar_chart(popular, "loan_count", bar_labels(popular, "book_id"),
                         "Most loaned books", "Loans", "steelblue")

    def overdue_chart(self, overdue: Optional[pd.DataFrame] = None):
        """One bar per overdue loan, labelled "title #loan_id"."""
        if overdue is None:
            overdue = self.overdue_report()
        if overdue.empty:
            return None
        return bar_chart(overdue, "overdue_days", bar_labels(overdue, "loan_id"),
                         "Overdue loans (days)", "Days overdue", "indianred")


# ---------------- Plot helpers ----------------
def bar_labels(df: pd.DataFrame, key: str) -> pd.Series:
    """Unique per-row labels so rows sharing a title are not merged into one bar."""
    return df["title"].astype(str) + " #" + df[key].astype(str)


def bar_chart(df: pd.DataFrame, value: str, labels: pd.Series, title: str, xlabel: str, color: str):
    """Horizontal bar chart with one bar per row of `df`."""
    frame = df.assign(label=labels.values)
    fig, ax = plt.subplots(figsize=(10, max(3, 0.4 * len(frame) + 1)))
    sns.barplot(data=frame, x=value, y="label", ax=ax, color=color)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("")
    annotate_bar_values(ax)
    return fig


def save_plot(fig, path: pathlib.Path) -> None:
    """Save a matplotlib figure to disk ensuring the parent directory exists."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)


def annotate_bar_values(ax, fmt="{:.0f}", fontsize=8):
    """
    Add numeric labels at the end of each horizontal bar in an Axes.

    Bars with NaN or zero width are skipped.
    """
    for p in ax.patches:
        value = p.get_width()
        if value is None or (isinstance(value, float) and math.isnan(value)) or abs(value) < 1e-12:
            continue
        ax.text(value, p.get_y() + p.get_height() / 2, " " + fmt.format(value),
                ha="left", va="center", fontsize=fontsize)


# ---------------- CLI ----------------
def input_prompt(prompt: str) -> str:
    """
    Wrapper around built-in input() that returns a stripped string and handles interrupts.

    Returns an empty string on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return ""


def input_int(prompt: str) -> Optional[int]:
    raw = input_prompt(prompt)
    try:
        return int(raw)
    except ValueError:
        return None


def print_books(books: List[Book]) -> None:
    print(f"{'ID':<5} {'Title':<30} {'Author':<20} {'Year':<6} {'ISBN':<15} {'Genre':<12} {'Qty':>4} {'Avail':>5}")
    print("-" * 104)
    for b in books:
        year = b.publication_year if b.publication_year is not None else ""
        print(f"{b.book_id:<5} {b.title[:30]:<30} {(b.author or '')[:20]:<20} {year!s:<6} "
              f"{b.isbn:<15} {(b.genre or '')[:12]:<12} {b.quantity:>4} {b.available:>5}")
    print(f"\nTotal books: {len(books)}")


def print_members(members: List[Member]) -> None:
    print(f"{'ID':<8} {'Name':<20} {'Phone':<15} {'Address':<30} {'Registered':<12}")
    print("-" * 88)
    for m in members:
        print(f"{m.member_id:<8} {m.name[:20]:<20} {(m.phone or '')[:15]:<15} "
              f"{(m.address or '')[:30]:<30} {m.registration_date or '':<12}")
    print(f"\nTotal members: {len(members)}")


def print_loans(loans: List[Loan]) -> None:
    print(f"{'Loan ID':<8} {'Book':<6} {'Member':<7} {'Loan Date':<12} {'Due Date':<12} Returned")
    print("-" * 56)
    for loan in loans:
        print(f"{loan.loan_id:<8} {loan.book_id:<6} {loan.member_id:<7} {loan.loan_date:<12} "
              f"{loan.due_date:<12} {'yes' if loan.is_returned else 'no'}")
    print(f"\nTotal: {len(loans)} loan(s)")


def print_frame(title: str, df: pd.DataFrame) -> None:
    print(f"\n========== {title} ==========")
    if df.empty:
        print("(none)")
    else:
        print(df.to_string(index=False))
    print(f"Total: {len(df)}")


def book_menu(lib: LibrarySystem) -> None:
    while True:
        print("\n===== Books =====")
        print("1. Add book")
        print("2. Search books (title/author/ISBN)")
        print("3. Update book")
        print("4. Delete book")
        print("5. List all books")
        print("6. Search by genre")
        print("7. Search by author")
        print("0. Back")
        choice = input_prompt("Choose (0-7): ")
        try:
            if choice == "0" or choice == "":
                return
            elif choice == "1":
                title = input_prompt("Title: ")
                author = input_prompt("Author: ")
                publisher = input_prompt("Publisher: ")
                year = input_int("Publication year: ")
                isbn = input_prompt("ISBN: ")
                genre = input_prompt("Genre: ")
                qty = input_int("Quantity: ")
                book_id = lib.add_book(title, author, publisher, year, isbn, genre, qty if qty is not None else 1)
                print(f"Book added (ID: {book_id})")
            elif choice == "2":
                print_books(lib.search_books(input_prompt("Keyword: ")))
            elif choice == "3":
                book_id = input_int("Book ID: ")
                title = input_prompt("New title (Enter to keep): ") or None
                author = input_prompt("New author (Enter to keep): ") or None
                publisher = input_prompt("New publisher (Enter to keep): ") or None
                year = input_int("New publication year (Enter to keep): ")
                genre = input_prompt("New genre (Enter to keep): ") or None
                qty = input_int("New quantity (Enter to keep): ")
                lib.update_book(book_id, title, author, publisher, year, genre, qty)
                print("Book updated.")
            elif choice == "4":
                book_id = input_int("Book ID: ")
                if input_prompt("Really delete? (y/n): ").lower().startswith("y"):
                    lib.delete_book(book_id)
                    print("Book deleted.")
                else:
                    print("Cancelled.")
            elif choice == "5":
                print_books(lib.list_books())
            elif choice == "6":
                print_books(lib.search_books_by_genre(input_prompt("Genre: ")))
            elif choice == "7":
                print_books(lib.search_books_by_author(input_prompt("Author: ")))
            else:
                print("Unknown choice. Try again.")
        except LibraryError as e:
            print(f"Error: {e}")


def member_menu(lib: LibrarySystem) -> None:
    while True:
        print("\n===== Members =====")
        print("1. Register member")
        print("2. Search members by name")
        print("3. Show member (ID)")
        print("4. Update member")
        print("5. Delete member")
        print("6. List all members")
        print("7. Check overdue status")
        print("0. Back")
        choice = input_prompt("Choose (0-7): ")
        try:
            if choice == "0" or choice == "":
                return
            elif choice == "1":
                name = input_prompt("Name: ")
                phone = input_prompt("Phone: ")
                address = input_prompt("Address: ")
                print(f"Member registered (ID: {lib.add_member(name, phone, address)})")
            elif choice == "2":
                print_members(lib.search_members_by_name(input_prompt("Name: ")))
            elif choice == "3":
                m = lib.get_member(input_int("Member ID: "))
                print(f"\nMember ID: {m.member_id}")
                print(f"Name: {m.name}")
                print(f"Phone: {m.phone}")
                print(f"Address: {m.address}")
                print(f"Registered: {m.registration_date}")
                print(f"Overdue days: {m.overdue_days}")
                print(f"Suspension days: {m.suspension_days}")
                print(f"Penalty days (total): {m.penalty_days}")
                if m.suspended_until:
                    print(f"Suspended until: {m.suspended_until}")
            elif choice == "4":
                member_id = input_int("Member ID: ")
                name = input_prompt("New name (Enter to keep): ") or None
                phone = input_prompt("New phone (Enter to keep): ") or None
                address = input_prompt("New address (Enter to keep): ") or None
                lib.update_member(member_id, name, phone, address)
                print("Member updated.")
            elif choice == "5":
                lib.delete_member(input_int("Member ID: "))
                print("Member deleted.")
            elif choice == "6":
                print_members(lib.list_members())
            elif choice == "7":
                member_id = input_int("Member ID: ")
                days = lib.check_member_overdue(member_id)
                if days > 0:
                    print(f"Overdue by {days} day(s); suspension {calculate_suspension_days(days)} day(s).")
                else:
                    print("No overdue loans.")
                print("May borrow." if lib.can_member_borrow(member_id) else "May NOT borrow.")
            else:
                print("Unknown choice. Try again.")
        except LibraryError as e:
            print(f"Error: {e}")


def loan_menu(lib: LibrarySystem) -> None:
    while True:
        print("\n===== Loans / Returns =====")
        print("1. Loan book")
        print("2. Return book")
        print("3. Active loans of member")
        print("4. All active loans")
        print("5. Overdue loans")
        print("6. Loan history (member)")
        print("7. Loan history (book)")
        print("0. Back")
        choice = input_prompt("Choose (0-7): ")
        try:
            if choice == "0" or choice == "":
                return
            elif choice == "1":
                book_id = input_int("Book ID: ")
                member_id = input_int("Member ID: ")
                days = input_int(f"Loan days (default {lib.loan_days}) or press Enter: ")
                loan = lib.process_loan(book_id, member_id, days)
                print(f"Loan processed (Loan ID: {loan.loan_id}). Due on {loan.due_date}.")
            elif choice == "2":
                ret = lib.process_return(input_int("Loan ID: "))
                print(f"Return processed (Return ID: {ret.return_id}) on {ret.return_date}.")
                if ret.overdue_days > 0:
                    print(f"WARNING: overdue by {ret.overdue_days} day(s). "
                          f"Suspension period: {ret.suspension_days} day(s).")
            elif choice == "3":
                print_loans(lib.get_active_loans_by_member(input_int("Member ID: ")))
            elif choice == "4":
                print_frame("Active Loans", lib.active_loans_report())
            elif choice == "5":
                print_loans(lib.get_overdue_loans())
            elif choice == "6":
                print_loans(lib.get_loan_history_by_member(input_int("Member ID: ")))
            elif choice == "7":
                print_loans(lib.get_loan_history_by_book(input_int("Book ID: ")))
            else:
                print("Unknown choice. Try again.")
        except LibraryError as e:
            print(f"Error: {e}")


def report_menu(lib: LibrarySystem) -> None:
    while True:
        print("\n===== Reports =====")
        print("1. Popular books (top 10)")
        print("2. Overdue report")
        print("3. Inventory")
        print("4. Member statistics")
        print("5. Export reports")
        print("0. Back")
        choice = input_prompt("Choose (0-5): ")
        if choice == "0" or choice == "":
            return
        elif choice == "1":
            print_frame("Popular Books", lib.popular_books_report())
        elif choice == "2":
            print_frame("Overdue Loans", lib.overdue_report())
        elif choice == "3":
            print_frame("Inventory", lib.inventory_report())
        elif choice == "4":
            stats = lib.member_statistics()
            print(f"\nTotal members: {stats['total_members']}")
            print(f"Members with overdue loans: {stats['overdue_members']}")
        elif choice == "5":
            out = input_prompt("Output folder (default library_reports): ") or "library_reports"
            for path in lib.export_reports(out):
                print(" -", path.resolve())
        else:
            print("Unknown choice. Try again.")


def print_menu():
    """Print the main menu."""
    print("\n--- Small Library Management (CLI) ---")
    print("1. Books")
    print("2. Members")
    print("3. Loans / Returns")
    print("4. Reports")
    print("0. Exit")


def cli_loop(lib: LibrarySystem):
    """
    Interactive command-loop for the library system.

    Presents the main menu and dispatches to the sub-menus until the user exits.
    """
    menus = {"1": book_menu, "2": member_menu, "3": loan_menu, "4": report_menu}
    while True:
        print_menu()
        choice = input_prompt("Choose (0-4): ")
        if choice in ("0", ""):
            print("Exiting.")
            break
        handler = menus.get(choice)
        if handler is None:
            print("Unknown choice. Try again.")
            continue
        handler(lib)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Part A: Small Library Management System")
    parser.add_argument("--db", default=os.environ.get("LIBRARY_DB_PATH", DEFAULT_DB_PATH),
                        help="Path to the SQLite database file")
    parser.add_argument("--loan-days", type=int, default=DEFAULT_LOAN_DAYS, help="Default loan period in days")
    parser.add_argument("--export", metavar="DIR", help="Export reports to DIR and exit")
    args = parser.parse_args(argv)

    with LibraryDatabase(args.db) as db:
        lib = LibrarySystem(db, loan_days=args.loan_days)
        if args.export:
            for path in lib.export_reports(args.export):
                print(path)
            return 0
        print("Welcome - library database:", args.db)
        cli_loop(lib)
    print("Goodbye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
