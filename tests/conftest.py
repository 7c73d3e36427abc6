import datetime
import sys
import pathlib

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import matplotlib  # noqa: E402

matplotlib.use("Agg")

from part_a_library_system import LibraryDatabase, LibrarySystem  # noqa: E402


class Clock:
    """Settable stand-in for date.today()."""

    def __init__(self, start: str):
        self.current = datetime.date.fromisoformat(start)

    def __call__(self) -> datetime.date:
        return self.current

    def set(self, value: str) -> None:
        self.current = datetime.date.fromisoformat(value)


@pytest.fixture
def clock():
    return Clock("2025-01-01")


@pytest.fixture
def db(tmp_path):
    database = LibraryDatabase(str(tmp_path / "library.db")).open()
    yield database
    database.close()


@pytest.fixture
def lib(db, clock):
    return LibrarySystem(db, today=clock)
