import pytest
from sqlalchemy import create_engine, text

import part_e_user_search as search


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'users.db'}")
    with eng.begin() as conn:
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)"))
        conn.execute(text("INSERT INTO users (name) VALUES (:name)"),
                     [{"name": n} for n in ["alice", "bob", "alice", "carol"]])
    yield eng
    eng.dispose()


@pytest.mark.parametrize("value", ["alice", "Bob Smith", "user_01", "a-b", "x" * 100])
def test_validate_accepts(value):
    assert search.validate_search_input(value) == value


@pytest.mark.parametrize("value", [None, "", "x" * 101, "alice'; DROP TABLE users;--", "a%", "name@host"])
def test_validate_rejects(value):
    with pytest.raises(ValueError):
        search.validate_search_input(value)


def test_load_database_url_from_credentials():
    url = search.load_database_url({"DB_SERVER": "db.local", "DB_USER": "app",
                                    "DB_PASSWORD": "s3cret", "DB_NAME": "shop"})
    assert url.drivername == "mysql+pymysql"
    assert url.host == "db.local"
    assert url.username == "app"
    assert url.password == "s3cret"
    assert url.database == "shop"


def test_load_database_url_prefers_db_url():
    assert search.load_database_url({"DB_URL": "sqlite://", "DB_USER": "x"}) == "sqlite://"


def test_load_database_url_missing_credentials():
    with pytest.raises(search.ConfigError, match="DB_PASSWORD"):
        search.load_database_url({"DB_SERVER": "h", "DB_USER": "u", "DB_NAME": "d"})


def test_query_database_exact_match(engine):
    assert search.query_database("alice", engine) == ["alice", "alice"]
    assert search.query_database("ali", engine) == []


def test_query_database_uses_environment(engine, tmp_path, monkeypatch):
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'users.db'}")
    assert search.query_database("carol") == ["carol"]


def test_query_database_rejects_before_connecting():
    with pytest.raises(ValueError):
        search.query_database("x' OR '1'='1")


def test_main(engine, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'users.db'}")
    assert search.main(["bob"]) == 0
    out = capsys.readouterr().out
    assert "User: bob" in out
    assert "Total: 1 user(s) found" in out

    assert search.main(["nobody"]) == 0
    assert "No users found matching 'nobody'" in capsys.readouterr().out

    assert search.main(["bad;name"]) == 1
