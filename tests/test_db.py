"""tests/test_db.py: Database directory and table management."""

import json

import pytest
from jsondb.database import Database, connect, create_database, databases
from jsondb.errors import (
    DatabaseExistsError,
    DatabaseNotFoundError,
    InvalidNameError,
    NameAlreadyUsedError,
    TableExistsError,
    TableNotFoundError,
)
from jsondb.table import Table


@pytest.fixture
def db(tmp_path):
    return create_database(tmp_path / "app")


class TestDatabase:
    def test_create_makes_directory(self, tmp_path):
        db = Database.create(tmp_path / "shop")
        assert (tmp_path / "shop").is_dir()
        assert db.name == "shop"
        assert db.dir == tmp_path
        assert db.path == tmp_path / "shop"

    def test_create_existing_raises(self, db):
        with pytest.raises(DatabaseExistsError, match="already exists"):
            create_database(db.path)

    def test_create_nested_path(self, tmp_path):
        db = create_database(tmp_path / "a" / "b")
        assert db.path.is_dir()

    def test_exists(self, tmp_path, db):
        assert Database.exists(db.path)
        assert not Database.exists(tmp_path / "nope")

    def test_connect_missing_raises(self, tmp_path):
        with pytest.raises(DatabaseNotFoundError, match="does not exist"):
            connect(tmp_path / "nope")

    def test_connect_existing(self, db):
        assert connect(db.path).name == "app"

    def test_rename(self, tmp_path, db):
        db.create_table("users")
        assert db.rename("store") is True
        assert db.name == "store"
        assert (tmp_path / "store" / "users.json").exists()
        assert not (tmp_path / "app").exists()

    def test_rename_to_existing_raises(self, tmp_path, db):
        create_database(tmp_path / "other")
        with pytest.raises(NameAlreadyUsedError):
            db.rename("other")

    def test_databases_lists_directories(self, tmp_path):
        create_database(tmp_path / "b")
        create_database(tmp_path / "a")
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        assert databases(tmp_path) == ["a", "b"]

    def test_databases_missing_root(self, tmp_path):
        assert databases(tmp_path / "nope") == []

    def test_size_counts_table_files(self, db):
        db.create_table("users")
        expected = sum(p.stat().st_size for p in db.path.iterdir())
        assert db.size() == expected > 0

    def test_times(self, db):
        assert set(db.times()) == {"created", "accessed", "modified"}


class TestCreateTable:
    def test_create_returns_loaded_table(self, db):
        t = db.create_table("users")
        assert isinstance(t, Table)
        assert t.name == "users"
        assert t.length == 0

    def test_create_writes_empty_files(self, db):
        db.create_table("users")
        assert json.loads((db.path / "users.json").read_text(encoding="utf-8")) == []
        meta = json.loads((db.path / "users.meta.json").read_text(encoding="utf-8"))
        assert meta == {"rows": 0, "current_id": 0}

    def test_create_duplicate_raises(self, db):
        db.create_table("users")
        with pytest.raises(TableExistsError, match="app.users"):
            db.create_table("users")

    def test_table_exists(self, db):
        assert not db.table_exists("users")
        db.create_table("users")
        assert db.table_exists("users")

    def test_meta_suffix_rejected(self, db):
        users = db.create_table("users")
        users.insert({"name": "a"})
        users.save()
        with pytest.raises(InvalidNameError, match=r"\.meta"):
            db.create_table("users.meta")
        meta = json.loads((db.path / "users.meta.json").read_text(encoding="utf-8"))
        assert meta == {"rows": 1, "current_id": 1}
        assert db.tables() == ["users"]

    @pytest.mark.parametrize("name", ["", "a/b", "a\\b", "x.meta"])
    def test_invalid_names(self, db, name):
        with pytest.raises(InvalidNameError) as exc_info:
            db.create_table(name)
        assert isinstance(exc_info.value, ValueError)
        assert list(db.path.iterdir()) == []


class TestGetTable:
    def test_get_existing(self, db):
        db.create_table("users")
        assert db.table("users").name == "users"

    def test_get_missing_raises(self, db):
        with pytest.raises(TableNotFoundError, match="app.ghost"):
            db.table("ghost")

    def test_each_call_loads_fresh(self, db):
        t = db.create_table("users")
        t.insert({"name": "a"})
        assert db.table("users").length == 0
        t.save()
        assert db.table("users").length == 1


class TestListAndDrop:
    def test_tables_sorted(self, db):
        db.create_table("users")
        db.create_table("orders")
        assert db.tables() == ["orders", "users"]

    def test_tables_empty(self, db):
        assert db.tables() == []

    def test_dotted_names(self, db):
        db.create_table("v1.users")
        assert db.tables() == ["v1.users"]

    def test_tables_skips_reserved_suffix(self, db):
        db.create_table("x")
        (db.path / "x.meta.meta.json").write_text("{}", encoding="utf-8")
        assert db.tables() == ["x"]

    def test_drop_existing(self, db):
        db.create_table("tmp")
        assert db.drop_table("tmp") is True
        assert not db.table_exists("tmp")
        assert not (db.path / "tmp.meta.json").exists()

    def test_drop_missing_returns_false(self, db):
        assert db.drop_table("nope") is False

    def test_drop_then_recreate(self, db):
        t = db.create_table("tmp")
        t.insert({"a": 1})
        t.save()
        db.drop_table("tmp")
        assert db.create_table("tmp").meta.get("current_id") == 0

    def test_repr_shows_tables(self, db):
        db.create_table("foo")
        db.create_table("bar")
        r = repr(db)
        assert "foo" in r
        assert "bar" in r
