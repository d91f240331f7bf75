"""Tests for the SQLite layer: transactions and migrations."""

import pytest

from song_rodeo_api.app.core.db import MIGRATIONS, get_connection, init_db, transaction
from song_rodeo_api.app.core.errors import NotFoundError, StorageError

INSERT_RODEO = (
    "INSERT INTO rodeos (id, name, slug, start_date, end_date) "
    "VALUES ('r1', 'Rodeo', 'rodeo-00000001', '2025-09-01T18:00:00+00:00', '2025-09-01T22:00:00+00:00')"
)


class TestTransaction:
    """Tests for core.db.transaction."""

    def test_commits_on_success(self, count_rows):
        with transaction() as cursor:
            cursor.execute(INSERT_RODEO)
        assert count_rows("rodeos") == 1

    def test_sqlite_error_becomes_storage_error_and_rolls_back(self, count_rows):
        with pytest.raises(StorageError) as exc_info:
            with transaction() as cursor:
                cursor.execute(INSERT_RODEO)
                cursor.execute("INSERT INTO no_such_table VALUES (1)")
        assert exc_info.value.message == "Storage operation failed"
        assert count_rows("rodeos") == 0

    def test_constraint_violation_becomes_storage_error(self, count_rows):
        with pytest.raises(StorageError):
            with transaction() as cursor:
                cursor.execute(INSERT_RODEO)
                cursor.execute(INSERT_RODEO)
        assert count_rows("rodeos") == 0

    def test_service_errors_roll_back_and_propagate(self, count_rows):
        with pytest.raises(NotFoundError):
            with transaction() as cursor:
                cursor.execute(INSERT_RODEO)
                raise NotFoundError("song", "s1")
        assert count_rows("rodeos") == 0

    def test_read_only_database_rejects_writes(self, read_only_database, count_rows):
        read_only_database()
        with pytest.raises(StorageError):
            with transaction() as cursor:
                cursor.execute(INSERT_RODEO)
        assert count_rows("rodeos") == 0


class TestInitDb:
    """Tests for core.db.init_db."""

    def test_applies_every_migration_once(self):
        init_db()
        conn = get_connection()
        try:
            versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        finally:
            conn.close()
        assert versions == [version for version, _ in MIGRATIONS]

    def test_foreign_keys_enforced(self):
        conn = get_connection()
        try:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        finally:
            conn.close()
