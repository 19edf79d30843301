"""
Tests del escritor fila por fila (mongomigra.insert_records).
"""

import sys
import os
import sqlite3
from datetime import datetime

import pytest
from bson import ObjectId

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import mongomigra
from mongomigra import InsertReport, RowResult, insert_records
from tests.helpers import create_schema


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield create_schema(connection)
    connection.close()


def count_rows(conn, table):
    return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]


def test_inserts_every_record(conn):
    records = [
        {"mongo_id": "c1", "username": "ana", "comment": "Gané!", "isActive": True},
        {"mongo_id": "c2", "username": "leo", "comment": "Otra vez"},
    ]

    report = insert_records(conn, "comments", records)

    assert (report.inserted, report.failed) == (2, 0)
    assert count_rows(conn, "comments") == 2
    assert all(isinstance(r, RowResult) and r.ok for r in report.results)


def test_empty_input_returns_immediately():
    # Sin registros no se toca la conexión
    report = insert_records(None, "games", [])

    assert isinstance(report, InsertReport)
    assert (report.inserted, report.failed) == (0, 0)
    assert report.results == []


def test_duplicate_mongo_id_fails_on_second_write(conn):
    record = {"mongo_id": "a1", "title": "Aviator", "recent_win_amount": 100}

    first = insert_records(conn, "games", [record])
    second = insert_records(conn, "games", [record])

    assert (first.inserted, first.failed) == (1, 0)
    assert (second.inserted, second.failed) == (0, 1)
    assert "UNIQUE" in second.failures[0].error
    assert second.failures[0].record == record
    assert count_rows(conn, "games") == 1


def test_failed_row_does_not_stop_the_batch(conn):
    records = [
        {"mongo_id": "w1", "username": "p1"},
        {"mongo_id": "w2", "columna_inexistente": "x"},
        {"mongo_id": "w3", "username": ["no", "escalar"]},
        {"mongo_id": "w4", "username": "p4"},
    ]

    report = insert_records(conn, "winners", records)

    assert (report.inserted, report.failed) == (2, 2)
    assert [r.ok for r in report.results] == [True, False, False, True]
    rows = conn.execute('SELECT mongo_id FROM winners ORDER BY id').fetchall()
    assert [row[0] for row in rows] == ["w1", "w4"]


def test_synthetic_id_is_never_written(conn):
    report = insert_records(conn, "banners", [{"id": 999, "mongo_id": "b1", "title": "Promo"}])

    assert report.inserted == 1
    row = conn.execute("SELECT id, mongo_id FROM banners").fetchone()
    assert row[0] != 999
    assert row[1] == "b1"


def test_reserved_word_columns_are_quoted(conn):
    report = insert_records(conn, "games", [{"mongo_id": "g1", "order": 5}])

    assert report.inserted == 1
    assert conn.execute('SELECT "order" FROM games').fetchone()[0] == 5


def test_none_values_are_stored_as_null(conn):
    insert_records(conn, "admins", [{"mongo_id": "ad1", "lastLogin": None}])
    assert conn.execute("SELECT lastLogin FROM admins").fetchone()[0] is None


def test_pass_through_object_ids_and_datetimes_are_stored_as_text(conn):
    oid = ObjectId("65a1b2c3d4e5f60718293a4b")
    records = [{"mongo_id": "j1", "createdBy": oid, "updated_at": datetime(2024, 5, 1, 9, 30)}]

    report = insert_records(conn, "jackpotmessages", records)

    assert report.inserted == 1
    row = conn.execute("SELECT createdBy, updated_at FROM jackpotmessages").fetchone()
    assert row == (str(oid), "2024-05-01T09:30:00.000Z")


def test_rows_are_committed_individually(tmp_path):
    path = tmp_path / "writer.db"
    writer = create_schema(sqlite3.connect(path))
    insert_records(writer, "videos", [{"mongo_id": "v1"}, {"mongo_id": "v1"}, {"mongo_id": "v2"}])

    # Otra conexión ve las filas sin commit adicional del escritor
    reader = sqlite3.connect(path)
    assert count_rows(reader, "videos") == 2
    reader.close()
    writer.close()


def test_report_repr():
    report = InsertReport("games")
    report.add(RowResult(True, {}, None))
    report.add(RowResult(False, {}, "boom"))
    assert repr(report) == "InsertReport(table='games', inserted=1, failed=1)"
    assert mongomigra.RowResult is RowResult
