from __future__ import annotations

from class_attendance.database.bootstrap import SCHEMA_PATH, iter_sql_statements


def test_split_ignores_semicolons_inside_quotes():
    sql = "CREATE TABLE a (x INT);\nINSERT INTO a VALUES ('x;y');\n  \nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x INT)",
        "INSERT INTO a VALUES ('x;y')",
        "SELECT 1",
    ]


def test_schema_ships_with_the_package():
    sql = SCHEMA_PATH.read_text(encoding="utf-8")

    assert "uq_attendance_student_session_date" in sql
    assert any("CREATE TABLE" in s and "attendance_records" in s for s in iter_sql_statements(sql))
