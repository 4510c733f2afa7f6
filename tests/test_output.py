"""Tests for CSV/SQL formatting and the SQL writer."""

import io

import pytest

from data_miner.output import (
    SECTION_RULE,
    SqlWriter,
    SqlWriterError,
    csv_row,
    csv_str,
    db_bool,
    db_str,
    db_val,
    write_csv,
)


class TestFormatting:
    def test_csv_str(self):
        assert csv_str("Axe") == '"Axe"'
        assert csv_str('Big "Axe"') == '"Big ""Axe"""'
        assert csv_str(None) is None
        assert csv_str("None") is None

    def test_db_str(self):
        assert db_str("Axe") == "'Axe'"
        assert db_str("Tribe's Axe") == "'Tribe''s Axe'"
        assert db_str(None) == "null"
        assert db_str(None, treat_null_as_empty=True) == "''"

    def test_db_bool_and_val(self):
        assert db_bool(True) == "true"
        assert db_bool(False) == "false"
        assert db_val(None) == "null"
        assert db_val(False) == "false"
        assert db_val(42) == "42"

    def test_csv_row(self):
        assert csv_row(['"a"', None, 3]) == '"a",,3'


class TestWriteCsv:
    def test_creates_directories(self, tmp_path):
        path = tmp_path / "Fashion" / "fashion.csv"
        count = write_csv(str(path), "name,id", ['"Hat",1', '"Coat",2'])

        assert count == 2
        assert path.read_text(encoding="utf-8") == 'name,id\n"Hat",1\n"Coat",2\n'


class TestSqlWriter:
    def test_full_file(self):
        stream = io.StringIO()
        writer = SqlWriter(stream)
        writer.start_file()
        writer.start_section("Fashion")
        writer.start_table("fashion")
        writer.write_row("'Hat', 1")
        writer.write_row("'Coat', 2")
        writer.end_table()
        writer.end_section()
        writer.end_file()

        assert stream.getvalue() == (
            "set names utf8mb4;\n"
            "start transaction;\n"
            "\n"
            f"{SECTION_RULE}\n"
            "-- Fashion\n"
            "\n"
            "truncate table `fashion`;\n"
            "insert into `fashion` values \n"
            "('Hat', 1),\n"
            "('Coat', 2);\n"
            "\n"
            "commit;\n"
        )

    def test_empty_table_only_truncates(self):
        stream = io.StringIO()
        writer = SqlWriter.for_section(stream)
        writer.start_table("ng")
        writer.end_table()
        assert stream.getvalue() == "truncate table `ng`;\n"

    def test_rows_batched(self):
        stream = io.StringIO()
        writer = SqlWriter.for_section(stream)
        writer.start_table("item")
        for i in range(1000):
            writer.write_row(str(i))
        writer.end_table()

        text = stream.getvalue()
        assert text.count("insert into `item` values") == 2
        assert text.count(";\n") == 3

    def test_out_of_order_calls(self):
        writer = SqlWriter(io.StringIO())
        with pytest.raises(SqlWriterError):
            writer.start_section("Fashion")
        with pytest.raises(SqlWriterError):
            writer.write_row("1")

        writer.start_file()
        with pytest.raises(SqlWriterError):
            writer.start_table("fashion")
        with pytest.raises(SqlWriterError):
            writer.end_section()

    def test_section_body_spliced(self):
        body = io.StringIO()
        section = SqlWriter.for_section(body)
        section.start_table("npc")
        section.write_row("'human'")
        section.end_table()

        stream = io.StringIO()
        writer = SqlWriter(stream)
        writer.start_file()
        writer.start_section("Npc")
        writer.write_section_body(body.getvalue())
        writer.end_section()
        writer.end_file()

        assert "-- Npc\n\ntruncate table `npc`;\ninsert into `npc` values \n('human');\n\ncommit;\n" in stream.getvalue()
