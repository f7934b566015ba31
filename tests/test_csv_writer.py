"""
Tests for the Delimited Table Writer.

Tests cover:
    - One-shot formatting and file output
    - Object rows with field order and header remapping
    - UTF-8 BOM prefix
    - Streaming writer lifecycle (row counter, close, context manager)
    - Failure reporting for unopenable destinations
"""

import pytest
from structext.backends.csv_writer import (
    CSVStreamWriter,
    create_writer,
    format_csv,
    write_csv,
    write_csv_from_objects,
    write_table,
)
from structext.model import Table, WriteOptions


def read(path):
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


class TestFormatCSV:
    """Test one-shot formatting."""

    def test_basic_output(self):
        content = format_csv(["Name", "Code"], [["Alice", 7], ["Bob", 3]])
        assert content == "Name,Code\nAlice,7\nBob,3\n"

    def test_empty_cells_become_null(self):
        assert format_csv(["A", "B"], [[None, ""]]) == "A,B\nnull,null\n"

    def test_headers_used_verbatim(self):
        """Headers are not escaped or underscored."""
        content = format_csv(["My Header", "x"], [])
        assert content == "My Header,x\n"

    def test_cells_are_escaped(self):
        content = format_csv(["A", "B"], [['He said "hi"', "a,b"]])
        assert content == 'A,B\n"He_said_""hi""","a,b"\n'

    def test_whitespace_kept_when_disabled(self):
        options = WriteOptions(underscore_whitespace=False)
        content = format_csv(["Quote"], [['He said "hi"']], options)
        assert content == 'Quote\n"He said ""hi"""\n'

    def test_utf8_bom(self):
        content = format_csv(["A"], [["1"]], WriteOptions(utf8_bom=True))
        assert content == "\ufeffA\n1\n"

    def test_custom_delimiter(self):
        content = format_csv(["A", "B"], [["1", "x;y"]], WriteOptions(delimiter=";"))
        assert content == 'A;B\n1;"x;y"\n'

    def test_generator_rows(self):
        rows = ([i, i * 2] for i in range(3))
        assert format_csv(["n", "double"], rows) == "n,double\n0,0\n1,2\n2,4\n"


class TestWriteCSV:
    """Test file output."""

    def test_write_success(self, tmp_path):
        path = str(tmp_path / "out.csv")
        ok, err = write_csv(path, ["A"], [["1"]])
        assert ok is True
        assert err is None
        assert read(path) == "A\n1\n"

    def test_bom_bytes_on_disk(self, tmp_path):
        path = tmp_path / "out.csv"
        write_csv(str(path), ["A"], [], WriteOptions(utf8_bom=True))
        assert path.read_bytes() == b"\xef\xbb\xbfA\n"

    def test_unopenable_destination(self, tmp_path):
        """A missing parent directory is reported, not raised."""
        path = str(tmp_path / "missing" / "out.csv")
        ok, err = write_csv(path, ["A"], [["1"]])
        assert ok is False
        assert err == f"Could not open file for writing: {path}"


class TestWriteFromObjects:
    """Test header-keyed record output."""

    def test_field_order(self, tmp_path):
        path = str(tmp_path / "out.csv")
        records = [{"code": 7, "name": "Alice"}, {"name": "Bob"}]
        ok, _ = write_csv_from_objects(path, ["name", "code"], records)
        assert ok
        assert read(path) == "name,code\nAlice,7\nBob,null\n"

    def test_field_map_renames_headers(self, tmp_path):
        path = str(tmp_path / "out.csv")
        options = WriteOptions(field_map={"name": "Clip Name"})
        write_csv_from_objects(path, ["name", "code"], [{"name": "A001", "code": 1}], options)
        assert read(path) == "Clip Name,code\nA001,1\n"

    def test_write_table(self, tmp_path):
        path = str(tmp_path / "out.csv")
        table = Table(headers=["Name", "Tracks"], records=[{"Name": "A001", "Tracks": "V A1"}])
        ok, err = write_table(path, table)
        assert (ok, err) == (True, None)
        assert read(path) == "Name,Tracks\nA001,V_A1\n"


class TestStreamWriter:
    """Test the incremental writer."""

    def test_headers_written_immediately(self, tmp_path):
        path = str(tmp_path / "out.csv")
        writer, err = create_writer(path, ["A", "B"])
        assert err is None
        assert isinstance(writer, CSVStreamWriter)
        writer.close()
        assert read(path) == "A,B\n"

    def test_rows_and_counter(self, tmp_path):
        path = str(tmp_path / "out.csv")
        writer, _ = create_writer(path, ["A", "B"])
        with writer:
            for i in range(3):
                writer.write_row([i, "x y"])
        assert writer.row_count == 3
        assert writer.closed
        assert read(path) == "A,B\n0,x_y\n1,x_y\n2,x_y\n"

    def test_bom_prefix(self, tmp_path):
        path = tmp_path / "out.csv"
        writer, _ = create_writer(str(path), ["A"], WriteOptions(utf8_bom=True))
        writer.close()
        assert path.read_bytes() == b"\xef\xbb\xbfA\n"

    def test_close_is_idempotent(self, tmp_path):
        writer, _ = create_writer(str(tmp_path / "out.csv"), ["A"])
        writer.close()
        writer.close()
        assert writer.closed

    def test_write_after_close_raises(self, tmp_path):
        writer, _ = create_writer(str(tmp_path / "out.csv"), ["A"])
        writer.close()
        with pytest.raises(ValueError):
            writer.write_row(["1"])

    def test_released_on_error_path(self, tmp_path):
        """The handle is closed even when the caller's loop raises."""
        path = str(tmp_path / "out.csv")
        writer, _ = create_writer(path, ["A"])
        with pytest.raises(RuntimeError):
            with writer:
                writer.write_row(["1"])
                raise RuntimeError("boom")
        assert writer.closed
        assert read(path) == "A\n1\n"

    def test_unopenable_destination(self, tmp_path):
        path = str(tmp_path / "missing" / "out.csv")
        writer, err = create_writer(path, ["A"])
        assert writer is None
        assert err == f"Could not open file for writing: {path}"
