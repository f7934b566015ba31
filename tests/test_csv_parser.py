"""
Tests for the Delimited Table Reader (raw text → Table).

We need to:
1. Take the first retained line as headers
2. Split rows with the quote-aware scanner
3. Pad short rows and truncate long ones
4. Treat TSV and semicolon files as the same reader with a fixed delimiter
5. Return an empty Table, not an error, for a missing file
"""

import logging

import pytest
from structext.backends.csv_writer import write_csv
from structext.csv_parser import (
    parse_csv_file,
    parse_csv_string,
    parse_semicolon_file,
    parse_semicolon_string,
    parse_tsv_file,
    parse_tsv_string,
)
from structext.model import QuoteMode, ReadOptions, Table, WriteOptions


class TestCSVParsing:
    """Test basic parsing."""

    def test_headers_and_records(self):
        """First line is the header, the rest are records."""
        table = parse_csv_string("Name,Code\nAlice,7\nBob,3\n")
        assert table.headers == ["Name", "Code"]
        assert table.records == [
            {"Name": "Alice", "Code": "7"},
            {"Name": "Bob", "Code": "3"},
        ]

    def test_empty_content(self):
        """Empty content gives an empty Table."""
        table = parse_csv_string("")
        assert isinstance(table, Table)
        assert table.is_empty()
        assert table.records == []

    def test_header_only(self):
        table = parse_csv_string("A,B\n")
        assert table.headers == ["A", "B"]
        assert table.records == []

    def test_crlf_line_endings(self):
        table = parse_csv_string("A,B\r\n1,2\r\n")
        assert table.headers == ["A", "B"]
        assert table.records == [{"A": "1", "B": "2"}]

    def test_quoted_field_with_delimiter(self):
        """A quoted comma stays inside one field."""
        table = parse_csv_string('Name,Note\nAlice,"a,b"\n')
        assert table.records == [{"Name": "Alice", "Note": "a,b"}]

    def test_short_row_is_padded(self):
        """Missing trailing fields become empty strings."""
        table = parse_csv_string("A,B,C\n1\n")
        assert table.records == [{"A": "1", "B": "", "C": ""}]

    def test_long_row_is_truncated(self):
        """Extra fields beyond the header list are discarded."""
        table = parse_csv_string("A,B\n1,2,3,4\n")
        assert table.records == [{"A": "1", "B": "2"}]

    def test_duplicate_headers_last_wins(self):
        """Duplicate header names are kept verbatim; the last column wins in records."""
        table = parse_csv_string("a,a\n1,2\n")
        assert table.headers == ["a", "a"]
        assert table.records == [{"a": "2"}]

    def test_fields_are_trimmed(self):
        table = parse_csv_string(" A , B \n 1 , 2 \n")
        assert table.headers == ["A", "B"]
        assert table.records == [{"A": "1", "B": "2"}]


class TestReadOptions:
    """Test the effect of each read option."""

    def test_skip_empty_lines(self):
        """Blank and whitespace-only lines are dropped by default."""
        table = parse_csv_string("\n  \nA,B\n\n1,2\n   \n")
        assert table.headers == ["A", "B"]
        assert table.records == [{"A": "1", "B": "2"}]

    def test_keep_empty_lines(self):
        """With skip_empty_lines off, blank lines become empty records."""
        options = ReadOptions(skip_empty_lines=False)
        table = parse_csv_string("A,B\n\n1,2\n", options)
        assert table.records == [{"A": "", "B": ""}, {"A": "1", "B": "2"}]

    def test_no_trim(self):
        options = ReadOptions(trim_fields=False)
        table = parse_csv_string("A, B\n1, 2\n", options)
        assert table.headers == ["A", " B"]
        assert table.records == [{"A": "1", " B": " 2"}]

    def test_custom_delimiter(self):
        table = parse_csv_string("A|B\n1|2\n", ReadOptions(delimiter="|"))
        assert table.records == [{"A": "1", "B": "2"}]

    def test_doubled_quote_default_mode(self):
        """
        The default scanner drops escaped quotes. This is the documented
        behaviour, not RFC4180.
        """
        table = parse_csv_string('Quote\n"He said ""hi"""\n')
        assert table.records == [{"Quote": "He said hi"}]

    def test_doubled_quote_rfc4180_mode(self):
        options = ReadOptions(quote_mode=QuoteMode.RFC4180)
        table = parse_csv_string('Quote\n"He said ""hi"""\n', options)
        assert table.records == [{"Quote": 'He said "hi"'}]


class TestDelimiterVariants:
    """TSV and semicolon variants."""

    def test_tsv_string(self):
        table = parse_tsv_string("A\tB\n1\t2,3\n")
        assert table.records == [{"A": "1", "B": "2,3"}]

    def test_semicolon_string(self):
        table = parse_semicolon_string("A;B\n1;2,3\n")
        assert table.records == [{"A": "1", "B": "2,3"}]

    def test_variant_overrides_delimiter(self):
        """The variant forces its delimiter and leaves the caller's options alone."""
        options = ReadOptions(delimiter=",", trim_fields=False)
        table = parse_tsv_string("A\t B\n", options)
        assert table.headers == ["A", " B"]
        assert options.delimiter == ","

    def test_tsv_file(self, tmp_path):
        path = tmp_path / "clips.tsv"
        path.write_text("A\tB\n1\t2\n", encoding="utf-8")
        assert parse_tsv_file(str(path)).records == [{"A": "1", "B": "2"}]

    def test_semicolon_file(self, tmp_path):
        path = tmp_path / "clips.csv"
        path.write_text("A;B\n1;2\n", encoding="utf-8")
        assert parse_semicolon_file(str(path)).records == [{"A": "1", "B": "2"}]


class TestCSVFiles:
    """Test file-level parsing."""

    def test_parse_file(self, tmp_path):
        path = tmp_path / "clips.csv"
        path.write_text("Name,Code\nAlice,7\n", encoding="utf-8")
        table = parse_csv_file(str(path))
        assert table.headers == ["Name", "Code"]
        assert table.records == [{"Name": "Alice", "Code": "7"}]

    def test_missing_file_is_empty_table(self, tmp_path):
        """A missing file is not an error: headers and records are both empty."""
        table = parse_csv_file(str(tmp_path / "missing.csv"))
        assert table.headers == []
        assert table.records == []

    def test_empty_file_looks_like_missing_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        assert parse_csv_file(str(path)).is_empty()

    def test_bom_is_tolerated(self, tmp_path):
        """A UTF-8 byte-order-mark does not leak into the first header."""
        path = tmp_path / "excel.csv"
        path.write_bytes(b"\xef\xbb\xbfName,Code\nAlice,7\n")
        table = parse_csv_file(str(path))
        assert table.headers == ["Name", "Code"]

    def test_non_utf8_file_is_empty_table(self, tmp_path, caplog):
        """Undecodable bytes are logged and read as nothing parsed."""
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"Name\nCaf\xe9\n")
        with caplog.at_level(logging.WARNING, logger="structext.csv_parser"):
            table = parse_csv_file(str(path))
        assert table.is_empty()
        assert "Could not decode file" in caplog.text


class TestRoundTrip:
    """Write a table, read it back with the same delimiter."""

    def test_round_trip_with_null_substitution(self, tmp_path):
        """Empty cells come back as the literal string "null"."""
        path = str(tmp_path / "out.csv")
        ok, err = write_csv(path, ["Name", "Code", "Note"], [
            ["Alice", 7, ""],
            ["Bob", 3, None],
        ])
        assert ok and err is None

        table = parse_csv_file(path)
        assert table.headers == ["Name", "Code", "Note"]
        assert table.records == [
            {"Name": "Alice", "Code": "7", "Note": "null"},
            {"Name": "Bob", "Code": "3", "Note": "null"},
        ]

    def test_embedded_comma_survives(self, tmp_path):
        """A cell holding a,b is read back as one field."""
        path = str(tmp_path / "out.csv")
        write_csv(path, ["Value", "Other"], [["a,b", "x"]])
        table = parse_csv_file(path)
        assert table.records == [{"Value": "a,b", "Other": "x"}]

    @pytest.mark.parametrize("delimiter", [",", ";", "\t"])
    def test_round_trip_any_delimiter(self, tmp_path, delimiter):
        path = str(tmp_path / "out.txt")
        write_csv(path, ["A", "B"], [["1", "2"]], WriteOptions(delimiter=delimiter))
        table = parse_csv_file(path, ReadOptions(delimiter=delimiter))
        assert table.records == [{"A": "1", "B": "2"}]
