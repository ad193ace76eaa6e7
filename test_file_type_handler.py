import json
import tempfile
from pathlib import Path

import pytest

from errors import ExternalIOFailure
from file_type_handler import FileTypeHandler, export_document, sanitize_json_text


def test_missing_file_loads_default_document():
    with tempfile.TemporaryDirectory() as tmp:
        loaded = FileTypeHandler(str(Path(tmp) / "new.json")).load_or_create()

    assert loaded.headers == ["column1", "column2", "column3"]
    assert loaded.rows == [["", "", ""]]


def test_json_array_uses_union_of_keys():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "data.json"
        path.write_text('[{"a":1},{"b":true,"a":null},{"c":[1]}]')

        loaded = FileTypeHandler(str(path)).load_or_create()

    assert loaded.json_format == "array"
    assert loaded.headers == ["a", "b", "c"]
    assert loaded.rows == [["1", "", ""], ["", "true", ""], ["", "", "[1]"]]


def test_json_object_round_trips_as_key_value():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        path.write_text('{"name":"x","count":3}')
        handler = FileTypeHandler(str(path))

        loaded = handler.load_or_create()
        assert loaded.json_format == "object"
        assert loaded.headers == ["Key", "Value"]
        assert loaded.rows == [["name", "x"], ["count", "3"]]

        handler.save(loaded.headers, loaded.rows, loaded.json_format)
        assert json.loads(path.read_text()) == {"name": "x", "count": 3}


def test_jsonl_skips_bad_lines_and_writes_compact_records():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "log.jsonl"
        path.write_text('{"a":1}\nnot json\n\n{"a":2,"b":"x"}\n')
        handler = FileTypeHandler(str(path))

        loaded = handler.load_or_create()
        assert loaded.headers == ["a", "b"]
        assert loaded.rows == [["1", ""], ["2", "x"]]

        handler.save(loaded.headers, loaded.rows)
        assert path.read_text().splitlines() == ['{"a":1,"b":null}', '{"a":2,"b":"x"}']


def test_csv_keeps_text_cells():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "t.csv"
        path.write_text('id,note\n007,"a, b"\n8,\n')
        handler = FileTypeHandler(str(path))

        loaded = handler.load_or_create()
        assert loaded.headers == ["id", "note"]
        assert loaded.rows == [["007", "a, b"], ["8", ""]]

        handler.save(loaded.headers, loaded.rows)
        again = handler.load_or_create()
        assert again.rows == loaded.rows


def test_export_writes_requested_format():
    with tempfile.TemporaryDirectory() as tmp:
        target = Path(tmp) / "out.json"

        export_document(["a", "b"], [["1", "x"]], str(target))

        assert json.loads(target.read_text()) == [{"a": 1, "b": "x"}]


def test_unsupported_extension():
    with pytest.raises(ExternalIOFailure):
        FileTypeHandler("notes.txt")


def test_invalid_json_is_external_io_failure():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "bad.json"
        path.write_text("[{")

        with pytest.raises(ExternalIOFailure):
            FileTypeHandler(str(path)).load_or_create()


def test_sanitize_json_text_replaces_control_characters():
    assert sanitize_json_text("a\x00b\tc\n") == "a b\tc\n"


def test_csv_rows_wider_than_header_are_padded():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "wide.csv"
        path.write_text("a,b\n1,2\n3,4,5\n6\n")

        loaded = FileTypeHandler(str(path)).load_or_create()

    assert loaded.headers == ["a", "b", "column3"]
    assert loaded.rows == [["1", "2", ""], ["3", "4", "5"], ["6", "", ""]]


def test_csv_quoted_newline_counts_as_one_record():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "multi.csv"
        path.write_text('a,b\n"line one\nline two",2\n')

        loaded = FileTypeHandler(str(path)).load_or_create()

    assert loaded.headers == ["a", "b"]
    assert loaded.rows == [["line one\nline two", "2"]]


def test_overflowing_number_round_trips_as_text():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "big.json"
        handler = FileTypeHandler(str(path))

        handler.save(["a"], [["1e400"]])
        assert json.loads(path.read_text()) == [{"a": "1e400"}]

        loaded = handler.load_or_create()

    assert loaded.rows == [["1e400"]]
