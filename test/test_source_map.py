import pytest
from input_helper.source_map import (SourceLocation, SourceMappingDecoder, Source, get_line_break_positions,
                                     convert_offset_to_line_column)
from source_location.errors import DecodeFailed


def test_at_index_single_entry():
    decoder = SourceMappingDecoder()
    assert decoder.at_index(0, "0:1:0:-") == SourceLocation(0, 1, 0, "-", None)


def test_at_index_inherits_fields():
    decoder = SourceMappingDecoder()
    mapping = "0:10:0:-:0;;5:2;:::i;-1:-1:-1:o"
    assert decoder.at_index(1, mapping) == SourceLocation(0, 10, 0, "-", 0)
    assert decoder.at_index(2, mapping) == SourceLocation(5, 2, 0, "-", 0)
    assert decoder.at_index(3, mapping) == SourceLocation(5, 2, 0, "i", 0)
    # -1 start/length keep the previous value, -1 file means no source
    assert decoder.at_index(4, mapping) == SourceLocation(5, 2, -1, "o", 0)


def test_at_index_without_definition():
    decoder = SourceMappingDecoder()
    assert decoder.at_index(0, "") == SourceLocation(None, None, None, None, None)


def test_decode_matches_at_index():
    decoder = SourceMappingDecoder()
    mapping = "0:10:0:-:0;;5:2;:::i;-1:-1:-1:o;7"
    decoded = decoder.decode(mapping)
    assert len(decoded) == 6
    assert decoded == [decoder.at_index(i, mapping) for i in range(6)]


def test_index_out_of_range():
    decoder = SourceMappingDecoder()
    with pytest.raises(DecodeFailed):
        decoder.at_index(1, "0:1:0:-")
    with pytest.raises(DecodeFailed):
        decoder.at_index(-1, "0:1:0:-")


def test_malformed_map():
    decoder = SourceMappingDecoder()
    with pytest.raises(DecodeFailed):
        decoder.at_index(0, "a:1:0:-")
    with pytest.raises(DecodeFailed):
        decoder.at_index(0, "0:1:0:-:0:9")
    with pytest.raises(DecodeFailed):
        decoder.at_index(0, None)


def test_convert_offset_to_line_column():
    line_breaks = get_line_break_positions("ab\ncd\n")
    assert line_breaks == [2, 5]
    location = SourceLocation(3, 2, 0, "-", None)
    assert convert_offset_to_line_column(location, line_breaks) == {
        "start": {"line": 1, "column": 0},
        "end": {"line": 1, "column": 2}
    }
    assert convert_offset_to_line_column(SourceLocation(0, 1, 0, "-", None), line_breaks)["start"] == {"line": 0, "column": 0}
    assert convert_offset_to_line_column(SourceLocation(None, None, -1, "-", None), line_breaks) == {"start": None, "end": None}


def test_source_content(tmp_path):
    path = tmp_path / "A.sol"
    path.write_bytes("// é\ncontract A {}\n".encode("utf-8"))
    source = Source(str(path))
    assert source.line_break_positions == [5, 19]
    location = SourceLocation(6, 10, 0, "-", None)
    assert source.get_content_with_location(location) == "contract A"
    assert convert_offset_to_line_column(location, source.line_break_positions)["start"] == {"line": 1, "column": 0}
