from __future__ import annotations

import csv
import io

import pytest

from barcode_mapper.models import MappingResult, OutputMode
from barcode_mapper.services.render import (
    MARKERS,
    format_id_list,
    format_record_id,
    get_renderer,
    render_advanced,
    render_simple,
)

ROWS = (("Barcode",), ("AB100",), ("AB101",), ("AB102",))
MAPPING = (MappingResult((1001,)), MappingResult(()), MappingResult((1002, 1003)))


def test_format_record_id():
    assert format_record_id(1001) == "i1001"


def test_format_id_list():
    assert format_id_list(MappingResult((1002, 1003))) == "i1002;i1003"
    assert format_id_list(MappingResult(())) == ""


def test_simple_output_only_single_matches():
    out = io.StringIO()
    written = render_simple(ROWS, MAPPING, 1, out)
    assert out.getvalue() == "i1001\n"
    assert written == 1


def test_simple_output_preserves_input_order():
    rows = (("h",), ("a",), ("b",), ("c",))
    mapping = (MappingResult((3,)), MappingResult((1, 2)), MappingResult((1,)))
    out = io.StringIO()
    render_simple(rows, mapping, 1, out)
    assert out.getvalue().splitlines() == ["i3", "i1"]


def test_advanced_output_example():
    out = io.StringIO()
    written = render_advanced(ROWS, MAPPING, 1, out)
    assert out.getvalue() == (
        ",,Barcode\n"
        "-,i1001,AB100\n"
        "x,,AB101\n"
        "*,i1002;i1003,AB102\n"
    )
    assert written == len(ROWS)


def test_advanced_keeps_original_fields_and_headers():
    rows = (("Title", "Barcode"), ("Meta",), ("Book, vol. 1", "AB100", "extra"))
    out = io.StringIO()
    render_advanced(rows, (MappingResult((5,)),), 2, out)
    parsed = list(csv.reader(io.StringIO(out.getvalue())))
    assert parsed == [
        ["", "", "Title", "Barcode"],
        ["", "", "Meta"],
        ["-", "i5", "Book, vol. 1", "AB100", "extra"],
    ]


def test_advanced_output_round_trips_special_fields():
    rows = (("h",), ('a "quoted", value', "line\nbreak"))
    out = io.StringIO()
    render_advanced(rows, (MappingResult(()),), 1, out)
    parsed = list(csv.reader(io.StringIO(out.getvalue(), newline="")))
    assert parsed[1] == ["x", "", 'a "quoted", value', "line\nbreak"]


def test_marker_matches_id_count():
    for result in [MappingResult(()), MappingResult((1,)), MappingResult((1, 2, 3))]:
        out = io.StringIO()
        render_advanced((("h",), ("v",)), (result,), 1, out)
        marker, ids = next(csv.reader(io.StringIO(out.getvalue().splitlines()[1])))[:2]
        assert marker == MARKERS[result.kind]
        assert (ids == "") == (marker == "x")
        assert (ids.count(";") == 0 and ids != "") == (marker == "-")
        assert (ids.count(";") >= 1) == (marker == "*")


def test_skip_larger_than_rows():
    out = io.StringIO()
    assert render_advanced((("a",),), (), 3, out) == 1
    assert out.getvalue() == ",,a\n"


@pytest.mark.parametrize("renderer", [render_simple, render_advanced])
def test_misaligned_mapping_rejected(renderer):
    with pytest.raises(ValueError):
        renderer(ROWS, MAPPING[:2], 1, io.StringIO())


def test_get_renderer():
    assert get_renderer(OutputMode.SIMPLE) is render_simple
    assert get_renderer(OutputMode.ADVANCED) is render_advanced


def test_blank_header_row_echoes_empty_field():
    out = io.StringIO()
    render_advanced((("",),), (), 1, out)
    assert out.getvalue() == ",,\n"
