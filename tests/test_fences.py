from __future__ import annotations

import pytest

from escape_fix.errors import UnterminatedFenceError
from escape_fix.scanning.fences import FenceScanner, match_open_fence, scan_regions
from escape_fix.scanning.models import split_lines


def regions_of(text: str):
    return scan_regions(split_lines(text))


def test_single_region_records_delimiter_and_info():
    regions = regions_of("intro\n```js\nconst a = 1;\n```\noutro\n")
    assert len(regions) == 1
    region = regions[0]
    assert (region.start, region.end) == (1, 3)
    assert region.delimiter == "```"
    assert region.info == "js"
    assert region.line_range == "2-4"
    assert list(region.body) == [2]


def test_four_backtick_fence_is_not_closed_by_nested_three():
    text = "````md\n```js\nx = 1\n```\n````\n"
    regions = regions_of(text)
    assert [(r.start, r.end) for r in regions] == [(0, 4)]
    assert regions[0].fence_length == 4


def test_longer_run_closes_region():
    regions = regions_of("```\nx\n`````\nafter\n")
    assert [(r.start, r.end) for r in regions] == [(0, 2)]


def test_fence_with_info_string_inside_region_is_content():
    regions = regions_of("```\na\n```js\nb\n```\n")
    assert [(r.start, r.end) for r in regions] == [(0, 4)]


def test_tilde_and_backtick_fences_do_not_close_each_other():
    regions = regions_of("~~~\n```\n~~~\n```\ncode\n```\n")
    assert [(r.start, r.end, r.delimiter) for r in regions] == [(0, 2, "~~~"), (3, 5, "```")]


def test_regions_are_ordered_and_disjoint():
    text = "```\na\n```\ntext\n```py\nb\n```\n"
    regions = regions_of(text)
    assert [(r.start, r.end) for r in regions] == [(0, 2), (4, 6)]


def test_indented_fence_keeps_indent():
    regions = regions_of("- item\n  ```js\n  x\n  ```\n")
    assert regions[0].indent == "  "
    assert (regions[0].start, regions[0].end) == (1, 3)


def test_inline_triple_backticks_do_not_open_a_fence():
    assert match_open_fence("```foo``` is inline\n") is None
    assert regions_of("Use ```code``` inline.\n") == []


def test_crlf_lines_are_recognised():
    regions = regions_of("```js\r\n{{x}}\r\n```\r\n")
    assert [(r.start, r.end) for r in regions] == [(0, 2)]


def test_unterminated_fence_raises_with_open_line():
    with pytest.raises(UnterminatedFenceError) as excinfo:
        regions_of("text\n```\ncode\n")
    assert excinfo.value.line == 2
    assert excinfo.value.delimiter == "```"


def test_unterminated_outer_fence_with_closed_inner_fence():
    # The inner three-backtick pair is content of the four-backtick region
    with pytest.raises(UnterminatedFenceError) as excinfo:
        regions_of("````\n```\nx\n```\n")
    assert excinfo.value.line == 1


def test_scanner_state_machine_transitions():
    scanner = FenceScanner([])
    assert not scanner.inside
    assert scanner.feed(0, "```js\n") is None
    assert scanner.inside
    assert scanner.feed(1, "``\n") is None
    region = scanner.feed(2, "```\n")
    assert region is not None and (region.start, region.end) == (0, 2)
    assert not scanner.inside


def test_split_lines_keeps_terminators_and_missing_final_newline():
    assert split_lines("a\nb") == ["a\n", "b"]
    assert split_lines("a\r\nb\r\n") == ["a\r\n", "b\r\n"]
    assert split_lines("") == []
    assert "".join(split_lines("x\n\fy\n")) == "x\n\fy\n"
