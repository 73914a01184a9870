from __future__ import annotations

import pytest

from core.directory import format_directory, parse_directory, parse_directory_report, write_directory
from core.models import Channel

from conftest import SAMPLE_TEXT


def pairs(channels):
    return [(ch.name, ch.url) for ch in channels]


def test_scenario_two_valid_lines():
    channels = parse_directory(SAMPLE_TEXT)
    assert pairs(channels) == [("CNN", "http://a/cnn.m3u8"), ("BBC", "http://b/bbc.m3u8")]


def test_crlf_and_blank_lines():
    text = "A,http://a\r\n   \r\nB,http://b\r\n"
    assert pairs(parse_directory(text)) == [("A", "http://a"), ("B", "http://b")]


@pytest.mark.parametrize("line", [
    "no-comma",
    "a,b,c",
    "Name,http://x/live?a=1,2",
    ",,",
])
def test_wrong_field_count_is_dropped(line):
    assert pairs(parse_directory(f"{line}\nOK,http://ok\n")) == [("OK", "http://ok")]


def test_line_trimmed_but_fields_not():
    channels = parse_directory("  Radio One , http://r1  \n")
    assert pairs(channels) == [("Radio One ", " http://r1")]


def test_empty_fields_are_kept():
    assert pairs(parse_directory(",http://x\nName,\n")) == [("", "http://x"), ("Name", "")]


@pytest.mark.parametrize("text", ["", "\n\n", "garbage", "a,b,c\nd", "\x00,\x00,\x00", "é,ü\udcff"])
def test_never_raises(text):
    result = parse_directory(text)
    assert isinstance(result, list)


def test_duplicates_preserved_in_order():
    text = "X,http://1\nX,http://1\nY,http://2\n"
    assert pairs(parse_directory(text)) == [("X", "http://1"), ("X", "http://1"), ("Y", "http://2")]


def test_fresh_ids_on_every_parse():
    first = parse_directory("A,http://a")
    second = parse_directory("A,http://a")
    assert first[0].id != second[0].id


def test_format_then_parse_keeps_order():
    records = [Channel("One", "http://1"), Channel("Two", "rtmp://2/live"), Channel("", "")]
    assert pairs(parse_directory(format_directory(records))) == pairs(records)


def test_report_counts_dropped_lines():
    channels, dropped = parse_directory_report(SAMPLE_TEXT + "a,b,c\n")
    assert len(channels) == 2
    assert dropped == 2


def test_write_directory(tmp_path):
    out = tmp_path / "export" / "list.txt"
    write_directory([Channel("CNN", "http://a/cnn.m3u8")], out)
    assert out.read_text(encoding="utf-8") == "CNN,http://a/cnn.m3u8\n"


@pytest.mark.parametrize("name", ["A\x1cB", "C\x0cD", "E\x0bF", "G\x85H", "I\u2028J", "K\u2029L", "M\x1dN\x1eO"])
def test_only_cr_and_lf_split_lines(name):
    records = [Channel(name, "http://a"), Channel("Next", "http://b")]
    assert pairs(parse_directory(format_directory(records))) == pairs(records)


def test_lone_cr_is_a_line_break():
    assert pairs(parse_directory("A,http://a\rB,http://b")) == [("A", "http://a"), ("B", "http://b")]
