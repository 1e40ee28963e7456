import pytest
from pydantic import ValidationError

from repo_track import InvalidArgumentError, Range

ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"


@pytest.fixture
def single_line(make_file):
    return make_file(ALPHABET)


def test_merge_with_gap_fails(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 22, 30)
    assert a.merge(b) is None
    assert b.merge(a) is None


def test_merge_abutting(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 21, 30)
    for merged in (a.merge(b), b.merge(a)):
        assert (merged.begin.offset, merged.end.offset) == (10, 30)


def test_merge_overlapping(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 15, 25)
    for merged in (a.merge(b), b.merge(a)):
        assert (merged.begin.offset, merged.end.offset) == (10, 25)


def test_merge_subsuming(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 13, 18)
    for merged in (a.merge(b), b.merge(a)):
        assert (merged.begin.offset, merged.end.offset) == (10, 20)


def test_merge_equal_end(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 14, 20)
    for merged in (a.merge(b), b.merge(a)):
        assert (merged.begin.offset, merged.end.offset) == (10, 20)


def test_merge_equal_begin(single_line, offset_range):
    a = offset_range(single_line, 10, 20)
    b = offset_range(single_line, 10, 25)
    for merged in (a.merge(b), b.merge(a)):
        assert (merged.begin.offset, merged.end.offset) == (10, 25)


def test_merge_different_revisions(make_file, offset_range):
    a = offset_range(make_file(ALPHABET, revision="r1"), 10, 20)
    b = offset_range(make_file(ALPHABET, revision="r2"), 15, 25)
    with pytest.raises(InvalidArgumentError):
        a.merge(b)


def test_merge_different_files(make_file, offset_range):
    a = offset_range(make_file(ALPHABET, path="A.java"), 10, 20)
    b = offset_range(make_file(ALPHABET, path="B.java"), 15, 25)
    with pytest.raises(InvalidArgumentError):
        a.merge(b)


def test_length_and_content(single_line, offset_range):
    r = offset_range(single_line, 10, 20)
    assert r.length() == 11
    assert r.read_content() == "klmnopqrstu"
    assert offset_range(single_line, 3, 3).read_content() == "d"


def test_length_of_union(single_line, offset_range):
    ranges = [
        offset_range(single_line, 20, 24),
        offset_range(single_line, 0, 4),
        offset_range(single_line, 3, 9),
    ]
    assert Range.length_of(ranges) == 15
    assert Range.length_of([]) == 0
    assert Range.length_of([None, offset_range(single_line, 0, 0)]) == 1


def test_range_invariants(make_file, single_line):
    begin = single_line.position_of_offset(20)
    end = single_line.position_of_offset(10)
    with pytest.raises(ValidationError):
        Range(begin=begin, end=end)

    other = make_file(ALPHABET, revision="r2").position_of_offset(25)
    with pytest.raises(ValidationError):
        Range(begin=begin, end=other)


def test_range_properties(single_line, offset_range):
    r = offset_range(single_line, 0, 1)
    assert r.relative_path == "src/Foo.java"
    assert r.revision_id == "r1"
    assert r.file == single_line


def test_range_map_to(make_file, line_range):
    old = make_file("one\ntwo\nthree\n", revision="r1")
    new = make_file("ONE\nTWO\nTHREE\n", revision="r2")
    mapped = line_range(old, 2, 3).map_to(new)
    assert mapped.read_content() == "TWO\nTHREE"
    assert mapped.revision_id == "r2"
