import logging

import pytest
from pydantic import ValidationError

from repo_track import (
    BinaryFileError,
    Commit,
    DiffFileChange,
    DiskFile,
    FileChangeType,
    InvalidArgumentError,
    LineChange,
    LineChangeType,
    RevisionRange,
)
from repo_track.vcs import merge_file_changes


def test_file_change_types(make_file):
    old = make_file("a\n", revision="r1")
    new = make_file("b\n", revision="r2")
    moved = make_file("b\n", revision="r2", path="src/Bar.java")

    assert DiffFileChange(new_file=new).type is FileChangeType.ADD
    assert DiffFileChange(old_file=old).type is FileChangeType.REMOVE
    assert DiffFileChange(old, new).type is FileChangeType.MODIFY
    assert DiffFileChange(old, moved).type is FileChangeType.RELOCATE


def test_file_change_requires_a_file():
    with pytest.raises(InvalidArgumentError):
        DiffFileChange()


def test_compute_diff_orders_deletions_before_insertions(make_file):
    old = make_file("a\nb\nc\n", revision="r1")
    new = make_file("a\nB\nc\nd\n", revision="r2")
    diff = DiffFileChange(old, new).compute_diff()

    assert [(lc.type, lc.line) for lc in diff] == [
        (LineChangeType.DELETE, 2),
        (LineChangeType.INSERT, 2),
        (LineChangeType.INSERT, 4),
    ]
    assert diff[0].content == "b"
    assert diff[1].content == "B"


def test_diff_is_logged_by_package_logger(make_file, caplog):
    old = make_file("a\n", revision="r1")
    new = make_file("b\n", revision="r2")

    with caplog.at_level(logging.DEBUG, logger="repo_track"):
        DiffFileChange(old, new).compute_diff()

    assert [record.name for record in caplog.records] == ["repo_track"]
    assert "Computed 2 line changes" in caplog.text



def test_compute_line_delta(make_file):
    old = make_file("a\nb\nc\n", revision="r1")
    assert DiffFileChange(old, make_file("a\nB\nc\nd\n", revision="r2")).compute_line_delta() == 1
    assert DiffFileChange(old, make_file("a\n", revision="r2")).compute_line_delta() == -2
    assert DiffFileChange(new_file=old).compute_line_delta() == 3
    assert DiffFileChange(old_file=old).compute_line_delta() == -3


def test_line_change_validation():
    with pytest.raises(ValidationError):
        LineChange(type=LineChangeType.INSERT, line=0)


def test_disk_file_reads_checked_out_revision(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Foo.java").write_text("class Foo {\n}\n", encoding="utf-8")

    file = DiskFile(str(tmp_path), "src/Foo.java", "r1")
    assert file.read_lines() == ["class Foo {", "}"]
    assert not file.is_binary()
    assert file.position_of(2, 1).read_char() == "}"


def test_disk_file_missing(tmp_path):
    file = DiskFile(str(tmp_path), "missing.txt", "r1")
    with pytest.raises(OSError):
        file.read_content()


def test_binary_file_is_rejected(tmp_path):
    (tmp_path / "image.bin").write_bytes(bytes(range(128, 256)) * 4)
    (tmp_path / "text.txt").write_text("hello\n", encoding="utf-8")

    binary = DiskFile(str(tmp_path), "image.bin", "r1")
    text = DiskFile(str(tmp_path), "text.txt", "r1")
    assert binary.is_binary()

    with pytest.raises(BinaryFileError):
        binary.read_content()
    with pytest.raises(BinaryFileError):
        DiffFileChange(binary, text).compute_diff()


def test_revision_range_collects_commit_changes(make_file):
    first = DiffFileChange(new_file=make_file("a\n", revision="r2"))
    second = DiffFileChange(new_file=make_file("b\n", revision="r2", path="src/Bar.java"))
    commits = [
        Commit(id="c1", message="add foo", file_changes=[first]),
        Commit(id="c2", message="add bar", file_changes=[second]),
    ]
    range_ = RevisionRange(2, "r2", "r1", commits=commits)

    assert range_.file_changes == [first, second]
    assert range_.latest_commit.id == "c2"


def test_revision_range_merges_changes_of_same_file(make_file):
    base = make_file("a\n", revision="r0")
    middle = make_file("a\nb\n", revision="mid")
    head = make_file("a\nb\nc\n", revision="r2")
    commits = [
        Commit(id="mid", file_changes=[DiffFileChange(base, middle)]),
        Commit(id="r2", file_changes=[DiffFileChange(middle, head)]),
    ]

    (change,) = RevisionRange(2, "r2", "r0", commits=commits).file_changes

    assert change.old_file is base
    assert change.new_file is head
    assert change.type is FileChangeType.MODIFY
    assert change.compute_line_delta() == 2


def test_merge_drops_file_added_and_removed(make_file):
    temp = make_file("tmp\n", revision="mid", path="src/Tmp.java")
    old = make_file("a\n", revision="r0")
    moved = make_file("a\n", revision="mid", path="src/Bar.java")
    renamed = make_file("a\n", revision="r2", path="src/Baz.java")

    merged = merge_file_changes([
        DiffFileChange(new_file=temp),
        DiffFileChange(old, moved),
        DiffFileChange(old_file=temp),
        DiffFileChange(moved, renamed),
    ])

    assert len(merged) == 1
    assert merged[0].old_file is old
    assert merged[0].new_file is renamed
    assert merged[0].type is FileChangeType.RELOCATE


def test_revision_range_validation():
    with pytest.raises(InvalidArgumentError):
        RevisionRange(0, "r1")
    with pytest.raises(InvalidArgumentError):
        RevisionRange(1, "")

    range_ = RevisionRange(1, "r1")
    assert range_.latest_commit is None
    assert range_.file_changes == []
    assert range_.predecessor_revision_id is None
