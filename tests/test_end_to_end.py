"""
端到端场景：一个没有签名的实体 Foo 在多次提交中被持续追踪。

- c1：新增文件，Foo 位于第 1-5 行
- c2：修改无关的第 20-25 行
- c3：在文件开头插入两行，Foo 下移到第 3-7 行
- c4：修改 Foo 内部的一行
"""

import pytest

from repo_track import (
    Commit,
    DiffFileChange,
    MatchKind,
    Mapping,
    RevisionRange,
    Tracker,
)

PATH = "src/F.java"


def numbered(overrides=None):
    overrides = overrides or {}
    return "".join(f"{overrides.get(i, f'line {i}')}\n" for i in range(1, 31))


@pytest.fixture
def revisions(make_file):
    c1 = make_file(numbered(), revision="c1", path=PATH)
    c2 = make_file(numbered({i: f"changed {i}" for i in range(20, 26)}), revision="c2", path=PATH)
    c3 = make_file("x\ny\n" + c2.read_content(), revision="c3", path=PATH)
    c4 = make_file(c3.read_content().replace("line 2\n", "LINE 2\n"), revision="c4", path=PATH)
    return c1, c2, c3, c4


def revision_range(ordinal, old, new):
    change = DiffFileChange(old, new)
    commit = Commit(id=new.revision_id, message=f"commit {ordinal}", file_changes=[change])
    predecessor = old.revision_id if old is not None else None
    return RevisionRange(ordinal, new.revision_id, predecessor, commits=[commit])


def test_unrelated_change_links_by_position(revisions, mappable, line_range):
    c1, c2, _, _ = revisions
    foo_c1 = mappable(line_range(c1, 1, 5))
    foo_c2 = mappable(line_range(c2, 1, 5))

    result = Mapping().map([foo_c1], [foo_c2], revision_range(2, c1, c2))

    assert result.get_successor(foo_c1) is foo_c2
    assert result.get_match_kind(foo_c1) is MatchKind.POSITION


def test_lifespan_across_commits(revisions, mappable, line_range):
    c1, c2, c3, c4 = revisions
    steps = [
        (revision_range(1, None, c1), mappable(line_range(c1, 1, 5))),
        (revision_range(2, c1, c2), mappable(line_range(c2, 1, 5))),
        (revision_range(3, c2, c3), mappable(line_range(c3, 3, 7))),
        (revision_range(4, c3, c4), mappable(line_range(c4, 3, 7))),
    ]

    mapping = Mapping()
    tracker = Tracker()
    for range_, foo in steps:
        result = mapping.map_next([foo], range_)
        tracker.add(result)

    assert len(tracker.lifespans) == 1
    lifespan = tracker.lifespans[0]
    assert [e.ordinal for e in lifespan] == [1, 2, 3, 4]
    assert [e.num_changes for e in lifespan] == [0, 0, 0, 1]
    assert [e.locations[0].begin_line for e in lifespan] == [1, 1, 3, 3]
    assert lifespan.is_changed
    assert tracker.lifespan_of(steps[-1][1]) is lifespan


def test_removed_file_ends_lifespan(revisions, mappable, line_range, make_file):
    c1, _, _, _ = revisions
    other = make_file("other\n", revision="c2", path="src/G.java")
    foo = mappable(line_range(c1, 1, 5))
    bar = mappable(line_range(other, 1, 1))
    removal = DiffFileChange(old_file=c1)
    addition = DiffFileChange(new_file=other)

    result = Mapping().map([foo], [bar], RevisionRange(2, "c2", "c1", file_changes=[removal, addition]))

    assert result.get_successor(foo) is None
    assert result.get_without_predecessor() == [bar]
