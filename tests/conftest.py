"""Pytest 配置和 fixtures

定义所有测试共享的文件、范围构造工具。
"""

import pytest

from repo_track import BasicMappable, InMemoryFile, Range


@pytest.fixture
def make_file():
    """创建内存文件的工厂"""

    def _make(content: str, revision: str = "r1", path: str = "src/Foo.java") -> InMemoryFile:
        return InMemoryFile(path, revision, content)

    return _make


@pytest.fixture
def offset_range():
    """按闭区间偏移量创建范围的工厂"""

    def _make(file, begin: int, end: int, tab_size: int = 4) -> Range:
        return Range(
            begin=file.position_of_offset(begin, tab_size),
            end=file.position_of_offset(end, tab_size),
        )

    return _make


@pytest.fixture
def line_range():
    """创建覆盖若干整行（第 1 列到行尾）的范围的工厂"""

    def _make(file, begin_line: int, end_line: int, tab_size: int = 4) -> Range:
        return Range(
            begin=file.position_of(begin_line, 1, tab_size),
            end=file.end_of_line(end_line, tab_size),
        )

    return _make


@pytest.fixture
def mappable():
    """创建 BasicMappable 的工厂"""

    def _make(*ranges, signature=None, metadata=None) -> BasicMappable:
        return BasicMappable(list(ranges), signature, metadata)

    return _make


@pytest.fixture
def numbered_lines():
    """生成 n 行形如 `line 1` 的文本"""

    def _make(n: int, overrides=None) -> str:
        overrides = overrides or {}
        return "".join(f"{overrides.get(i, f'line {i}')}\n" for i in range(1, n + 1))

    return _make
