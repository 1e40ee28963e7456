"""
本模块定义了版本库中“某个版本下的某个文件”的访问接口。

主要内容包括：
1. VCSFile：抽象基类，子类只需提供相对路径、版本号与原始字节
2. 基于内容的通用操作：按行读取（保留 / 去除行结束符）、二进制判定、
   行号列号 ↔ 绝对偏移量之间的双向换算
3. 两个具体实现：
   - InMemoryFile：内容直接保存在内存中（测试与外部分析器常用）
   - DiskFile：读取某个已检出版本目录下的文件，首次读取后缓存字节

VCSFile 按 (相对路径, 版本号) 判等，可作为 dict 的 key 使用。
"""

import os
from abc import ABC, abstractmethod
from typing import List, Optional

from repo_track import logger
from repo_track.common.errors import BinaryFileError, check_argument
from repo_track.config import (
    BINARY_RATIO_THRESHOLD,
    BINARY_RATIO_THRESHOLD_OTHER,
    DEFAULT_ENCODING,
    DEFAULT_TAB_SIZE,
    SOURCE_SUFFIXES,
)
from repo_track.text.lines import is_line_terminator, next_column, split_lines_with_eol, strip_eol


# \t \n \f \r
_ASCII_CONTROL_BYTES = (0x09, 0x0A, 0x0C, 0x0D)


class VCSFile(ABC):

    encoding: str = DEFAULT_ENCODING

    @property
    @abstractmethod
    def relative_path(self) -> str:
        pass

    @property
    @abstractmethod
    def revision_id(self) -> str:
        pass

    @abstractmethod
    def read_all_bytes(self) -> bytes:
        """读取文件原始字节，I/O 错误直接向上抛出。"""
        pass

    def read_content(self) -> str:
        """
        以文本形式读取文件内容。

        :raises BinaryFileError: 文件被判定为二进制文件
        :raises OSError: 读取失败
        """
        if self.is_binary():
            raise BinaryFileError(f"Unable to read content of binary file: {self}")
        return self.read_all_bytes().decode(self.encoding)

    def read_lines_with_eol(self) -> List[str]:
        return split_lines_with_eol(self.read_content())

    def read_lines(self) -> List[str]:
        """读取所有行，去除行结束符。"""
        return [strip_eol(line) for line in self.read_lines_with_eol()]

    def is_binary(self) -> bool:
        """
        根据非 ASCII 字节占比判断文件是否为二进制文件。

        已知源码后缀（见 SOURCE_SUFFIXES）使用更严格的阈值，
        空文件视为文本文件。
        """
        data = self.read_all_bytes()
        if not data:
            return False
        num_non_ascii = sum(
            1 for b in data
            if not (b in _ASCII_CONTROL_BYTES or 0x20 <= b <= 0x7E)
        )
        ratio = num_non_ascii / len(data)
        if self.relative_path.lower().endswith(SOURCE_SUFFIXES):
            return ratio > BINARY_RATIO_THRESHOLD
        return ratio > BINARY_RATIO_THRESHOLD_OTHER

    def position_of(self, line: int, column: int, tab_size: int = DEFAULT_TAB_SIZE):
        """
        根据行号与列号定位字符。

        逐字符扫描目标行并按制表符宽度推进列号：
        - 列号恰好命中某个字符时返回该字符的位置
        - 命中行结束符、跨过目标列（落在制表符中间）或超出行尾时返回 None

        :param line: 行号，从 1 开始
        :param column: 列号，从 1 开始
        :param tab_size: 制表符宽度
        :return: Optional[Position]
        """
        from repo_track.text.position import Position

        check_argument(line >= 1, "line < 1")
        check_argument(column >= 1, "column < 1")
        check_argument(tab_size >= 1, "tab size < 1")

        lines = self.read_lines_with_eol()
        if line > len(lines):
            return None
        target = lines[line - 1]
        col = 1
        for line_offset, ch in enumerate(target):
            if is_line_terminator(ch) or col > column:
                return None
            if col == column:
                offset = line_offset + sum(len(prev) for prev in lines[: line - 1])
                return Position(
                    file=self,
                    line=line,
                    column=column,
                    offset=offset,
                    line_offset=line_offset,
                    tab_size=tab_size,
                )
            col = next_column(col, ch, tab_size)
        return None

    def position_of_offset(self, offset: int, tab_size: int = DEFAULT_TAB_SIZE):
        """
        根据绝对偏移量定位字符，并推导其行号与列号。

        :param offset: 从文件开头起算的字符偏移量
        :param tab_size: 制表符宽度
        :return: Optional[Position]，偏移量落在行结束符上或超出文件末尾时返回 None
        """
        from repo_track.text.position import Position

        check_argument(offset >= 0, "offset < 0")
        check_argument(tab_size >= 1, "tab size < 1")

        line_start = 0
        for line_number, text in enumerate(self.read_lines_with_eol(), start=1):
            if offset < line_start + len(text):
                line_offset = offset - line_start
                if is_line_terminator(text[line_offset]):
                    return None
                col = 1
                for ch in text[:line_offset]:
                    col = next_column(col, ch, tab_size)
                return Position(
                    file=self,
                    line=line_number,
                    column=col,
                    offset=offset,
                    line_offset=line_offset,
                    tab_size=tab_size,
                )
            line_start += len(text)
        return None

    def end_of_line(self, line: int, tab_size: int = DEFAULT_TAB_SIZE):
        """返回第 line 行最后一个非行结束符字符的位置；行不存在或为空行时返回 None。"""
        check_argument(line >= 1, "line < 1")
        lines = self.read_lines_with_eol()
        if line > len(lines):
            return None
        text = strip_eol(lines[line - 1])
        if not text:
            return None
        line_start = sum(len(prev) for prev in lines[: line - 1])
        return self.position_of_offset(line_start + len(text) - 1, tab_size)

    def same_location(self, other: "VCSFile") -> bool:
        """判断两个文件是否具有相同的相对路径（忽略版本）。"""
        return other is not None and self.relative_path == other.relative_path

    def __eq__(self, other):
        if not isinstance(other, VCSFile):
            return NotImplemented
        return (self.relative_path, self.revision_id) == (other.relative_path, other.revision_id)

    def __hash__(self):
        return hash((self.relative_path, self.revision_id))

    def __str__(self):
        return f"{self.relative_path}@{self.revision_id}"

    def __repr__(self):
        return f"{type(self).__name__}({self.relative_path!r}, {self.revision_id!r})"


class InMemoryFile(VCSFile):
    """内容保存在内存中的文件，始终视为文本文件。"""

    def __init__(self, relative_path: str, revision_id: str, content: str):
        check_argument(relative_path, "relative path must not be empty")
        self._relative_path = relative_path
        self._revision_id = revision_id
        self._content = content

    @property
    def relative_path(self) -> str:
        return self._relative_path

    @property
    def revision_id(self) -> str:
        return self._revision_id

    def read_all_bytes(self) -> bytes:
        return self._content.encode(self.encoding)

    def read_content(self) -> str:
        return self._content

    def is_binary(self) -> bool:
        return False


class DiskFile(VCSFile):
    """
    已检出版本目录中的文件。

    :param root: 该版本检出后的根目录
    :param relative_path: 相对于 root 的路径
    :param revision_id: 版本号
    :param encoding: 解码使用的字符编码
    """

    def __init__(self, root: str, relative_path: str, revision_id: str, encoding: str = DEFAULT_ENCODING):
        check_argument(relative_path, "relative path must not be empty")
        self.root = root
        self._relative_path = relative_path
        self._revision_id = revision_id
        self.encoding = encoding
        self._bytes: Optional[bytes] = None

    @property
    def relative_path(self) -> str:
        return self._relative_path

    @property
    def revision_id(self) -> str:
        return self._revision_id

    @property
    def path(self) -> str:
        return os.path.join(self.root, self._relative_path)

    def read_all_bytes(self) -> bytes:
        if self._bytes is None:
            logger.debug(f"Reading {self.path}")
            with open(self.path, "rb") as f:
                self._bytes = f.read()
        return self._bytes
