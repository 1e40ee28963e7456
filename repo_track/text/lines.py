"""
行切分与列号计算的基础工具函数。

约定：
- `\\n`、`\\r\\n` 以及单独的 `\\r` 都视为一个行结束符
- 末尾没有行结束符的片段单独成为最后一行
- 空内容没有任何行
- 列号从 1 开始；制表符前进到下一个 tab_size 的整数倍之后
"""

from typing import List

LINE_TERMINATORS = ("\n", "\r")


def split_lines_with_eol(content: str) -> List[str]:
    """
    将文本切分为保留行结束符的行列表。

    :param content: 文件内容
    :return: 每个元素为一行（含行结束符）
    """
    lines = []
    start = 0
    i = 0
    length = len(content)
    while i < length:
        ch = content[i]
        if ch == "\r" and i + 1 < length and content[i + 1] == "\n":
            # Windows 行尾，\r\n 作为一个整体
            i += 1
            lines.append(content[start : i + 1])
            start = i + 1
        elif ch in LINE_TERMINATORS:
            lines.append(content[start : i + 1])
            start = i + 1
        i += 1
    if start < length:
        lines.append(content[start:])
    return lines


def strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def is_line_terminator(ch: str) -> bool:
    return ch in LINE_TERMINATORS


def next_column(column: int, ch: str, tab_size: int) -> int:
    """
    计算字符 ch 之后的列号。

    :param column: 当前列号（从 1 开始）
    :param ch: 当前列上的字符
    :param tab_size: 制表符宽度
    :return: 下一个字符所在的列号
    """
    if ch == "\t":
        return ((column - 1) // tab_size + 1) * tab_size + 1
    return column + 1


def column_of(prefix: str, tab_size: int) -> int:
    """
    计算紧随 prefix 之后的字符所在列号。

    :param prefix: 同一行中位于目标字符之前的文本
    :param tab_size: 制表符宽度
    """
    column = 1
    for ch in prefix:
        column = next_column(column, ch, tab_size)
    return column
