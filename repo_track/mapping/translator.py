"""
基于行级 diff 的范围坐标翻译。

先尝试保持位置的精确翻译（Range.apply）；失败且变更不是 REMOVE 时，
退回到基于删除行的启发式：

- begin 与 end 同一行且被删除：该行超出新文件行数时失败，否则锚定到新文件第 1 行
- begin 与 end 相邻且均被删除：两端各上移一行
- begin 与 end 均被删除但不相邻：begin 下移一行，end 上移一行（向内收缩）
- 仅 end 被删除：begin 下移一行，end 不变
- 其他情况：begin 不变，end 上移一行

结果 begin 锚定在第 1 列，end 延伸到行尾。
该启发式只是近似，并非精确的 diff 映射。
"""

from typing import Optional

from repo_track import logger
from repo_track.common.enum_types import FileChangeType, LineChangeType
from repo_track.common.errors import check_argument
from repo_track.text.position import Range
from repo_track.vcs.change import FileChange


def _heuristic_lines(begin_line: int, end_line: int, deleted: set, num_new_lines: int):
    begin_deleted = begin_line in deleted
    end_deleted = end_line in deleted

    if begin_deleted and end_deleted:
        if begin_line == end_line:
            if begin_line > num_new_lines:
                return None
            return 1, 1
        if end_line - begin_line == 1:
            return begin_line - 1, end_line - 1
        return begin_line + 1, end_line - 1
    if end_deleted:
        return begin_line + 1, end_line
    return begin_line, end_line - 1


def translate_range(range_: Range, file_change: FileChange) -> Optional[Range]:
    """
    将旧文件中的 range_ 翻译到 file_change 的新文件中。

    :param range_: 旧文件中的范围
    :param file_change: 旧文件与 range_ 所属文件相同的变更
    :return: 新文件中的范围；无法翻译时返回 None（正常结果，不是错误）
    """
    check_argument(range_ is not None, "range must not be None")
    check_argument(file_change is not None, "file change must not be None")

    translated = range_.apply(file_change)
    if translated is not None:
        return translated
    if file_change.type is FileChangeType.REMOVE:
        return None

    new_file = file_change.new_file
    deleted = {lc.line for lc in file_change.compute_diff() if lc.type is LineChangeType.DELETE}
    tab_size = range_.begin.tab_size
    lines = _heuristic_lines(
        range_.begin.line, range_.end.line, deleted, len(new_file.read_lines_with_eol())
    )
    if lines is None:
        logger.debug(f"Unable to translate {range_}: line {range_.begin.line} no longer exists")
        return None
    begin_line, end_line = lines
    if begin_line < 1 or end_line < 1:
        return None

    begin = new_file.position_of(begin_line, 1, tab_size)
    end = new_file.end_of_line(end_line, tab_size)
    if begin is None or end is None or begin.offset > end.offset:
        logger.debug(f"Unable to resolve lines {begin_line}-{end_line} in {new_file}")
        return None
    return Range(begin=begin, end=end)
