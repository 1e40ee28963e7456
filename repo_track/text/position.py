"""
本模块定义了文本位置与范围的代数运算。

主要内容包括：
1. Position：锚定在某个文件某个版本上的字符位置
   （绝对偏移量 + 由其推导出的行号 / 列号 + 推导时使用的制表符宽度）
2. Range：同一文件同一版本内的有序位置对 (begin, end)，end 为闭区间
3. 位置与范围在文件变更（FileChange）下的翻译

两个 Position 只有在同一文件、同一版本内才可比较。
"""

from typing import TYPE_CHECKING, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from repo_track.common.enum_types import FileChangeType, LineChangeType
from repo_track.common.errors import check_argument, check_state
from repo_track.vcs.file import VCSFile

if TYPE_CHECKING:
    from repo_track.vcs.change import FileChange, LineChange


def _pair_layout_changes(changes: List["LineChange"]):
    """
    将删除与插入两两配对，找出真正改变行布局的变更。

    被配对的删除 / 插入对应“原地修改”的行，不影响后续行号；
    剩余的纯删除与纯插入才会导致行号平移。

    :return: (未配对的删除列表, 未配对的插入列表)
    """
    dels = sorted(
        (lc for lc in changes if lc.type is LineChangeType.DELETE),
        key=lambda lc: lc.line,
    )
    ins = sorted(
        (lc for lc in changes if lc.type is LineChangeType.INSERT),
        key=lambda lc: lc.line,
    )
    dels_without_ins = []
    ins_without_dels = []
    dels_idx, ins_idx = 0, 0
    while dels_idx < len(dels) and ins_idx < len(ins):
        deletion, insertion = dels[dels_idx], ins[ins_idx]
        del_line = deletion.line + len(ins_without_dels)
        in_line = insertion.line + len(dels_without_ins)
        if del_line == in_line:
            dels_idx += 1
            ins_idx += 1
        elif del_line < in_line:
            dels_without_ins.append(deletion)
            dels_idx += 1
        else:
            ins_without_dels.append(insertion)
            ins_idx += 1
    dels_without_ins.extend(dels[dels_idx:])
    ins_without_dels.extend(ins[ins_idx:])
    return dels_without_ins, ins_without_dels


class Position(BaseModel):
    """
    表示文件某个版本中的一个字符位置。

    属性说明：
    - file：所属文件（包含相对路径与版本号）
    - line / column：从 1 开始的行号与列号（列号考虑制表符宽度）
    - offset：从文件开头起算的绝对字符偏移量
    - line_offset：该字符在所在行内的偏移量
    - tab_size：推导列号时使用的制表符宽度
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file: VCSFile
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    offset: int = Field(ge=0)
    line_offset: int = Field(ge=0)
    tab_size: int = Field(ge=1)

    @property
    def relative_path(self) -> str:
        return self.file.relative_path

    @property
    def revision_id(self) -> str:
        return self.file.revision_id

    def same_file(self, other: "Position") -> bool:
        """判断两个位置是否位于同一文件的同一版本。"""
        return other is not None and self.file == other.file

    def compare_offset(self, other: "Position") -> int:
        """
        按偏移量比较两个位置。

        :return: 负数 / 0 / 正数，分别表示位于 other 之前 / 相同 / 之后
        :raises InvalidArgumentError: 两个位置不属于同一文件同一版本
        """
        check_argument(
            self.same_file(other),
            "Positions of different files are not comparable: %s and %s",
            self.file, other.file if other is not None else None,
        )
        return self.offset - other.offset

    def apply(self, file_change: "FileChange") -> Optional["Position"]:
        """
        将当前位置翻译到 file_change 的新文件中。

        翻译逻辑：
        - 删除文件（REMOVE）没有对应位置
        - 删除与插入两两配对后，位于当前行之上的纯删除 / 纯插入使行号平移
        - 当前行被整体删除，或新行为空，则无法翻译
        - 新旧行文本相同时保留列号，否则退回到第 1 列

        :param file_change: 旧文件为当前位置所属文件的变更
        :return: 新文件中的位置；无法翻译时返回 None
        """
        check_argument(file_change is not None, "file change must not be None")
        old_file = file_change.old_file
        check_argument(old_file is not None, "The given file change has no old file.")
        check_argument(
            old_file == self.file,
            "The given file change references an invalid file: %s", old_file,
        )
        if file_change.type is FileChangeType.REMOVE:
            return None
        new_file = file_change.new_file
        check_state(new_file is not None, "Non-remove file change without new file")

        dels_without_ins, ins_without_dels = _pair_layout_changes(file_change.compute_diff())

        # 当前行被整体删除
        if any(lc.line == self.line for lc in dels_without_ins):
            return None

        layout_changes = sorted(dels_without_ins + ins_without_dels, key=lambda lc: lc.line)
        relevant_dels = []
        relevant_ins = []
        for lc in layout_changes:
            if lc.type is LineChangeType.DELETE and lc.line <= self.line:
                relevant_dels.append(lc)
            elif lc.type is LineChangeType.INSERT:
                in_line = lc.line + len(relevant_dels) - len(relevant_ins)
                if in_line <= self.line:
                    relevant_ins.append(lc)
        mapped_line = self.line - len(relevant_dels) + len(relevant_ins)

        new_lines = new_file.read_lines()
        if mapped_line < 1 or mapped_line > len(new_lines):
            return None
        new_line = new_lines[mapped_line - 1]
        if not new_line:
            # 空行上无法创建位置
            return None
        old_line = old_file.read_lines()[self.line - 1]
        mapped_column = self.column if old_line == new_line else 1

        position = new_file.position_of(mapped_line, mapped_column, self.tab_size)
        check_state(position is not None, "Unable to resolve translated position %d:%d", mapped_line, mapped_column)
        return position

    def next_line(self) -> Optional["Position"]:
        """返回下一行第 1 列的位置；已是最后一行时返回 None。"""
        num_lines = len(self.file.read_lines_with_eol())
        check_state(num_lines >= self.line, "Position beyond end of file: %s", self)
        if num_lines == self.line:
            return None
        return self.file.position_of(self.line + 1, 1, self.tab_size)

    def previous_line(self) -> Optional["Position"]:
        """返回上一行第 1 列的位置；已是第一行时返回 None。"""
        if self.line == 1:
            return None
        return self.file.position_of(self.line - 1, 1, self.tab_size)

    def begin_of_line(self) -> "Position":
        position = self.file.position_of(self.line, 1, self.tab_size)
        check_state(position is not None, "Unable to resolve begin of line %d", self.line)
        return position

    def end_of_line(self) -> "Position":
        """返回当前行最后一个非行结束符字符的位置。"""
        position = self.file.end_of_line(self.line, self.tab_size)
        check_state(position is not None, "Unable to resolve end of line %d", self.line)
        return position

    def map_to(self, file: VCSFile) -> Optional["Position"]:
        """在另一个文件中按相同的行号 / 列号定位。"""
        check_argument(file is not None, "file must not be None")
        return file.position_of(self.line, self.column, self.tab_size)

    def read_char(self) -> str:
        return self.file.read_content()[self.offset]

    def __str__(self) -> str:
        return (
            f"Position(file={self.file}, line={self.line}, column={self.column}, "
            f"offset={self.offset}, line_offset={self.line_offset}, tab_size={self.tab_size})"
        )


class Range(BaseModel):
    """
    同一文件同一版本内的连续文本区间。

    - begin / end 均为闭区间端点，即 end 指向区间内最后一个字符
    - 不变量：begin 与 end 属于同一文件同一版本，且 begin.offset <= end.offset
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    begin: Position
    end: Position

    @model_validator(mode="after")
    def validate_bounds(self) -> "Range":
        if not self.begin.same_file(self.end):
            raise ValueError("Begin and end position reference different files.")
        if self.begin.offset > self.end.offset:
            raise ValueError("Begin must not be after end.")
        return self

    @property
    def file(self) -> VCSFile:
        return self.begin.file

    @property
    def relative_path(self) -> str:
        return self.begin.relative_path

    @property
    def revision_id(self) -> str:
        return self.begin.revision_id

    def length(self) -> int:
        return (self.end.offset + 1) - self.begin.offset

    @staticmethod
    def length_of(ranges: Iterable["Range"]) -> int:
        """
        计算一组范围并集的长度（重叠或相邻部分只计算一次）。

        :param ranges: 同一文件同一版本内的范围集合，None 元素被忽略
        """
        queue = sorted((r for r in ranges or [] if r is not None), key=lambda r: r.begin.offset)
        parts = []
        while len(queue) >= 2:
            head, following = queue[0], queue[1]
            merged = head.merge(following)
            if merged is not None:
                queue[0:2] = [merged]
            else:
                parts.append(head)
                queue.pop(0)
        parts.extend(queue)
        return sum(part.length() for part in parts)

    def read_content(self) -> str:
        return self.file.read_content()[self.begin.offset : self.end.offset + 1]

    def merge(self, other: "Range") -> Optional["Range"]:
        """
        合并两个重叠或相邻（间隔不超过一个偏移量）的范围。

        合并结果覆盖 min(begin) .. max(end)；存在间隙时返回 None。

        :raises InvalidArgumentError: 两个范围不属于同一文件同一版本
        """
        check_argument(other is not None, "range must not be None")
        check_argument(
            self.begin.same_file(other.begin),
            "Unable to merge ranges of different files: %s and %s",
            self.file, other.file,
        )
        upper = self if self.begin.compare_offset(other.begin) < 0 else other
        lower = other if upper is self else self
        # end 为闭区间，+1 后变为开区间
        if upper.end.offset + 1 < lower.begin.offset:
            return None
        if upper.end.offset >= lower.end.offset:
            return Range(begin=upper.begin, end=upper.end)
        return Range(begin=upper.begin, end=lower.end)

    def apply(self, file_change: "FileChange") -> Optional["Range"]:
        """将 begin 与 end 分别翻译到新文件；任一端无法翻译时返回 None。"""
        new_begin = self.begin.apply(file_change)
        new_end = self.end.apply(file_change)
        if new_begin is None or new_end is None or new_begin.offset > new_end.offset:
            return None
        return Range(begin=new_begin, end=new_end)

    def map_to(self, file: VCSFile) -> Optional["Range"]:
        new_begin = self.begin.map_to(file)
        new_end = self.end.map_to(file)
        if new_begin is None or new_end is None or new_begin.offset > new_end.offset:
            return None
        return Range(begin=new_begin, end=new_end)

    def __str__(self) -> str:
        return f"Range(begin={self.begin}, end={self.end})"
