"""
本模块定义文件级与行级的变更模型。

- LineChange：diff 中的一行（插入或删除）
- FileChange：一次文件变更，旧文件 / 新文件均可缺失，变更类型由二者推导
- DiffFileChange：基于 difflib.SequenceMatcher 计算行级 diff 的 FileChange 实现

行号约定：DELETE 的行号相对于旧文件，INSERT 的行号相对于新文件。
"""

import difflib
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from repo_track import logger
from repo_track.common.enum_types import FileChangeType, LineChangeType
from repo_track.common.errors import BinaryFileError, check_argument, check_state
from repo_track.vcs.file import VCSFile


class LineChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: LineChangeType
    line: int = Field(ge=1)
    content: str = ""


class FileChange(ABC):
    """
    一次文件变更。

    变更类型推导规则：
    - 没有旧文件：ADD
    - 没有新文件：REMOVE
    - 新旧相对路径相同：MODIFY
    - 其他：RELOCATE
    """

    @property
    @abstractmethod
    def old_file(self) -> Optional[VCSFile]:
        pass

    @property
    @abstractmethod
    def new_file(self) -> Optional[VCSFile]:
        pass

    @abstractmethod
    def compute_diff(self) -> List[LineChange]:
        """计算有序的行级 diff。"""
        pass

    @property
    def type(self) -> FileChangeType:
        old_file, new_file = self.old_file, self.new_file
        check_state(
            old_file is not None or new_file is not None,
            "Neither the old file nor the new file is available",
        )
        if old_file is None:
            return FileChangeType.ADD
        if new_file is None:
            return FileChangeType.REMOVE
        if old_file.relative_path == new_file.relative_path:
            return FileChangeType.MODIFY
        return FileChangeType.RELOCATE

    def compute_line_delta(self) -> int:
        """新增行数减去删除行数。"""
        delta = 0
        for lc in self.compute_diff():
            if lc.type is LineChangeType.INSERT:
                delta += 1
            else:
                delta -= 1
        return delta

    def __str__(self):
        return f"{type(self).__name__}({self.type.value}: {self.old_file} -> {self.new_file})"


class DiffFileChange(FileChange):
    """
    使用 difflib 计算行级 diff 的文件变更。

    每个 diff 块中先输出删除行（旧文件行号），再输出插入行（新文件行号）。
    ADD 变更的 diff 为新文件所有行的插入，REMOVE 为旧文件所有行的删除。
    """

    def __init__(self, old_file: Optional[VCSFile] = None, new_file: Optional[VCSFile] = None):
        check_argument(
            old_file is not None or new_file is not None,
            "A file change requires an old file or a new file",
        )
        self._old_file = old_file
        self._new_file = new_file
        self._diff: Optional[List[LineChange]] = None

    @property
    def old_file(self) -> Optional[VCSFile]:
        return self._old_file

    @property
    def new_file(self) -> Optional[VCSFile]:
        return self._new_file

    @staticmethod
    def _lines_of(file: Optional[VCSFile]) -> List[str]:
        if file is None:
            return []
        if file.is_binary():
            raise BinaryFileError(f"Unable to compute diff of binary file: {file}")
        return file.read_lines()

    def compute_diff(self) -> List[LineChange]:
        if self._diff is not None:
            return list(self._diff)

        old_lines = self._lines_of(self._old_file)
        new_lines = self._lines_of(self._new_file)
        matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

        diff = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                continue
            # replace / delete / insert
            for i in range(i1, i2):
                diff.append(LineChange(type=LineChangeType.DELETE, line=i + 1, content=old_lines[i]))
            for j in range(j1, j2):
                diff.append(LineChange(type=LineChangeType.INSERT, line=j + 1, content=new_lines[j]))

        logger.debug(f"Computed {len(diff)} line changes for {self}")
        self._diff = diff
        return list(diff)
