"""
版本遍历中的提交与版本步骤模型。

RevisionRange 表示遍历中的一步：从前驱版本（predecessor_revision_id）到当前版本（revision_id），
携带这一步内的提交以及文件变更。ordinal 在遍历过程中严格递增，从 1 开始。
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from repo_track.common.errors import check_argument
from repo_track.vcs.change import DiffFileChange, FileChange


def merge_file_changes(changes: List[FileChange]) -> List[FileChange]:
    """
    将同一文件在多个提交中的连续变更合并为一个净变更。

    - 某个变更的旧文件等于已有变更链的新文件时，接到该链之后
    - 每条链合并为 DiffFileChange(首个旧文件, 最后一个新文件)，只有一个变更的链原样保留
    - 先新增后删除的链（旧文件与新文件均缺失）被丢弃

    :param changes: 按提交顺序排列的文件变更
    :return: 每个文件至多一个的净变更列表
    """
    # 每条链为 [首个变更, 当前新文件, 变更数]
    chains = []
    for fc in changes:
        chain = None
        if fc.old_file is not None:
            chain = next(
                (c for c in chains if c[1] is not None and c[1] == fc.old_file),
                None,
            )
        if chain is None:
            chains.append([fc, fc.new_file, 1])
        else:
            chain[1] = fc.new_file
            chain[2] += 1

    merged = []
    for first, new_file, count in chains:
        if count == 1:
            merged.append(first)
        elif first.old_file is not None or new_file is not None:
            merged.append(DiffFileChange(first.old_file, new_file))
    return merged


class Commit(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    message: str = ""
    author: str = ""
    date: Optional[datetime] = None
    file_changes: List[FileChange] = Field(default_factory=list)


class RevisionRange:
    """
    遍历中的一个版本步骤。

    :param ordinal: 步骤序号（>= 1）
    :param revision_id: 当前版本号
    :param predecessor_revision_id: 前驱版本号，首个步骤为 None
    :param file_changes: 本步骤的文件变更；缺省时由所有提交的文件变更按文件合并为净变更
    :param commits: 本步骤包含的提交（按时间顺序）
    """

    def __init__(
        self,
        ordinal: int,
        revision_id: str,
        predecessor_revision_id: Optional[str] = None,
        file_changes: Optional[List[FileChange]] = None,
        commits: Optional[List[Commit]] = None,
    ):
        check_argument(ordinal >= 1, "ordinal < 1")
        check_argument(bool(revision_id), "revision id must not be empty")
        self.ordinal = ordinal
        self.revision_id = revision_id
        self.predecessor_revision_id = predecessor_revision_id
        self.commits: List[Commit] = list(commits or [])
        if file_changes is None:
            file_changes = merge_file_changes(
                [fc for commit in self.commits for fc in commit.file_changes]
            )
        self._file_changes: List[FileChange] = list(file_changes)

    @property
    def file_changes(self) -> List[FileChange]:
        return list(self._file_changes)

    @property
    def latest_commit(self) -> Optional[Commit]:
        return self.commits[-1] if self.commits else None

    def __str__(self):
        return (
            f"RevisionRange(ordinal={self.ordinal}, revision={self.revision_id}, "
            f"predecessor={self.predecessor_revision_id}, file_changes={len(self._file_changes)})"
        )
