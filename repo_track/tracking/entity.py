"""
实体快照模型

本模块定义 Lifespan 中保存的不可变快照：
- Location：与文件 / 版本解耦的文本位置（相对路径 + 起止行列 + 起止偏移量）
- Entity：某个版本步骤中某个 Mappable 的快照

快照创建后不再引用任何 VCSFile，因此可以在遍历结束后长期保存或序列化。
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from repo_track.common.errors import check_argument
from repo_track.text.position import Range


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    begin_line: int = Field(ge=1)
    begin_column: int = Field(ge=1)
    begin_offset: int = Field(ge=0)
    end_line: int = Field(ge=1)
    end_column: int = Field(ge=1)
    end_offset: int = Field(ge=0)

    @classmethod
    def from_range(cls, range_: Range) -> "Location":
        return cls(
            file=range_.relative_path,
            begin_line=range_.begin.line,
            begin_column=range_.begin.column,
            begin_offset=range_.begin.offset,
            end_line=range_.end.line,
            end_column=range_.end.column,
            end_offset=range_.end.offset,
        )

    def to_json(self) -> Dict:
        return self.model_dump()


class Entity(BaseModel):
    """
    Mappable 在某个版本步骤中的不可变快照。

    属性：
        ordinal (int): 所属版本步骤的序号
        revision_id (str): 快照来源的版本号
        locations (List[Location]): 至少一个位置
        num_changes (int): 到该快照为止内容发生变化的次数
        metadata (Any): Mappable 的元数据
    """

    model_config = ConfigDict(frozen=True)

    ordinal: int = Field(ge=1)
    revision_id: str
    locations: List[Location] = Field(min_length=1)
    num_changes: int = Field(default=0, ge=0)
    metadata: Optional[Any] = None

    @classmethod
    def from_mappable(cls, mappable, ordinal: int = 1, num_changes: int = 0) -> "Entity":
        """
        由 Mappable 创建快照。

        :param mappable: 被快照的实体
        :param ordinal: 版本步骤序号
        :param num_changes: 变化次数
        :raises InvalidArgumentError: mappable 没有任何范围，或参数越界
        """
        check_argument(mappable is not None, "mappable must not be None")
        ranges = mappable.ranges()
        check_argument(len(ranges) > 0, "Mappable without ranges: %s", mappable)
        check_argument(ordinal >= 1, "ordinal < 1")
        check_argument(num_changes >= 0, "num changes < 0")
        return cls(
            ordinal=ordinal,
            revision_id=ranges[0].revision_id,
            locations=[Location.from_range(r) for r in ranges],
            num_changes=num_changes,
            metadata=mappable.metadata(),
        )

    def to_json(self) -> Dict:
        return {
            "ordinal": self.ordinal,
            "revision_id": self.revision_id,
            "locations": [location.to_json() for location in self.locations],
            "num_changes": self.num_changes,
            "metadata": self.metadata,
        }
