"""
本模块定义可被跨版本追踪的实体接口 Mappable。

外部分析器（克隆检测、AST 抽取、规则违例报告等）实现 Mappable，
至少提供 ranges()；签名、元数据以及三个匹配谓词均有默认实现，可按需覆盖：

- is_compatible_with：任一方没有元数据时兼容，否则要求元数据相等
- signature_matches_with：双方签名均非空白且完全相等
- ranges_match_with：范围数量相等，且每个范围都能在对方中找到
  同一文件、begin / end 偏移量完全相同的范围（非双射检查）
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from repo_track.text.position import Range

T = TypeVar("T")


class Mappable(ABC, Generic[T]):

    @abstractmethod
    def ranges(self) -> List[Range]:
        """实体所在的文本范围，同一版本，不能为空。"""
        pass

    def signature(self) -> Optional[str]:
        return None

    def metadata(self) -> Optional[T]:
        return None

    def is_compatible_with(self, other: Optional["Mappable[T]"]) -> bool:
        if other is None:
            return False
        this_metadata = self.metadata()
        other_metadata = other.metadata()
        if this_metadata is None or other_metadata is None:
            return True
        return this_metadata == other_metadata

    def signature_matches_with(self, other: Optional["Mappable[T]"]) -> bool:
        if other is None:
            return False
        this_signature = self.signature()
        other_signature = other.signature()
        if this_signature is None or not this_signature.strip():
            return False
        if other_signature is None or not other_signature.strip():
            return False
        return this_signature == other_signature

    def ranges_match_with(self, other: Optional["Mappable[T]"], ranges: Optional[List[Range]] = None) -> bool:
        """
        判断范围是否匹配。

        :param other: 另一个实体
        :param ranges: 用于代替 self.ranges() 参与比较的范围（例如翻译后的范围）
        """
        if other is None:
            return False
        this_ranges = self.ranges() if ranges is None else ranges
        other_ranges = other.ranges()
        if len(this_ranges) != len(other_ranges):
            return False
        for this_range in this_ranges:
            found = any(
                this_range.relative_path == other_range.relative_path
                and this_range.begin.offset == other_range.begin.offset
                and this_range.end.offset == other_range.end.offset
                for other_range in other_ranges
            )
            if not found:
                return False
        return True


@dataclass(eq=False)
class BasicMappable(Mappable[T]):
    """直接持有范围、签名与元数据的 Mappable 实现，按对象标识判等。"""

    range_list: List[Range] = field(default_factory=list)
    signature_value: Optional[str] = None
    metadata_value: Optional[T] = None

    def ranges(self) -> List[Range]:
        return list(self.range_list)

    def signature(self) -> Optional[str]:
        return self.signature_value

    def metadata(self) -> Optional[T]:
        return self.metadata_value
