"""
本模块实现相邻两个版本之间实体（Mappable）的匹配。

匹配分阶段进行，每个阶段只处理前面阶段尚未匹配的实体：
1. 签名匹配：签名非空白且完全相等即建立链接
2. 文件变更关联：为每个范围找到旧文件（路径与版本）相同的非 ADD 文件变更
3. 范围翻译：把范围翻译到当前版本的坐标空间
4. 位置兼容匹配：翻译后的范围与当前版本实体的范围逐一比较，先到先得

匹配结果保存在 MappingResult 中，内部用 networkx.DiGraph 表示 from → to 的链接，
每个实体在加入时分配一个自增的整数节点 ID，所有查询都基于对象标识而非值相等。
"""

from typing import Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from networkx import DiGraph

from repo_track import logger
from repo_track.common.enum_types import FileChangeType, MatchKind
from repo_track.common.errors import check_argument, check_state
from repo_track.mapping.mappable import Mappable
from repo_track.mapping.translator import translate_range
from repo_track.text.position import Range
from repo_track.vcs.change import FileChange
from repo_track.vcs.revision import RevisionRange

T = TypeVar("T")

FROM = "from"
TO = "to"


def _distinct(mappables: Optional[Iterable[Mappable[T]]]) -> List[Mappable[T]]:
    """过滤 None 并按对象标识去重，保持原有顺序。"""
    seen = set()
    result = []
    for mappable in mappables or []:
        if mappable is None or id(mappable) in seen:
            continue
        seen.add(id(mappable))
        result.append(mappable)
    return result


class MappingResult(Generic[T]):
    """
    一次 Mapping.map 调用的结果。

    - ordinal：对应 RevisionRange 的序号
    - from / to：调用时传入实体的副本（已过滤 None、去重）
    - 链接：部分的、按对象标识的、单射的 from → to 映射，每条链接记录产生它的阶段
    """

    def __init__(self, ordinal: int, from_: List[Mappable[T]], to: List[Mappable[T]]):
        self._ordinal = ordinal
        self._graph = DiGraph()
        self._node_counter = 0
        # (side, id(mappable)) -> node id
        self._index: Dict[Tuple[str, int], int] = {}
        self._from = [self._add_node(FROM, m) for m in from_]
        self._to = [self._add_node(TO, m) for m in to]

    def _add_node(self, side: str, mappable: Mappable[T]) -> int:
        node_id = self._node_counter
        self._node_counter += 1
        self._graph.add_node(node_id, side=side, mappable=mappable)
        self._index[(side, id(mappable))] = node_id
        return node_id

    def _node_of(self, side: str, mappable: Optional[Mappable[T]]) -> Optional[int]:
        if mappable is None:
            return None
        return self._index.get((side, id(mappable)))

    def _mappable(self, node_id: int) -> Mappable[T]:
        return self._graph.nodes[node_id]["mappable"]

    def link(self, from_: Mappable[T], to: Mappable[T], kind: MatchKind) -> None:
        from_node = self._node_of(FROM, from_)
        to_node = self._node_of(TO, to)
        check_argument(from_node is not None, "Unknown from mappable")
        check_argument(to_node is not None, "Unknown to mappable")
        check_state(self._graph.out_degree(from_node) == 0, "From mappable is already linked")
        check_state(self._graph.in_degree(to_node) == 0, "To mappable is already linked")
        self._graph.add_edge(from_node, to_node, kind=kind)

    @property
    def ordinal(self) -> int:
        return self._ordinal

    def get_from(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._from]

    def get_to(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._to]

    def get_successor(self, from_: Mappable[T]) -> Optional[Mappable[T]]:
        node = self._node_of(FROM, from_)
        if node is None:
            return None
        for successor in self._graph.successors(node):
            return self._mappable(successor)
        return None

    def get_predecessor(self, to: Mappable[T]) -> Optional[Mappable[T]]:
        node = self._node_of(TO, to)
        if node is None:
            return None
        for predecessor in self._graph.predecessors(node):
            return self._mappable(predecessor)
        return None

    def get_match_kind(self, from_: Mappable[T]) -> Optional[MatchKind]:
        """返回 from_ 的链接由哪个阶段产生；未匹配时返回 None。"""
        node = self._node_of(FROM, from_)
        if node is None:
            return None
        for _, _, kind in self._graph.out_edges(node, data="kind"):
            return kind
        return None

    def get_with_successor(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._from if self._graph.out_degree(n) > 0]

    def get_without_successor(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._from if self._graph.out_degree(n) == 0]

    def get_with_predecessor(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._to if self._graph.in_degree(n) > 0]

    def get_without_predecessor(self) -> List[Mappable[T]]:
        return [self._mappable(n) for n in self._to if self._graph.in_degree(n) == 0]

    def links(self) -> List[Tuple[Mappable[T], Mappable[T]]]:
        """按 from 的顺序返回所有 (from, to) 链接。"""
        result = []
        for node in self._from:
            for successor in self._graph.successors(node):
                result.append((self._mappable(node), self._mappable(successor)))
        return result

    def __len__(self):
        return self._graph.number_of_edges()

    def __str__(self):
        return (
            f"MappingResult(ordinal={self._ordinal}, from={len(self._from)}, "
            f"to={len(self._to)}, links={len(self)})"
        )


class Mapping(Generic[T]):
    """
    相邻版本之间的实体匹配器。

    Mapping 记录最近一次成功调用的 to 实体（previous），
    因此可以逐步调用 map_next 完成整个版本序列的匹配。
    """

    def __init__(self, previous: Optional[Iterable[Mappable[T]]] = None):
        self.previous: List[Mappable[T]] = _distinct(previous)

    def map_next(self, to: Iterable[Mappable[T]], range_: RevisionRange) -> MappingResult[T]:
        return self.map(self.previous, to, range_)

    def map(
        self,
        from_: Iterable[Mappable[T]],
        to: Iterable[Mappable[T]],
        range_: RevisionRange,
    ) -> MappingResult[T]:
        """
        匹配 from_（前驱版本的实体）与 to（当前版本的实体）。

        :param from_: 前驱版本中检测到的实体，其范围必须引用 range_ 的前驱版本
        :param to: 当前版本中检测到的实体，其范围必须引用 range_ 的当前版本
        :param range_: 当前版本步骤
        :return: 匹配结果
        :raises InvalidArgumentError: 前置条件不满足，此时不做任何匹配工作
        :raises OSError: 读取文件内容或 diff 失败
        """
        check_argument(range_ is not None, "revision range must not be None")
        from_list = _distinct(from_)
        to_list = _distinct(to)
        self._validate(from_list, to_list, range_)

        result = MappingResult(range_.ordinal, from_list, to_list)

        unmatched_from, claimed = self._map_by_signature(result, from_list, to_list)
        logger.debug(f"[{range_.ordinal}] {len(claimed)} mappables linked by signature")

        available_to = [t for t in to_list if id(t) not in claimed]
        translated = self._translate_all(unmatched_from, range_)
        num_position = self._map_by_position(result, unmatched_from, translated, available_to)
        logger.debug(f"[{range_.ordinal}] {num_position} mappables linked by position")

        logger.info(
            f"Mapped revision {range_.revision_id} (ordinal {range_.ordinal}): "
            f"{len(from_list)} from, {len(to_list)} to, {len(result)} links"
        )
        self.previous = to_list
        return result

    @staticmethod
    def _validate(from_list: List[Mappable[T]], to_list: List[Mappable[T]], range_: RevisionRange):
        for mappable in from_list + to_list:
            check_argument(len(mappable.ranges()) > 0, "Mappable without ranges: %s", mappable)

        for mappable in to_list:
            for r in mappable.ranges():
                check_argument(
                    r.revision_id == range_.revision_id,
                    "Revision of to mappable (%s) does not match current revision (%s)",
                    r.revision_id, range_.revision_id,
                )

        if from_list:
            predecessor = range_.predecessor_revision_id
            check_argument(predecessor is not None, "Revision range without predecessor")
            for mappable in from_list:
                for r in mappable.ranges():
                    check_argument(
                        r.revision_id == predecessor,
                        "Revision of from mappable (%s) does not match predecessor revision (%s)",
                        r.revision_id, predecessor,
                    )

    @staticmethod
    def _map_by_signature(result: MappingResult[T], from_list: List[Mappable[T]], to_list: List[Mappable[T]]):
        """
        签名匹配阶段。

        同一签名对应多个 to 时，迭代顺序中最后一个尚未被占用的 to 胜出。

        :return: (未匹配的 from 列表, 已被占用的 to 的 id 集合)
        """
        unmatched = []
        claimed = set()
        for f in from_list:
            match = None
            for t in to_list:
                if id(t) not in claimed and f.signature_matches_with(t):
                    match = t
            if match is None:
                unmatched.append(f)
            else:
                claimed.add(id(match))
                result.link(f, match, MatchKind.SIGNATURE)
        return unmatched, claimed

    @staticmethod
    def _relevant_changes(r: Range, changes: List[FileChange]) -> List[FileChange]:
        # 旧文件的路径与版本都须与范围所属文件一致，其他版本的变更不参与翻译
        return [fc for fc in changes if fc.old_file == r.file]

    def _translate_all(self, from_list: List[Mappable[T]], range_: RevisionRange) -> Dict[int, List[Range]]:
        """
        文件变更关联与范围翻译阶段。

        - 有关联变更的范围：每个 (范围, 变更) 组合翻译一次，失败的组合被丢弃
        - 没有关联变更的范围：文件未变，原样保留
        - 一个范围也没有翻译成功时，保留原始范围

        :return: id(from) -> 翻译后的范围列表
        """
        changes = [fc for fc in range_.file_changes if fc.type is not FileChangeType.ADD]
        translated = {}
        for f in from_list:
            ranges = []
            for r in f.ranges():
                relevant = self._relevant_changes(r, changes)
                if not relevant:
                    ranges.append(r)
                    continue
                for fc in relevant:
                    new_range = translate_range(r, fc)
                    if new_range is None:
                        logger.debug(f"Unable to translate {r} with {fc}")
                    else:
                        ranges.append(new_range)
            translated[id(f)] = ranges if ranges else f.ranges()
        return translated

    @staticmethod
    def _map_by_position(
        result: MappingResult[T],
        from_list: List[Mappable[T]],
        translated: Dict[int, List[Range]],
        available_to: List[Mappable[T]],
    ) -> int:
        """
        位置兼容匹配阶段：对每个 from，按迭代顺序取第一个兼容的 to，不回溯。
        """
        num_links = 0
        for f in from_list:
            for i, t in enumerate(available_to):
                if f.is_compatible_with(t) and f.ranges_match_with(t, ranges=translated[id(f)]):
                    result.link(f, t, MatchKind.POSITION)
                    del available_to[i]
                    num_links += 1
                    break
        return num_links
