"""
Tracker：把逐步产生的 MappingResult 累积为每个逻辑实体的 Lifespan。

Tracker 只记住上一步：TrackerState 保存上一步每个 to 实体（按对象标识）到其 Lifespan 的关联。
每次 add 先在不修改任何状态的前提下计算出全部新 Lifespan 与更新，
全部校验通过后再一次性提交，并用本步骤的关联整体替换旧状态。
"""

from typing import Dict, List, Optional, Tuple

from repo_track import logger
from repo_track.common.errors import check_argument, check_state
from repo_track.mapping.mappable import Mappable
from repo_track.mapping.mapping import MappingResult
from repo_track.tracking.entity import Entity
from repo_track.tracking.lifespan import Lifespan


def contents_differ(from_: Mappable, to: Mappable) -> bool:
    """
    比较两个实体的文本内容是否不同。

    - 范围数量不同：不同
    - 否则按多重集比较：每个 from 内容必须消耗一个尚未被消耗的相同 to 内容

    :raises IllegalStateError: 全部 from 内容都被消耗后 to 一侧仍有剩余
    :raises OSError: 读取内容失败
    """
    from_ranges = from_.ranges()
    to_ranges = to.ranges()
    if len(from_ranges) != len(to_ranges):
        return True
    remaining = [r.read_content() for r in to_ranges]
    for r in from_ranges:
        content = r.read_content()
        if content not in remaining:
            return True
        remaining.remove(content)
    check_state(not remaining, "Unmatched content left after comparison")
    return False


class TrackerState:
    """
    单步状态：上一步每个 to 实体到其 Lifespan 的关联。

    关联保存实体本身的引用，避免对象被回收后 id 被复用。
    """

    def __init__(self, entries: Optional[Dict[int, Tuple[Mappable, Lifespan]]] = None):
        self._entries: Dict[int, Tuple[Mappable, Lifespan]] = dict(entries or {})

    def lookup(self, mappable: Optional[Mappable]) -> Optional[Lifespan]:
        if mappable is None:
            return None
        entry = self._entries.get(id(mappable))
        if entry is None or entry[0] is not mappable:
            return None
        return entry[1]

    def __len__(self):
        return len(self._entries)


def track_step(state: TrackerState, result: MappingResult):
    """
    计算一个版本步骤对 Lifespan 的影响，不修改任何现有对象。

    :param state: 上一步的状态
    :param result: 本步骤的匹配结果
    :return: (新状态, 新建的 Lifespan 列表, 待追加的 (Lifespan, Entity) 列表)
    """
    new_lifespans: List[Lifespan] = []
    updates: List[Tuple[Lifespan, Entity]] = []
    entries: Dict[int, Tuple[Mappable, Lifespan]] = {}

    for to in result.get_to():
        predecessor = result.get_predecessor(to)
        lifespan = state.lookup(predecessor)
        if lifespan is not None:
            num_changes = lifespan.num_changes
            if contents_differ(predecessor, to):
                num_changes += 1
            entity = Entity.from_mappable(to, ordinal=result.ordinal, num_changes=num_changes)
            updates.append((lifespan, entity))
        else:
            if predecessor is not None:
                logger.warning(
                    f"[{result.ordinal}] Predecessor of mappable exists but is not tracked, "
                    f"starting a new lifespan"
                )
            lifespan = Lifespan(Entity.from_mappable(to, ordinal=result.ordinal, num_changes=0))
            new_lifespans.append(lifespan)
        entries[id(to)] = (to, lifespan)

    return TrackerState(entries), new_lifespans, updates


class Tracker:
    """
    跨版本的实体生命周期追踪器。

    使用方式：每个版本步骤先调用 Mapping.map，再把结果交给 Tracker.add，ordinal 严格递增。
    """

    def __init__(self):
        self._lifespans: List[Lifespan] = []
        self._state = TrackerState()

    def add(self, result: MappingResult) -> None:
        """
        :raises IllegalStateError: 追加的快照违反 Lifespan 的顺序约束
        :raises OSError: 比较内容时读取失败
        """
        check_argument(result is not None, "mapping result must not be None")
        state, new_lifespans, updates = track_step(self._state, result)

        for lifespan, entity in updates:
            lifespan.check_can_add(entity)

        self._lifespans.extend(new_lifespans)
        for lifespan, entity in updates:
            lifespan.add(entity)
        self._state = state

        logger.info(
            f"Tracked ordinal {result.ordinal}: {len(new_lifespans)} new lifespans, "
            f"{len(updates)} updated, {len(self._lifespans)} in total"
        )

    @property
    def lifespans(self) -> List[Lifespan]:
        return list(self._lifespans)

    @property
    def state(self) -> TrackerState:
        return self._state

    def lifespan_of(self, mappable: Mappable) -> Optional[Lifespan]:
        """查找上一步中 mappable 所属的 Lifespan。"""
        return self._state.lookup(mappable)
