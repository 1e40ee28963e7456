"""
Lifespan：一个逻辑实体在版本序列中的完整历史。

Lifespan 只能追加，相邻快照的 ordinal 与 num_changes 均不递减。
"""

from typing import Dict, Iterator, List

from repo_track.common.errors import check_argument, check_state
from repo_track.tracking.entity import Entity


class Lifespan:

    def __init__(self, first_entity: Entity):
        check_argument(first_entity is not None, "first entity must not be None")
        self._entities: List[Entity] = [first_entity]

    def check_can_add(self, entity: Entity) -> None:
        """
        :raises IllegalStateError: entity 的 ordinal 或 num_changes 小于最后一个快照
        """
        check_argument(entity is not None, "entity must not be None")
        last = self.last
        check_state(
            entity.ordinal >= last.ordinal,
            "Ordinal of entity (%d) is lower than ordinal of last entity (%d)",
            entity.ordinal, last.ordinal,
        )
        check_state(
            entity.num_changes >= last.num_changes,
            "Number of changes of entity (%d) is lower than number of changes of last entity (%d)",
            entity.num_changes, last.num_changes,
        )

    def add(self, entity: Entity) -> None:
        self.check_can_add(entity)
        self._entities.append(entity)

    @property
    def entities(self) -> List[Entity]:
        return list(self._entities)

    @property
    def first(self) -> Entity:
        return self._entities[0]

    @property
    def last(self) -> Entity:
        return self._entities[-1]

    @property
    def num_changes(self) -> int:
        return self.last.num_changes

    @property
    def is_changed(self) -> bool:
        """最后一个快照相对前一个快照内容是否发生了变化。"""
        if len(self._entities) < 2:
            return False
        return self._entities[-1].num_changes > self._entities[-2].num_changes

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))

    def to_json(self) -> Dict:
        return {
            "num_changes": self.num_changes,
            "entities": [entity.to_json() for entity in self._entities],
        }

    def __str__(self):
        return f"Lifespan(entities={len(self._entities)}, num_changes={self.num_changes})"
