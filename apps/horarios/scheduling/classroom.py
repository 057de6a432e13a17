"""
Classroom assignment strategies used when groups are generated
"""

from collections import Counter
from typing import Optional, Sequence


class ClassroomStrategy:
    """Picks the classroom for the next generated group"""

    name = ''

    def __init__(self, classroom_ids: Sequence[str]):
        self.classroom_ids = list(classroom_ids)

    def choose(self) -> Optional[str]:
        raise NotImplementedError


class RoundRobinClassroomStrategy(ClassroomStrategy):
    """Cycle through the classrooms in order"""

    name = 'round_robin'

    def __init__(self, classroom_ids: Sequence[str]):
        super().__init__(classroom_ids)
        self._next = 0

    def choose(self) -> Optional[str]:
        if not self.classroom_ids:
            return None
        classroom_id = self.classroom_ids[self._next % len(self.classroom_ids)]
        self._next += 1
        return classroom_id


class LeastLoadedClassroomStrategy(ClassroomStrategy):
    """Pick the classroom with the fewest groups so far (ties by order)"""

    name = 'least_loaded'

    def __init__(self, classroom_ids: Sequence[str], initial_load=None):
        super().__init__(classroom_ids)
        self.load = Counter(initial_load or {})

    def choose(self) -> Optional[str]:
        if not self.classroom_ids:
            return None
        classroom_id = min(self.classroom_ids, key=lambda cid: self.load[cid])
        self.load[classroom_id] += 1
        return classroom_id


STRATEGIES = {
    RoundRobinClassroomStrategy.name: RoundRobinClassroomStrategy,
    LeastLoadedClassroomStrategy.name: LeastLoadedClassroomStrategy,
}


def get_classroom_strategy(name: str, classroom_ids: Sequence[str], **kwargs) -> ClassroomStrategy:
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown classroom strategy '{name}' (choose from {', '.join(sorted(STRATEGIES))})"
        ) from None
    return strategy_cls(classroom_ids, **kwargs)
