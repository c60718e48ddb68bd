import heapq
import itertools
from dataclasses import dataclass, field

from typing import Any, Iterator, List, Optional, Tuple


@dataclass
class ExpiryRecord:
    """
    one ttl assignment of an element.
    every new assignment gets a bigger generation, so a queued record
    can be told apart from the record currently installed for the element
    """
    element: Any
    expire_at: float
    generation: int
    stale: bool = field(default=False, compare=False)

    def sort_key(self) -> Tuple[float, int]:
        return self.expire_at, self.generation

    def is_due(self, now: float) -> bool:
        return self.expire_at <= now

    def invalidate(self):
        self.stale = True


class ExpiryQueue:
    """
    min-heap of expiry records, soonest deadline first.
    equal deadlines are ordered by generation, then by push order
    """
    def __init__(self):
        self.__heap: List[Tuple[float, int, int, ExpiryRecord]] = []
        self.__counter = itertools.count()

    def __len__(self) -> int:
        return len(self.__heap)

    def __bool__(self) -> bool:
        return len(self.__heap) > 0

    def push(self, record: ExpiryRecord):
        heapq.heappush(self.__heap, (*record.sort_key(), next(self.__counter), record))

    def peek(self) -> Optional[ExpiryRecord]:
        if not self.__heap:
            return None
        return self.__heap[0][-1]

    def pop(self) -> ExpiryRecord:
        if not self.__heap:
            raise IndexError('pop from empty expiry queue')
        return heapq.heappop(self.__heap)[-1]

    def pop_expired(self, now: float) -> Iterator[ExpiryRecord]:
        """
        pop all records with deadline <= now, stale ones included.
        only records already due at call time are popped, so this always terminates
        """
        while self.__heap and self.__heap[0][-1].is_due(now):
            yield heapq.heappop(self.__heap)[-1]

    def clear(self):
        self.__heap.clear()
