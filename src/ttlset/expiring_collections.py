import time
from collections.abc import MutableSet

from .config import get_config
from .exceptions import NotFoundError, InvalidArgumentError
from .expiry_queue import ExpiryQueue, ExpiryRecord
from .logging import get_logger
from .time_units import NEVER, TimeUnit, deadline_from_ttl

from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Set, Tuple, Union


class ExpiringSet(MutableSet):
    """
    Set whose elements may have a time to live.

    Expired elements are evicted lazily: every operation first drains
    the expiry queue of records that are already due, so there is no timer and no full scan.

    Full set protocol is available (set algebra, comparisons, isdisjoint, pop, |=, -=, &=, ^=),
    all of it goes through contains/iter/len/add/discard and so sees only live members.
    Results of set algebra are plain sets without any ttl.

    Not thread safe. If shared between threads - all access, iteration included,
    must be guarded by one external lock.
    """
    _logger = get_logger('expiring_set')

    def __init__(self, *, default_unit: Optional[TimeUnit] = None, clock: Optional[Callable[[], float]] = None):
        if default_unit is None:
            default_unit = TimeUnit.from_name(get_config('ttlset').get_option('expiring_set.default_time_unit', 'SECONDS'))
        self.__default_unit = default_unit
        self.__clock = clock or time.time
        self.__members: Set[Any] = set()
        self.__records: Dict[Any, ExpiryRecord] = {}
        self.__expired: Dict[Any, float] = {}  # evicted element -> deadline it expired at
        self.__queue = ExpiryQueue()
        self.__generation = 0

    @classmethod
    def _from_iterable(cls, it):
        return set(it)

    def __next_generation(self) -> int:
        self.__generation += 1
        return self.__generation

    def prune(self) -> int:
        """
        evict everything whose deadline has passed

        :return: number of evicted elements
        """
        now = self.__clock()
        evicted = 0
        for record in self.__queue.pop_expired(now):
            if record.stale or self.__records.get(record.element) is not record:
                continue
            self.__records.pop(record.element)
            self.__members.discard(record.element)
            self.__expired[record.element] = record.expire_at
            evicted += 1
        if evicted:
            self._logger.debug(f'evicted {evicted} expired elements, {len(self.__members)} left')
        return evicted

    def add(self, item: Any, ttl: Optional[Union[int, float]] = None, unit: Optional[TimeUnit] = None) -> bool:
        """
        add item to the set.

        without ttl item is added permanently, unless it is already a live member,
        in which case its current expiry (if any) is kept.
        with ttl a new deadline replaces any previous one:
        negative ttl - never expires, zero - expires on the next operation.

        :return: True if item was not a member before
        """
        if ttl is None:
            self.prune()
            if item in self.__members:
                return False
            self.__expired.pop(item, None)
            self.__records[item] = ExpiryRecord(item, NEVER, self.__next_generation())
            self.__members.add(item)
            return True

        if unit is None:
            unit = self.__default_unit
        now = self.__clock()
        try:
            expire_at = deadline_from_ttl(now, ttl, unit)
        except InvalidArgumentError:
            self._logger.warning(f'refusing to add {item!r} with ttl {ttl!r} {unit}')
            raise
        self.prune()

        self.__expired.pop(item, None)
        old_record = self.__records.get(item)
        if old_record is not None:
            old_record.invalidate()
        record = ExpiryRecord(item, expire_at, self.__next_generation())
        self.__records[item] = record
        if expire_at != NEVER:
            self.__queue.push(record)

        is_new = item not in self.__members
        self.__members.add(item)
        return is_new

    def update(self, items: Iterable[Any], ttl: Optional[Union[int, float]] = None, unit: Optional[TimeUnit] = None) -> bool:
        """
        add every item with the same ttl rules as add

        :return: True if at least one item was not a member before
        """
        changed = False
        for item in items:
            changed = self.add(item, ttl, unit) or changed
        return changed

    def remove(self, item: Any) -> bool:
        """
        unlike set.remove - absent items are not an error

        :return: True if item was a member right before removal
        """
        self.prune()
        self.__expired.pop(item, None)
        record = self.__records.pop(item, None)
        if record is not None:
            record.invalidate()
        if item not in self.__members:
            return False
        self.__members.remove(item)
        return True

    def discard(self, item: Any):
        self.remove(item)

    def contains(self, item, *, prune=True) -> bool:
        if prune:
            self.prune()
        return item in self.__members

    def size(self, *, prune=True) -> int:
        if prune:
            self.prune()
        return len(self.__members)

    def get_expiry(self, item: Any) -> float:
        """
        absolute deadline of item in clock's time, NEVER for permanent items.
        does not evict anything, so a deadline that passed but was not drained yet is still reported

        :raises NotFoundError: if item has no current record
        """
        record = self.__records.get(item)
        if record is None:
            raise NotFoundError(item)
        return record.expire_at

    def has_expired(self, item: Any) -> bool:
        """
        check if item's ttl has run out, whether it was already evicted or not.
        never evicts anything itself.
        items never added, explicitly removed or re-added since expiring are not expired
        """
        record = self.__records.get(item)
        if record is not None:
            return record.is_due(self.__clock())
        return item in self.__expired

    def items(self) -> Tuple[Any, ...]:
        """
        snapshot of live members
        """
        self.prune()
        return tuple(self.__members)

    def clear(self):
        for record in self.__records.values():
            record.invalidate()
        self.__records.clear()
        self.__members.clear()
        self.__expired.clear()
        self.__queue.clear()

    def __iter__(self) -> Iterator[Any]:
        # members are captured at iteration start,
        # elements expiring while iterating are still yielded
        yield from self.items()

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self):
        # no pruning here, stored count may include members already past their deadline
        return f'<{self.__class__.__name__}: {len(self.__members)} stored, {len(self.__queue)} queued>'
