import math
from enum import Enum
from numbers import Real

from .exceptions import InvalidArgumentError

from typing import Union


NEVER = math.inf  # deadline of permanent elements


class TimeUnit(Enum):
    """
    ttl units, value is the length of one unit in seconds
    """
    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1
    MINUTES = 60
    HOURS = 60 * 60
    DAYS = 24 * 60 * 60

    def to_seconds(self, amount: Union[int, float]) -> float:
        try:
            seconds = amount * float(self.value)
        except OverflowError as e:
            raise InvalidArgumentError(f'{amount} {self.name.lower()} does not fit into a timestamp') from e
        if not math.isfinite(seconds):
            raise InvalidArgumentError(f'{amount} {self.name.lower()} does not fit into a timestamp')
        return seconds

    @classmethod
    def from_name(cls, name: str) -> "TimeUnit":
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            raise InvalidArgumentError(f'unknown time unit "{name}"') from None


def deadline_from_ttl(now: float, ttl: Union[int, float], unit: TimeUnit) -> float:
    """
    convert relative ttl into absolute deadline

    negative ttl means the element never expires,
    zero ttl gives deadline equal to now, so element is expired starting from the very next drain

    :raises InvalidArgumentError: if ttl is not a real number, is nan, or the deadline overflows
    """
    if isinstance(ttl, bool) or not isinstance(ttl, Real):
        raise InvalidArgumentError(f'ttl must be a number, not {type(ttl).__name__}')
    if math.isnan(ttl):
        raise InvalidArgumentError('ttl cannot be nan')
    if ttl < 0:
        return NEVER
    if ttl == 0:
        return now
    deadline = now + unit.to_seconds(ttl)
    if not math.isfinite(deadline):
        raise InvalidArgumentError(f'ttl {ttl} {unit.name.lower()} overflows timestamp range')
    return deadline
