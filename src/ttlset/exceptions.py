
class NotFoundError(KeyError):
    """
    raised when an element has no current expiry record,
    i.e. it was never added, was removed, or has already expired and was drained
    """
    pass


class InvalidArgumentError(ValueError):
    """
    raised for ttl values that cannot be turned into a deadline,
    like overflowing conversions, nan or non numbers
    """
    pass
