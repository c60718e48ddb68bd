from .exceptions import NotFoundError, InvalidArgumentError
from .time_units import NEVER, TimeUnit
from .expiry_queue import ExpiryQueue, ExpiryRecord
from .expiring_collections import ExpiringSet
from .config import get_config
from .logging import get_logger

__version__ = '1.0.0'

__all__ = ['ExpiringSet', 'ExpiryQueue', 'ExpiryRecord', 'TimeUnit', 'NEVER',
           'NotFoundError', 'InvalidArgumentError', 'get_config', 'get_logger']
