import sys
import os
import time
import logging
from .paths import log_path

from typing import List

# library default: no output unless the application configures logging,
# either its own way or through configure_from_config
_package_logger = logging.getLogger('ttlset')
_package_logger.addHandler(logging.NullHandler())

_detailed_format = '[%(asctime)s][%(module)s:%(process)d][%(levelname)s][%(funcName)s] %(message)s'


class UnimportantOnlyFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in (logging.DEBUG, logging.INFO)


__logger_cache = {}
__installed_handlers: List[logging.Handler] = []


def set_default_loglevel(loglevel):
    _package_logger.setLevel(loglevel)


def get_logger(name):
    """
    logger under "ttlset" hierarchy, level and handlers are inherited from the "ttlset" logger
    """
    global __logger_cache
    if name not in __logger_cache:
        __logger_cache[name] = logging.getLogger(f'ttlset.{name}')
    return __logger_cache[name]


def _console_handlers() -> List[logging.Handler]:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter('[%(asctime)s][%(module)s:%(process)d][%(levelname)s] %(message)s'))
    handler.setLevel(logging.NOTSET)
    handler.addFilter(UnimportantOnlyFilter())

    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setFormatter(logging.Formatter(_detailed_format))
    err_handler.setLevel(logging.WARNING)
    return [handler, err_handler]


def _file_handler():
    logpath = log_path(f'{os.getpid()}.log', 'log')
    if logpath is None:
        _package_logger.warning('log file location is not writable, file logging disabled')
        return None
    logfile_handler = logging.FileHandler(logpath)
    logfile_handler.setFormatter(logging.Formatter(_detailed_format))
    return logfile_handler


def configure_from_config(subname: str = 'ttlset'):
    """
    set up "ttlset" logger from config options:
      logging.level - log level name
      logging.console - bool, info and debug to stdout, warnings and errors to stderr
      logging.file - bool, per-process log file in user data dir, old files are cleaned up
      logging.keep_logs_days - how long log files are kept, 30 by default
      logging.propagate - bool, pass records to root logger too, True by default

    calling again replaces handlers installed by the previous call
    """
    from .config import get_config  # config itself logs through this module
    config = get_config(subname)

    level = config.get_option('logging.level')
    if level is not None:
        set_default_loglevel(str(level).upper())

    for handler in __installed_handlers:
        _package_logger.removeHandler(handler)
        handler.close()
    __installed_handlers.clear()

    if config.get_option('logging.console', False):
        __installed_handlers.extend(_console_handlers())
    if config.get_option('logging.file', False):
        cleanup_logs(config.get_option('logging.keep_logs_days', 30))
        handler = _file_handler()
        if handler is not None:
            __installed_handlers.append(handler)
    for handler in __installed_handlers:
        _package_logger.addHandler(handler)

    _package_logger.propagate = bool(config.get_option('logging.propagate', True))


def cleanup_logs(keep_logs_days: float = 30):
    log_base_path = log_path(None, 'log', ensure_path_exists=False)
    if not log_base_path.exists():
        return
    keep_logs_period = keep_logs_days * 24 * 60 * 60
    now = time.time()
    for log in log_base_path.iterdir():
        try:
            if now - log.stat().st_mtime > keep_logs_period:
                log.unlink(missing_ok=True)
        except OSError:
            pass
