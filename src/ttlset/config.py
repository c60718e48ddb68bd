import copy
import toml
from threading import Lock
from . import paths
from .logging import get_logger

from typing import Any, Optional, Tuple


_conf_cache = {}
_glock = Lock()


def get_config(subname: str) -> "Config":
    global _glock, _conf_cache
    with _glock:
        if subname not in _conf_cache:
            _conf_cache[subname] = Config(subname)
        return _conf_cache[subname]


def set_config_overrides(subname: str, overrides=None):
    """
    convenient method to set config's overrides without actually creating config object explicitly

    :param subname:
    :param overrides: nested dict, same shape as config file contents
    """
    global _glock, _conf_cache
    with _glock:
        if subname not in _conf_cache:
            _conf_cache[subname] = Config(subname, overrides=overrides)
        else:
            _conf_cache[subname].set_overrides(overrides)


def forget_configs():
    """
    drop cached config objects, next get_config will re-read files
    """
    with _glock:
        _conf_cache.clear()


class Config:
    """
    read-only view of <config location>/<subname>/config.toml
    merged with every file in <config location>/<subname>/config.d, in name order.
    overrides set from code take priority over files
    """
    __logger = get_logger('config')

    class OverrideNotFound(RuntimeError):
        pass

    def __init__(self, subname: str, base_name: str = 'config', overrides: Optional[dict] = None):
        self.__config_paths_to_check = [paths.config_path(f'{base_name}.toml', subname)]
        configd_path = paths.config_path(f'{base_name}.d', subname)
        if configd_path.is_dir():
            self.__config_paths_to_check.extend(sorted(configd_path.iterdir()))

        self.__stuff = {}
        self.__overrides = {}
        self.set_overrides(overrides)

        self.reload()

    @classmethod
    def __update_dicts(cls, main: dict, secondary: dict):
        for key, value in secondary.items():
            if isinstance(value, dict) and isinstance(main.get(key), dict):
                cls.__update_dicts(main[key], value)
                continue
            main[key] = value

    def reload(self) -> None:
        self.__stuff = {}
        for config_path in self.__config_paths_to_check:
            if not config_path.exists():
                continue
            try:
                with config_path.open('r') as f:
                    self.__update_dicts(self.__stuff, toml.load(f))
            except Exception:
                self.__logger.error(f'failed to load config file {config_path}, skipping')

    def set_overrides(self, overrides: Optional[dict]) -> None:
        if overrides is not None:
            self.__overrides = copy.deepcopy(overrides)
        else:
            self.__overrides = {}

    def set_override(self, option_name: str, val: Any) -> None:
        """
        set one item override
        :param option_name: option path, like expiring_set.default_time_unit
        :param val: any serializable value
        """
        names = self._split_config_names(option_name)
        clevel = self.__overrides
        for name in names[:-1]:
            if not isinstance(clevel.get(name), dict):
                clevel[name] = {}
            clevel = clevel[name]
        clevel[names[-1]] = val

    def _get_option_in_overrides(self, names: Tuple[str, ...]):
        clevel = self.__overrides
        for name in names:
            if not isinstance(clevel, dict) or name not in clevel:
                raise Config.OverrideNotFound()
            clevel = clevel[name]
        return clevel

    @staticmethod
    def _split_config_names(option_name: str) -> Tuple[str, ...]:
        """
        split dotted option name, dots inside double quotes are part of the name
        """
        names = []
        in_quotes = False
        mark = 0
        word_parts = []
        for i, l in enumerate(option_name):
            if l == '.' and not in_quotes:
                word_parts.append(option_name[mark:i])
                names.append(''.join(word_parts))
                if names[-1] == '':
                    raise ValueError(f'"{option_name}" is not a valid option_name')
                word_parts.clear()
                mark = i + 1
            elif l == '"':
                word_parts.append(option_name[mark:i])
                mark = i + 1
                in_quotes = not in_quotes
        if in_quotes:
            raise ValueError(f'"{option_name}" is not a valid option_name')
        word_parts.append(option_name[mark:])
        names.append(''.join(word_parts))
        if names[-1] == '':
            raise ValueError(f'"{option_name}" is not a valid option_name')
        return tuple(names)

    def get_option(self, option_name: str, default_val: Any = None) -> Any:
        names = self._split_config_names(option_name)
        try:
            return copy.deepcopy(self._get_option_in_overrides(names))
        except Config.OverrideNotFound:
            pass
        clevel = self.__stuff
        for name in names:
            if not isinstance(clevel, dict) or name not in clevel:
                return default_val
            clevel = clevel[name]
        return copy.deepcopy(clevel)
