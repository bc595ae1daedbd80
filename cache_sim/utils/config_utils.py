import os
import types
import yaml
from dataclasses import _MISSING_TYPE, Field
from enum import Enum
from typing import Any, Dict, TypeVar, Union, get_args, get_origin

from cache_sim.entity.model import ConfigError

import logging
logger = logging.getLogger(__name__)


class ConfigLoader(yaml.SafeLoader):
    # https://stackoverflow.com/questions/528281/how-can-i-include-a-yaml-file-inside-another
    def __init__(self, stream):
        self._root = os.path.split(getattr(stream, "name", ""))[0]
        super(ConfigLoader, self).__init__(stream)

    def include(self, node):
        filename = os.path.join(self._root, self.construct_scalar(node))
        with open(filename, "r") as f:
            ret = yaml.load(f, ConfigLoader)
        if ret is None:
            raise ConfigError(f"included file is empty: {filename}")
        return ret


ConfigLoader.add_constructor("!include", ConfigLoader.include)


T = TypeVar("T")


def _convert_scalar(d: Any, cls):
    # no float truncation or bool coercion for integer fields
    if cls is int and (isinstance(d, bool) or not isinstance(d, (int, str))):
        raise ConfigError(f"invalid value {d!r} for int")
    try:
        return cls(d)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value {d!r} for {getattr(cls, '__name__', cls)}") from e


def dict_to_dataclass(d: Any, cls: T) -> T:
    """Build ``cls`` from plain YAML data, recursing through nested
    dataclasses, ``List[...]``, ``Dict[...]`` and ``Optional[...]`` fields."""
    origin = get_origin(cls)
    if origin is Union or origin is getattr(types, "UnionType", Union):
        if d is None:
            return None
        inner = [arg for arg in get_args(cls) if arg is not type(None)]
        return dict_to_dataclass(d, inner[0])

    if not hasattr(cls, "__dataclass_fields__"):
        if origin is list:
            if not isinstance(d, list):
                raise ConfigError(f"expected a list, got {type(d).__name__}")
            inner_cls = get_args(cls)[0]
            return [dict_to_dataclass(x, inner_cls) for x in d]
        elif origin is dict:
            if not isinstance(d, dict):
                raise ConfigError(f"expected a mapping, got {type(d).__name__}")
            key_type, val_type = get_args(cls)
            return {
                _convert_scalar(k, key_type): dict_to_dataclass(v, val_type)
                for k, v in d.items()
            }
        return _convert_scalar(d, cls)

    if not isinstance(d, dict):
        raise ConfigError(
            f"{cls.__name__} expects a mapping, got {type(d).__name__}")

    fields: Dict[str, Field] = cls.__dataclass_fields__
    kwargs = {}
    for field_name, field_type in fields.items():
        field_value = d.get(field_name)
        if field_value is not None:
            if type(field_value) == field_type.type:
                kwargs[field_name] = field_value
            else:
                kwargs[field_name] = dict_to_dataclass(
                    field_value, field_type.type)
        elif not isinstance(field_type.default_factory, _MISSING_TYPE):
            kwargs[field_name] = field_type.default_factory()
        elif not isinstance(field_type.default, _MISSING_TYPE):
            kwargs[field_name] = field_type.default
        else:
            raise ConfigError(
                f"required field '{field_name}' of {cls.__name__} is not provided")

    unknown = set(d) - set(fields)
    if unknown:
        logger.warning("ignoring unknown %s keys: %s",
                       cls.__name__, sorted(unknown))
    return cls(**kwargs)


def load_config(config_path: str, cls: T) -> T:
    with open(config_path) as f:
        try:
            data = yaml.load(f, ConfigLoader)
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse {config_path}: {e}") from e
    if data is None:
        raise ConfigError(f"config file is empty: {config_path}")
    config = dict_to_dataclass(data, cls)
    logger.info("loaded %s from %s", cls.__name__, config_path)
    return config


class BaseEnum(Enum):
    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.name.lower() == value or str(member.value).lower() == value:
                return member
        return None

    def __repr__(self):
        return self.name
