from __future__ import annotations

from typing import Any, Dict, List, Tuple, Union

from pydantic import ValidationError

from .errors import ConfigError, KeyLookupError
from .models import Config
from .wizard.layout import DOCUMENT, FieldSpec, Policy, SectionSpec


def _lookup(key: str) -> Tuple[List[str], Union[FieldSpec, SectionSpec]]:
    parts = [p for p in key.strip().split(".") if p]
    if not parts:
        raise KeyLookupError("empty key")
    spec: Union[FieldSpec, SectionSpec] = DOCUMENT
    for i, part in enumerate(parts):
        if not isinstance(spec, SectionSpec):
            raise KeyLookupError(f"{'.'.join(parts[:i])} is a value, not a section")
        try:
            spec = spec.member(part)
        except KeyError:
            raise KeyLookupError(f"unknown key: {'.'.join(parts[: i + 1])}") from None
    return parts, spec


def get_key(config: Config, key: str) -> Any:
    """
    Value behind a dotted key such as "janitor.finished.delete_data_after".
    Sections come back as plain dicts.
    """
    parts, spec = _lookup(key)
    value: Any = config
    for part in parts:
        value = getattr(value, part)
    if isinstance(spec, SectionSpec):
        return value.model_dump(mode="json")
    return value


def set_key(config: Config, key: str, text: str) -> Config:
    """
    Return a copy of `config` with the field behind `key` set to `text`,
    parsed according to the field's kind.
    """
    parts, spec = _lookup(key)
    if isinstance(spec, SectionSpec):
        raise ConfigError(f"{key} is a section; set its fields individually")
    if spec.policy is not Policy.ASK:
        raise ConfigError(f"{key} is managed automatically and cannot be set")
    try:
        value = spec.kind.parse(text, spec.maximum)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc

    data: Dict[str, Any] = config.model_dump()
    node = data
    for part in parts[:-1]:
        node = node[part]
    node[parts[-1]] = value
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc
