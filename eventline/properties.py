from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional

from .errors import InvalidArgumentError


def _freeze(value: Any, path: str) -> Any:
    """
    Validate a JSON-compatible value and return a read-only copy of it.

    Args:
        value (Any): The value to check.
        path (str): Where the value sits in the bag, used in error messages.

    Returns:
        Any: The value, with lists turned into tuples and mappings into
        read-only mappings.

    Raises:
        InvalidArgumentError: If the value cannot be represented as JSON.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError(
                f"Property '{path}' must be a finite number, was {value!r}",
                argument="properties",
            )
        return value

    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item, f"{path}[{i}]") for i, item in enumerate(value))

    if isinstance(value, Mapping):
        frozen = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidArgumentError(
                    f"Property keys must be strings, found {key!r} in '{path}'",
                    argument="properties",
                )
            frozen[key] = _freeze(item, f"{path}.{key}")
        return MappingProxyType(frozen)

    raise InvalidArgumentError(
        f"Property '{path}' is not JSON-compatible: {type(value).__name__}",
        argument="properties",
    )


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    return value


class Properties(Mapping[str, Any]):
    """
    An immutable bag of JSON-compatible properties attached to an event or an
    identity.

    Every transformation returns a new instance; the receiver is never changed.
    Use ``Properties.EMPTY`` when there is nothing to attach.
    """

    EMPTY: ClassVar["Properties"]

    __slots__ = ("_data",)

    def __init__(self, mapping: Optional[Mapping[str, Any]] = None) -> None:
        data: Dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            if not isinstance(key, str):
                raise InvalidArgumentError(
                    f"Property keys must be strings, found {key!r}",
                    argument="properties",
                )
            data[key] = _freeze(value, key)
        self._data = MappingProxyType(data)

    @classmethod
    def from_map(cls, mapping: Mapping[str, str]) -> "Properties":
        """
        Create a properties instance from a flat map, storing every value as
        a JSON string.

        Args:
            mapping (Mapping[str, str]): The map.

        Returns:
            Properties: The properties instance.
        """
        if not mapping:
            return cls.EMPTY
        return cls({key: str(value) for key, value in mapping.items()})

    @classmethod
    def coerce(cls, value: Optional[Mapping[str, Any]]) -> "Properties":
        """
        Accept either a ``Properties`` instance or a plain mapping.
        """
        if value is None:
            return cls.EMPTY
        if isinstance(value, Properties):
            return value
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(
                f"Properties must be a mapping, was {type(value).__name__}",
                argument="properties",
            )
        return cls(value) if value else cls.EMPTY

    def is_empty(self) -> bool:
        """
        Checks if this properties instance contains no data.
        """
        return not self._data

    def with_values(self, **values: Any) -> "Properties":
        return self.merge(values)

    def merge(self, other: Mapping[str, Any]) -> "Properties":
        """
        Return a new instance holding this bag's entries overridden by ``other``.
        """
        if not other:
            return self
        merged = dict(self._data)
        merged.update(Properties.coerce(other)._data)
        return Properties._wrap(merged)

    def without(self, *keys: str) -> "Properties":
        remaining = {k: v for k, v in self._data.items() if k not in keys}
        if len(remaining) == len(self._data):
            return self
        return Properties._wrap(remaining) if remaining else Properties.EMPTY

    def to_dict(self) -> Dict[str, Any]:
        """
        Return a plain, JSON-serializable copy of the properties.
        """
        return {key: _thaw(value) for key, value in self._data.items()}

    @classmethod
    def _wrap(cls, frozen: Dict[str, Any]) -> "Properties":
        # Values are already validated and frozen
        instance = cls.__new__(cls)
        instance._data = MappingProxyType(frozen)
        return instance

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Properties):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._data.keys())))

    def __repr__(self) -> str:
        return f"Properties({self.to_dict()!r})"


Properties.EMPTY = Properties()
