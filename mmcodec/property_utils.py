from __future__ import annotations
import enum
import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, NamedTuple, Optional, Type, TypeVar, Union

from mmcodec.text_utils import camel_case_to_sentence

logger = logging.getLogger(__name__)

T = TypeVar("T")

################################################################################
# ╭──────────────────  ENUMERATED PROPERTIES  ────────────────────╮
################################################################################

_BUMP_NAMED = {0x00: "plain", 0x01: "wall", 0x02: "milk", 0x03: "syrup",
               0x04: "ketchup", 0x05: "roadBorder", 0x06: "roadBorder2",
               0x07: "water", 0x16: "jumpWoosh", 0x23: "sand"}

# Surface class of one bump-map pixel; unnamed codes keep their hex value.
BumpType = enum.IntEnum("BumpType",
                        [(_BUMP_NAMED.get(i, f"unknown{i:02X}"), i) for i in range(0x30)],
                        module=__name__)


class NamedValue(NamedTuple):
    name: str
    value: Any


class PropertyOptions(Generic[T]):
    """A closed set of named values bound to one property's getter/setter.

    Stands in for a menu / drop-down: ``names()`` lists the options,
    ``select(name)`` writes the matching value and ``current()`` reports
    which option the property holds now.
    """

    def __init__(self,
                 getter: Callable[[], T],
                 setter: Callable[[T], None],
                 allowed: Union[Mapping[str, T], Iterable[NamedValue]]):
        self._get, self._set = getter, setter
        if isinstance(allowed, Mapping):
            self._options: Dict[str, T] = dict(allowed)
        else:
            self._options = {nv.name: nv.value for nv in allowed}
        if not self._options:
            raise ValueError("a property needs at least one allowed value")

    @classmethod
    def for_enum(cls, enum_cls: Type[enum.Enum],
                 getter: Callable[[], T], setter: Callable[[T], None]) -> "PropertyOptions[T]":
        return cls(getter, setter,
                   [NamedValue(camel_case_to_sentence(m.name), m) for m in enum_cls])

    @classmethod
    def for_bool(cls, getter: Callable[[], bool], setter: Callable[[bool], None]) -> "PropertyOptions[bool]":
        return cls(getter, setter, {"Yes": True, "No": False})

    def names(self) -> List[str]:
        return list(self._options)

    def select(self, name: str) -> None:
        if name not in self._options:
            raise KeyError(f"unknown option {name!r}; expected one of {self.names()}")
        logger.debug("select %s -> %r", name, self._options[name])
        self._set(self._options[name])

    def current(self) -> Optional[str]:
        v = self._get()
        for name, value in self._options.items():
            if value == v:
                return name
        return None

    def is_selected(self, name: str) -> bool:
        return self.current() == name
