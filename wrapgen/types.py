"""Data types for the interface model"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Category(Enum):
    """Kind of a return slot"""
    BASIS = "basis"
    CLASS = "class"
    EIGEN = "eigen"


@dataclass(frozen=True)
class Argument:
    """Method or constructor argument"""
    type: str
    name: str
    is_const: bool = False
    is_pointer: bool = False
    is_reference: bool = False
    namespaces: tuple[str, ...] = ()

    def qualified_type(self, delim: str = "::") -> str:
        return delim.join(self.namespaces + (self.type,))


@dataclass(frozen=True)
class ReturnSlot:
    """One returned value; category is None only for void"""
    type: str
    category: Optional[Category] = None
    is_pointer: bool = False
    namespaces: tuple[str, ...] = ()

    def qualified_type(self, delim: str = "::") -> str:
        return delim.join(self.namespaces + (self.type,))


VOID = ReturnSlot(type="void")


@dataclass(frozen=True)
class ReturnValue:
    """Return type of a method, either a single slot or a pair"""
    first: ReturnSlot = VOID
    second: Optional[ReturnSlot] = None

    @property
    def is_pair(self) -> bool:
        return self.second is not None

    @property
    def is_void(self) -> bool:
        return self.first.category is None

    @property
    def slots(self) -> tuple[ReturnSlot, ...]:
        if self.second is None:
            return (self.first,)
        return (self.first, self.second)


@dataclass(frozen=True)
class Constructor:
    """Class constructor, named after its class"""
    name: str
    args: tuple[Argument, ...] = ()


@dataclass(frozen=True)
class Method:
    """Instance method"""
    name: str
    args: tuple[Argument, ...] = ()
    return_value: ReturnValue = ReturnValue()
    is_const: bool = False


@dataclass(frozen=True)
class StaticMethod:
    """Static method, has no receiver"""
    name: str
    args: tuple[Argument, ...] = ()
    return_value: ReturnValue = ReturnValue()


@dataclass(frozen=True)
class Class:
    """Interface class definition"""
    name: str
    namespaces: tuple[str, ...] = ()
    constructors: tuple[Constructor, ...] = ()
    methods: tuple[Method, ...] = ()
    static_methods: tuple[StaticMethod, ...] = ()
    includes: tuple[str, ...] = ()

    def qualified_name(self, delim: str = "_") -> str:
        return delim.join(self.namespaces + (self.name,))


@dataclass(frozen=True)
class Module:
    """Complete parsed interface file"""
    name: str
    verbose: bool = False
    classes: tuple[Class, ...] = ()
