"""Types of values and definitions in the language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


def _debug_list(items) -> str:
    return "[" + ", ".join(items) + "]"


def _key_pairs(keys) -> str:
    return _debug_list(
        f"({f}, {'true' if asc else 'false'})" for f, asc in keys
    )


def _key_fields(keys) -> str:
    return _debug_list(str(f) for f in keys)


class Type:
    """Base of all types."""

    def _debug(self) -> str:
        return type(self).__name__

    def is_unknown(self) -> bool:
        return isinstance(self, Unknown)

    def is_same(self, other: Type) -> bool:
        """Equal, or of the same kind for enums, references, vectors and integers."""
        if self == other:
            return True
        return any(
            isinstance(self, kind) and isinstance(other, kind)
            for kind in (Enum, Reference, Vector, Integer)
        )

    def size(self, nullable: bool) -> int:
        """Bytes needed to store this type in a record, 0 when not an integer."""
        if not isinstance(self, Integer):
            return 0
        span = self.maximum - self.minimum
        if span < 256 or (nullable and span == 256):
            return 1
        if span < 65536 or (nullable and span == 65536):
            return 2
        return 4

    def show(self, data: Any) -> str:
        """Describe this type using the definition names known to ``data``."""
        if isinstance(self, (Enum, Reference)):
            return data.definition(self.nr).name
        if isinstance(self, Vector):
            if isinstance(self.content, Unknown):
                return "vector"
            return f"vector<{self.content.show(data)}>"
        if isinstance(self, Sorted):
            return f"sorted<{data.definition(self.nr).name},{_key_pairs(self.keys)}>"
        if isinstance(self, Hash):
            return f"hash<{data.definition(self.nr).name},{_key_fields(self.keys)}>"
        if isinstance(self, Index):
            return f"index<{data.definition(self.nr).name},{_key_pairs(self.keys)}>"
        if isinstance(self, Spacial):
            return f"spacial<{data.definition(self.nr).name},{_key_fields(self.keys)}>"
        if isinstance(self, Routine):
            return f"fn {data.definition(self.nr).name}[{self.nr}]"
        return str(self)

    def __str__(self) -> str:
        if isinstance(self, Integer):
            if self.minimum == I32_MIN + 1 and self.maximum == I32_MAX:
                return "integer"
            if self.minimum == 0 and self.maximum == 256:
                return "byte"
        if isinstance(self, Vector) and isinstance(self.content, Unknown):
            return "vector"
        return self._debug().lower()


@dataclass(frozen=True)
class Unknown(Type):
    """Not yet known, linked to a definition unless 0."""

    nr: int = 0

    def _debug(self) -> str:
        return f"Unknown({self.nr})"


@dataclass(frozen=True)
class Null(Type):
    """Specifically undefined."""


@dataclass(frozen=True)
class Void(Type):
    """Result of a function without return type."""


@dataclass(frozen=True)
class Integer(Type):
    """An integer restricted to a range."""

    minimum: int
    maximum: int

    def _debug(self) -> str:
        return f"Integer({self.minimum}, {self.maximum})"


@dataclass(frozen=True)
class Boolean(Type):
    pass


@dataclass(frozen=True)
class Long(Type):
    pass


@dataclass(frozen=True)
class Float(Type):
    pass


@dataclass(frozen=True)
class Single(Type):
    pass


@dataclass(frozen=True)
class Text(Type):
    pass


@dataclass(frozen=True)
class Keys(Type):
    """Description of the possible keys on a structure."""


@dataclass(frozen=True)
class Enum(Type):
    """A value of the enum definition ``nr``."""

    nr: int

    def _debug(self) -> str:
        return f"Enum({self.nr})"


@dataclass(frozen=True)
class Reference(Type):
    """A read-only reference to a record of definition ``nr``."""

    nr: int

    def _debug(self) -> str:
        return f"Reference({self.nr})"


@dataclass(frozen=True)
class Vector(Type):
    """A dynamic vector of a content type."""

    content: Type

    def _debug(self) -> str:
        return f"Vector({self.content._debug()})"


@dataclass(frozen=True)
class Routine(Type):
    """A dynamic routine from definition ``nr``."""

    nr: int

    def _debug(self) -> str:
        return f"Routine({self.nr})"


@dataclass(frozen=True)
class Subtype(Type):
    """The n-th subtype of the first parameter."""

    nr: int

    def _debug(self) -> str:
        return f"Subtype({self.nr})"


@dataclass(frozen=True)
class Iterator(Type):
    """An iterator over a content type."""

    content: Type

    def _debug(self) -> str:
        return f"Iterator({self.content._debug()})"


@dataclass(frozen=True)
class Sorted(Type):
    """An ordered vector of records; keys are (field number, ascending)."""

    nr: int
    keys: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple((int(f), bool(a)) for f, a in self.keys))

    def _debug(self) -> str:
        return f"Sorted({self.nr}, {_key_pairs(self.keys)})"


@dataclass(frozen=True)
class Index(Type):
    """An index towards records; keys are (field number, ascending)."""

    nr: int
    keys: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple((int(f), bool(a)) for f, a in self.keys))

    def _debug(self) -> str:
        return f"Index({self.nr}, {_key_pairs(self.keys)})"


@dataclass(frozen=True)
class Spacial(Type):
    """A spacial index on the listed coordinate fields."""

    nr: int
    keys: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(int(f) for f in self.keys))

    def _debug(self) -> str:
        return f"Spacial({self.nr}, {_key_fields(self.keys)})"


@dataclass(frozen=True)
class Hash(Type):
    """A hash table on the listed key fields."""

    nr: int
    keys: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(int(f) for f in self.keys))

    def _debug(self) -> str:
        return f"Hash({self.nr}, {_key_fields(self.keys)})"


@dataclass(frozen=True)
class Function(Type):
    """A function reference with argument types and a result."""

    arguments: tuple
    result: Type

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))

    def _debug(self) -> str:
        args = _debug_list(a._debug() for a in self.arguments)
        return f"Function({args}, {self.result._debug()})"


I32 = Integer(I32_MIN + 1, I32_MAX)