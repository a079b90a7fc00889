"""Definitions, their attributes and variables."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from dryopea.typedefs import Type, Unknown
from dryopea.values import Null as NullValue
from dryopea.values import Value


@dataclass(frozen=True)
class Position:
    """A place in a source file."""

    file: str = ""
    line: int = 0
    pos: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.pos}"


@dataclass
class Argument:
    """A parameter given when adding a function."""

    name: str
    typedef: Type
    default: Value = field(default_factory=NullValue)
    constant: bool = False
    reference: bool = False


@dataclass
class Attribute:
    """An attribute allowed on a definition; the parameters of routines."""

    name: str
    typedef: Type
    mutable: bool = True
    reference: bool = False
    nullable: bool = True
    primary: bool = False
    value: Value = field(default_factory=NullValue)
    check: Value = field(default_factory=NullValue)

    def __repr__(self) -> str:
        return f"{self.name}:{self.typedef}"


@dataclass
class Variable:
    """A variable defined inside a routine."""

    name: str
    var_type: Type
    position: Position = field(default_factory=Position)
    uses: int = 0
    is_new: bool = False


class DefType(enum.Enum):
    """The kind of a definition."""

    UNKNOWN = "Unknown"
    FUNCTION = "Function"
    DYNAMIC = "Dynamic"
    ENUM = "Enum"
    ENUM_VALUE = "EnumValue"
    STRUCT = "Struct"
    VECTOR = "Vector"
    REFERENCE = "Reference"
    HASH = "Hash"
    INDEX = "Index"
    RADIX = "Radix"
    TYPE = "Type"
    CONSTANT = "Constant"

    def __str__(self) -> str:
        return self.value


class Context(enum.Enum):
    """Where a type is used when naming its generated form."""

    ARGUMENT = enum.auto()
    REFERENCE = enum.auto()
    RESULT = enum.auto()
    CONSTANT = enum.auto()
    VARIABLE = enum.auto()


@dataclass
class Definition:
    """A named type, record or routine."""

    name: str
    def_type: DefType = DefType.UNKNOWN
    position: Position = field(default_factory=Position)
    parent: int | None = None
    attributes: list[Attribute] = field(default_factory=list)
    attr_names: dict[str, int] = field(default_factory=dict)
    code: Value = field(default_factory=NullValue)
    returned: Type = field(default_factory=Unknown)
    rust: str = ""
    op_code: int | None = None
    code_position: int = 0
    code_length: int = 0
    known_type: int | None = None
    variables: list[Variable] = field(default_factory=list)

    def is_operator(self) -> bool:
        """A function named Op followed by an upper case letter."""
        return (
            self.def_type is DefType.FUNCTION
            and len(self.name) > 2
            and self.name.startswith("Op")
            and self.name[2].isupper()
        )

    def __str__(self) -> str:
        return f"{self.name}: {self.def_type}"