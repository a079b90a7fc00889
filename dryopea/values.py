"""Values that make up parsed code and attribute defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dryopea import typedefs


@dataclass(frozen=True)
class Value:
    """Base of all values."""

    def is_op(self, op: int) -> bool:
        """True when this is a call to definition ``op``."""
        return isinstance(self, Call) and self.op == op


@dataclass(frozen=True)
class Null(Value):
    """No value."""


@dataclass(frozen=True)
class Int(Value):
    value: int


@dataclass(frozen=True)
class Enum(Value):
    """An enum value together with its database type."""

    value: int
    tp: int


@dataclass(frozen=True)
class Boolean(Value):
    value: bool


@dataclass(frozen=True)
class Float(Value):
    value: float


@dataclass(frozen=True)
class Long(Value):
    value: int


@dataclass(frozen=True)
class Single(Value):
    value: float


@dataclass(frozen=True)
class Text(Value):
    value: str


@dataclass(frozen=True)
class Call(Value):
    """Call the routine of definition ``op`` with argument values."""

    op: int
    args: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class Block(Value):
    """A block of steps."""

    steps: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))


@dataclass(frozen=True)
class Var(Value):
    """Read a variable relative to the start of the current function."""

    var: int


@dataclass(frozen=True)
class Set(Value):
    """Assign an expression to a variable."""

    var: int
    value: Value


@dataclass(frozen=True)
class Let(Value):
    """Assign an expression to a new variable."""

    var: int
    value: Value


@dataclass(frozen=True)
class Return(Value):
    value: Value


@dataclass(frozen=True)
class Break(Value):
    """Break out of the n-th loop."""

    loop: int


@dataclass(frozen=True)
class Continue(Value):
    """Continue the n-th loop."""

    loop: int


@dataclass(frozen=True)
class If(Value):
    test: Value
    true_value: Value
    false_value: Value


@dataclass(frozen=True)
class Loop(Value):
    """Repeat the steps until a break is met."""

    steps: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))


@dataclass(frozen=True)
class Drop(Value):
    """Discard the result of a call."""

    value: Value


@dataclass(frozen=True)
class Iter(Value):
    """Creation of an iterator and its next expression."""

    start: Value
    next_value: Value


@dataclass(frozen=True)
class Keys(Value):
    """A key structure."""

    keys: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))


_ZERO_INT_TYPES = (
    typedefs.Integer,
    typedefs.Boolean,
    typedefs.Enum,
    typedefs.Vector,
    typedefs.Sorted,
    typedefs.Index,
    typedefs.Hash,
    typedefs.Spacial,
)


def to_default(tp: typedefs.Type) -> Value:
    """The default value of a type."""
    if isinstance(tp, _ZERO_INT_TYPES):
        return Int(0)
    if isinstance(tp, typedefs.Long):
        return Long(0)
    if isinstance(tp, typedefs.Single):
        return Single(0.0)
    if isinstance(tp, typedefs.Float):
        return Float(0.0)
    if isinstance(tp, typedefs.Text):
        return Text("")
    return Null()


def v_if(test: Value, true_value: Value, false_value: Value) -> If:
    return If(test, true_value, false_value)


def v_set(var: int, value: Value) -> Set:
    return Set(var, value)


def v_let(var: int, value: Value) -> Let:
    return Let(var, value)