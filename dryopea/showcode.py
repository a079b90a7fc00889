"""Readable text of the parse tree of a definition."""

from __future__ import annotations

import math
from decimal import Decimal

from dryopea import values as v
from dryopea.data import Data


def _number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(Decimal(repr(float(value))).normalize(), "f")


def _steps(data: Data, d_nr: int, steps, indent: int) -> str:
    body = "".join(show_code(data, d_nr, step, indent + 1, True) + ";\n" for step in steps)
    return body + "  " * indent + "}"


def show_code(data: Data, d_nr: int, value: v.Value, indent: int, start: bool) -> str:
    """Text of ``value`` inside definition ``d_nr``; ``start`` indents the first line."""
    prefix = "  " * indent if start else ""

    def var_name(nr: int) -> str:
        return data.definition(d_nr).variables[nr].name

    def inner(sub: v.Value, deeper: int = indent, first: bool = False) -> str:
        return show_code(data, d_nr, sub, deeper, first)

    match value:
        case v.Null():
            text = "null"
        case v.Int(i):
            text = f"{i}i32"
        case v.Enum(e, tp):
            text = f"{e}u8({tp})"
        case v.Boolean(b):
            text = "true" if b else "false"
        case v.Float(f):
            text = f"{_number(f)}f64"
        case v.Long(i):
            text = f"{i}i64"
        case v.Single(f):
            text = f"{_number(f)}f32"
        case v.Text(t):
            text = f'"{t}"'
        case v.Iter(first, following):
            text = (
                inner(first, indent + 1, True)
                + "loop {"
                + inner(following, indent + 1)
                + "}"
            )
        case v.Call(op, args):
            arguments = ", ".join(inner(arg) for arg in args)
            text = f"{data.definition(op).name}({arguments})"
        case v.Block(steps):
            text = "{\n" + _steps(data, d_nr, steps, indent)
        case v.Var(nr):
            text = var_name(nr)
        case v.Set(nr, to):
            text = f"{var_name(nr)} = " + inner(to)
        case v.Let(nr, to):
            text = f"let {var_name(nr)} = " + inner(to)
        case v.Return(expr):
            text = "return " + inner(expr)
        case v.Break(loop):
            text = f"break({loop})"
        case v.Continue(loop):
            text = f"continue({loop})"
        case v.If(test, true_value, false_value):
            text = (
                "if " + inner(test) + " {" + inner(true_value)
                + "} else {" + inner(false_value) + "}"
            )
        case v.Loop(steps):
            text = "loop {\n" + _steps(data, d_nr, steps, indent)
        case v.Drop(expr):
            text = "drop " + inner(expr)
        case v.Keys(keys):
            text = f"&{list(keys)!r}"
        case _:
            raise TypeError(f"Unknown value {value!r}")
    return prefix + text


def dump(data: Data, value: v.Value, d_nr: int) -> None:
    """Print the parse tree of ``value`` to standard output."""
    print(show_code(data, d_nr, value, 0, True))