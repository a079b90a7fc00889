"""Generation of the operator table source from the default library."""

from __future__ import annotations

from pathlib import Path

from dryopea.data import Data, rust_type
from dryopea.definitions import Context
from dryopea.typedefs import Text, Void

_HEADER = """#![allow(clippy::cast_possible_wrap)]
#![allow(clippy::cast_sign_loss)]
#![allow(clippy::cast_possible_truncation)]
#![allow(clippy::too_many_lines)]
use crate::database::Stores;
use crate::external;
use crate::keys::{DbRef, Str};
use crate::state::State;
use crate::vector;

pub const OPERATORS: &[fn(&mut State)] = &[
"""


def operator_name(operator: str) -> str:
    """Snake case name of an operator without its ``Op`` prefix."""
    result = []
    for i, c in enumerate(operator):
        if i < 2:
            continue
        if c.isupper():
            if i > 2:
                result.append("_")
            result.append(c.lower())
        else:
            result.append(c)
    return "".join(result)


def _operator_body(definition) -> list[str]:
    name = operator_name(definition.name)
    lines = [f"\nfn {name}(s: &mut State) {{"]
    res = definition.rust
    attributes = [a for a in definition.attributes if not a.name.startswith("_")]
    if res:
        for a in attributes:
            tp = rust_type(a.typedef, Context.ARGUMENT)
            if not a.mutable:
                lines.append(f"    let {a.name} = *s.code::<{tp}>();")
        for a in reversed(attributes):
            tp = rust_type(a.typedef, Context.ARGUMENT)
            if a.reference:
                lines.append(f"    let {a.name} = *s.get_stack::<u32>();")
            elif a.mutable:
                if isinstance(a.typedef, Text):
                    lines.append(f"    let {a.name} = s.string();")
                else:
                    lines.append(f"    let {a.name} = *s.get_stack::<{tp}>();")
    for a in definition.attributes:
        repl = a.name + (".str()" if isinstance(a.typedef, Text) else "")
        res = res.replace("@" + a.name, repl)
    res = res.replace("stores.", "s.database.")
    returned = definition.returned
    if not res:
        lines.append(f"    s.{name}();")
    elif isinstance(returned, Void) or (
        isinstance(returned, Text) and definition.name.startswith("OpConst")
    ):
        lines.append(f"    {res}")
    else:
        lines.append(f"    let new_value = {res};")
        lines.append("    s.put_stack(new_value);")
    lines.append("}")
    return lines


def fill_source(data: Data) -> str:
    """The source text of the operator table and its operator functions."""
    operators = [d for d in data.definitions if d.is_operator()]
    lines = [f"    {operator_name(d.name)}," for d in operators]
    lines.append("];")
    for definition in operators:
        lines.extend(_operator_body(definition))
    return _HEADER + "\n".join(lines) + "\n"


def generate_code(data: Data, path) -> None:
    """Write the operator table source to ``path``."""
    Path(path).write_text(fill_source(data), encoding="utf-8")