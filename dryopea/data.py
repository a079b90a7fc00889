"""The collection of all definitions: types, records and routines."""

from __future__ import annotations

from typing import Iterable

from dryopea.definitions import (
    Argument,
    Attribute,
    Context,
    Definition,
    DefType,
    Position,
)
from dryopea.diagnostics import Diagnostics, Level, diagnostic_format
from dryopea.typedefs import (
    Boolean,
    Enum,
    Float,
    Hash,
    Index,
    Integer,
    Long,
    Reference,
    Routine,
    Single,
    Sorted,
    Subtype,
    Text,
    Type,
    Unknown,
    Vector,
)
from dryopea.values import Null as NullValue
from dryopea.values import Value, Var

OPERATORS = (
    "OpAdd", "OpMin", "OpMul", "OpDiv", "OpRem", "OpPow",
    "OpNot", "OpLand", "OpLor", "OpEor", "OpSLeft", "OpSRight",
    "OpEq", "OpNe", "OpLt", "OpLe", "OpGt", "OpGe",
    "OpAppend", "OpConv", "OpCast",
)

_CODE_FILE = "default/01_code.gcp"


class DefinitionError(Exception):
    """Raised on inconsistent use of definitions."""


def _error(diagnostics: Diagnostics, message: str) -> None:
    diagnostics.add(Level.ERROR, diagnostic_format(Level.ERROR, message))


def rust_type(tp: Type, context: Context) -> str:
    """The name of the generated native type for ``tp``."""
    if context is Context.REFERENCE:
        return "&" + rust_type(tp, Context.ARGUMENT)
    if isinstance(tp, Integer):
        span = tp.maximum - tp.minimum
        if span <= 255 and tp.minimum >= 0:
            return "u8"
        if span <= 65536 and tp.minimum >= 0:
            return "u16"
        if span <= 255:
            return "i8"
        if span <= 65536:
            return "i16"
        return "i32"
    if isinstance(tp, Enum):
        return "u8"
    if isinstance(tp, Text):
        return "String" if context is Context.VARIABLE else "Str"
    simple = {
        Long: "i64",
        Boolean: "bool",
        Float: "f64",
        Single: "f32",
        Routine: "u32",
        Subtype: "T",
        Unknown: "??",
    }
    for kind, name in simple.items():
        if isinstance(tp, kind):
            return name
    if isinstance(tp, (Reference, Vector, Hash, Sorted, Index)):
        return "DbRef"
    raise DefinitionError(f"Incorrect type {tp}")


class Data:
    """All definitions known to a program, addressed by number or name."""

    def __init__(self) -> None:
        self.definitions: list[Definition] = []
        self.def_names: dict[str, int] = {}
        self._used_definitions: set[int] = set()
        self._used_attributes: set[tuple[int, int]] = set()
        self._referenced: dict[int, tuple[int, Value]] = {}
        self._op_codes = 0
        self._possible: dict[str, list[int]] = {}
        self._operators: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.definitions)

    def definition(self, d_nr: int) -> Definition:
        return self.definitions[d_nr]

    def def_nr(self, name: str) -> int | None:
        """The number of a definition by name, None when unknown."""
        return self.def_names.get(name)

    def def_name(self, name: str) -> Definition:
        nr = self.def_names.get(name)
        if nr is None:
            raise DefinitionError(f"Unknown definition {name}")
        return self.definitions[nr]

    def add_def(self, name: str, position: Position, def_type: DefType) -> int:
        """Add a new definition and return its number."""
        if name in self.def_names:
            raise DefinitionError(f"Dual definition of {name} at {position}")
        rec = len(self.definitions)
        self.def_names[name] = rec
        new_def = Definition(
            name=name,
            def_type=def_type,
            position=position,
            returned=Unknown(rec),
        )
        if new_def.is_operator():
            new_def.op_code = self._op_codes
            self._op_codes += 1
            self._operators[new_def.op_code] = rec
        self.definitions.append(new_def)
        return rec

    def add_attribute(
        self,
        diagnostics: Diagnostics,
        on_def: int,
        name: str,
        typedef: Type,
        reference: bool,
    ) -> int:
        """Allow a new attribute on a definition; returns its number."""
        definition = self.definitions[on_def]
        if name in definition.attr_names:
            orig = definition.attr_names[name]
            attr = definition.attributes[orig]
            if attr.typedef.is_unknown():
                if attr.typedef == typedef:
                    _error(diagnostics, f"Double attribute '{definition.name}.{name}'")
                else:
                    _error(
                        diagnostics,
                        f"Cannot change the type of attribute: {definition.name}.{name}",
                    )
            return orig
        next_attr = len(definition.attributes)
        definition.attr_names[name] = next_attr
        definition.attributes.append(
            Attribute(name=name, typedef=typedef, reference=reference)
        )
        return next_attr

    def change_var_type(
        self,
        diagnostics: Diagnostics,
        position: Position,
        def_nr: int | None,
        val: Value,
        tp: Type,
    ) -> bool:
        """Give a new local variable its type from an assignment.

        Returns True when the variable was still new.
        """
        if def_nr is None:
            return False
        new = False
        if isinstance(val, Var):
            var = self.definitions[def_nr].variables[val.var]
            if var.is_new:
                new = True
                var.is_new = False
            if tp.is_unknown():
                return new
            if isinstance(var.var_type, Vector):
                if var.var_type.content.is_unknown():
                    var.var_type = tp
                    if isinstance(tp, Vector):
                        self.vector_def(diagnostics, position, tp.content)
            elif var.var_type.is_unknown():
                var.var_type = tp
            elif not var.var_type.is_same(tp):
                _error(
                    diagnostics,
                    f"Cannot change type of variable '{var.name}' from "
                    f"'{var.var_type.show(self)}' to '{tp.show(self)}'",
                )
        return new

    def test_used(self, def_nr: int, diagnostics: Diagnostics) -> None:
        """Warn about parameters and variables that are never read."""
        definition = self.definitions[def_nr]
        parameters = len(definition.attributes)
        for nr, var in enumerate(definition.variables):
            if var.uses == 0 and not var.name.startswith("_"):
                kind = "Parameter" if nr < parameters else "Variable"
                diagnostics.add(
                    Level.WARNING,
                    f"{kind} {var.name} is never read in {var.position.file} "
                    f"line {var.position.line}:{var.position.pos}",
                )

    def get_possible(self, start: str, position: Position) -> list[int]:
        """The operator definitions whose name starts with ``start``."""
        if start not in self._possible:
            raise DefinitionError(f"Unknown operator {start} at {position}")
        return list(self._possible[start])

    def def_referenced(self, d_nr: int) -> bool:
        return d_nr in self._referenced

    def set_referenced(self, d_nr: int | None, t_nr: int, change: Value) -> None:
        if d_nr is not None:
            self._referenced[d_nr] = (t_nr, change)

    def def_type(self, d_nr: int | None) -> DefType:
        if d_nr is None:
            return DefType.UNKNOWN
        return self.definitions[d_nr].def_type

    def set_returned(self, d_nr: int, tp: Type) -> None:
        """Set the return type of a definition; only allowed once."""
        definition = self.definitions[d_nr]
        if not definition.returned.is_unknown():
            raise DefinitionError(
                f"Cannot change returned type on [{d_nr}]{definition.name} to {tp} "
                f"twice was {definition.returned} at {definition.position}"
            )
        definition.returned = tp

    def attr(self, d_nr: int, name: str) -> int | None:
        return self.definitions[d_nr].attr_names.get(name)

    def attr_type(self, d_nr: int, a_nr: int | None) -> Type:
        """The type of an attribute, or the returned type when ``a_nr`` is None."""
        definition = self.definitions[d_nr]
        if a_nr is None:
            return definition.returned
        return definition.attributes[a_nr].typedef

    def set_attr_type(self, d_nr: int, a_nr: int | None, tp: Type) -> None:
        """Set the type of an attribute that is still unknown."""
        if a_nr is None or not self.attr_type(d_nr, a_nr).is_unknown():
            definition = self.definitions[d_nr]
            name = "" if a_nr is None else definition.attributes[a_nr].name
            raise DefinitionError(
                f"Cannot set attribute type {definition.name}.{name} twice was "
                f"{self.attr_type(d_nr, a_nr)} to {tp}"
            )
        self.definitions[d_nr].attributes[a_nr].typedef = tp

    def set_attr_check(self, d_nr: int, a_nr: int, check: Value) -> None:
        attribute = self.definitions[d_nr].attributes[a_nr]
        if attribute.value != NullValue():
            raise DefinitionError("Cannot set attribute value twice")
        attribute.check = check

    def attr_nullable(self, d_nr: int, a_nr: int | None) -> bool:
        if a_nr is None:
            return False
        return self.definitions[d_nr].attributes[a_nr].nullable

    def _add_arguments(
        self, diagnostics: Diagnostics, d_nr: int, arguments: Iterable[Argument]
    ) -> None:
        for arg in arguments:
            a_nr = self.add_attribute(
                diagnostics, d_nr, arg.name, arg.typedef, arg.reference
            )
            attribute = self.definitions[d_nr].attributes[a_nr]
            attribute.value = arg.default
            attribute.mutable = not arg.constant

    def add_fn(
        self,
        diagnostics: Diagnostics,
        position: Position,
        fn_name: str,
        arguments: list[Argument],
    ) -> int | None:
        """Add a function; returns None when it already exists."""
        name = fn_name
        is_self = bool(arguments) and arguments[0].name == "self"
        is_both = bool(arguments) and arguments[0].name == "both"
        type_nr = None
        if is_self or is_both:
            type_nr = self.type_def_nr(arguments[0].typedef)
            if type_nr is None:
                _error(diagnostics, f'Unknown type "{arguments[0].name}" on {fn_name}')
            else:
                name = f"_tp_{self.definitions[type_nr].name}_{fn_name}"
        existing = self.def_nr(name)
        if existing is not None:
            _error(diagnostics, f"Cannot redefine {self.def_type(existing)} {fn_name}")
            return None
        d_nr = self.add_def(name, position, DefType.FUNCTION)
        self._add_arguments(diagnostics, d_nr, arguments)
        if is_both and type_nr is None:
            raise DefinitionError(
                f"Unknown type {arguments[0].name}: {arguments[0].typedef} at {position}"
            )
        if type_nr is not None:
            a_nr = self.add_attribute(
                diagnostics, type_nr, fn_name, Routine(d_nr), False
            )
            self.definitions[type_nr].attributes[a_nr].mutable = False
        if is_both:
            main = self.def_nr(fn_name)
            if main is None:
                main = self.add_def(fn_name, position, DefType.DYNAMIC)
            type_name = self.definitions[type_nr].name
            a_nr = self.add_attribute(diagnostics, main, type_name, Routine(d_nr), False)
            self.definitions[main].attributes[a_nr].mutable = False
        return d_nr

    def get_fn(self, fn_name: str, arguments: list[Argument]) -> int | None:
        """Find a function as it was named by ``add_fn``."""
        if arguments and arguments[0].name in ("self", "both"):
            type_nr = self.type_def_nr(arguments[0].typedef)
            if type_nr is None:
                return None
            return self.def_nr(f"_tp_{self.definitions[type_nr].name}_{fn_name}")
        return self.def_nr(fn_name)

    def add_op(
        self,
        diagnostics: Diagnostics,
        position: Position,
        fn_name: str,
        arguments: list[Argument],
    ) -> int:
        """Add an operator and register it under the operators it implements."""
        d_nr = self.add_def(fn_name, position, DefType.FUNCTION)
        self._add_arguments(diagnostics, d_nr, arguments)
        definition = self.definitions[d_nr]
        if definition.is_operator() and not definition.name.startswith("OpGen"):
            for op in OPERATORS:
                if definition.name.startswith(op):
                    self._possible.setdefault(op, []).append(d_nr)
        return d_nr

    def vector_def(self, diagnostics: Diagnostics, position: Position, tp: Type) -> int:
        """The record definition holding a single vector of ``tp``."""
        name = f"main_vector<{tp.show(self)}>"
        d_nr = self.def_nr(name)
        if d_nr is not None:
            return d_nr
        vd = self.add_def(name, position, DefType.STRUCT)
        self.add_attribute(diagnostics, vd, "vector", Vector(tp), False)
        return vd

    def check_vector(self, d_nr: int, vec_tp: int, position: Position) -> int:
        """The vector definition over definition ``d_nr``, created when missing."""
        vec_name = f"vector<{self.definitions[d_nr].name}>"
        v_nr = self.def_nr(vec_name)
        if v_nr is None:
            v_nr = self.add_def(vec_name, position, DefType.VECTOR)
            self.definitions[v_nr].parent = d_nr
            self.definitions[v_nr].known_type = vec_tp
        return v_nr

    def has_op(self, op: int) -> bool:
        return op in self._operators

    def operator(self, op: int) -> Definition:
        if op not in self._operators:
            raise DefinitionError(f"Unknown operator code {op}")
        return self.definitions[self._operators[op]]

    def attr_used(self, d_nr: int, a_nr: int) -> None:
        self._used_attributes.add((d_nr, a_nr))

    def def_used(self, d_nr: int) -> None:
        self._used_definitions.add(d_nr)

    def show_type(self, tp: Type) -> str:
        if isinstance(tp, (Reference, Enum)):
            return self.definitions[tp.nr].name
        if isinstance(tp, Vector):
            return f"vector<{self.show_type(tp.content)}>"
        if isinstance(tp, Routine):
            return f"fn {self.definitions[tp.nr].name}"
        return str(tp)

    def _base_def_nr(self, tp: Type) -> int | None:
        for kind, name in (
            (Integer, "integer"),
            (Long, "long"),
            (Boolean, "boolean"),
            (Float, "float"),
            (Text, "text"),
        ):
            if isinstance(tp, kind):
                return self.def_nr(name)
        return None

    def type_def_nr(self, tp: Type) -> int | None:
        """The definition that describes type ``tp``."""
        base = self._base_def_nr(tp)
        if base is not None:
            return base
        if isinstance(tp, (Integer, Long, Boolean, Float, Text)):
            return None
        if isinstance(tp, Single):
            return self.def_nr("single")
        if isinstance(tp, (Routine, Enum, Reference, Unknown)):
            return tp.nr
        if isinstance(tp, Vector):
            return self.def_nr("vector")
        if isinstance(tp, Sorted):
            return self.def_nr("reference")
        if isinstance(tp, Index):
            return self.def_nr("index")
        if isinstance(tp, Hash):
            return self.def_nr("hash")
        return None

    def type_elm(self, tp: Type) -> int | None:
        """The definition of the elements of type ``tp``."""
        if isinstance(tp, (Integer, Long, Boolean, Float, Text)):
            return self._base_def_nr(tp)
        if isinstance(tp, (Routine, Enum, Reference)):
            return tp.nr
        if isinstance(tp, Vector):
            if isinstance(tp.content, Reference):
                return tp.content.nr
            return self.type_def_nr(tp.content)
        if isinstance(tp, (Sorted, Index, Hash)):
            return self.def_nr("reference")
        return None

    def find_unused(self, diagnostics: Diagnostics) -> None:
        """Warn about definitions and fields that were never used."""
        for d_nr, definition in enumerate(self.definitions):
            if d_nr in self._used_definitions:
                for a_nr, attr in enumerate(definition.attributes):
                    if (d_nr, a_nr) not in self._used_attributes:
                        diagnostics.add(
                            Level.WARNING,
                            f"Unused field {definition.name}.{attr.name} "
                            f"{definition.position}",
                        )
            else:
                diagnostics.add(
                    Level.WARNING,
                    f"Unused definition {definition.name} {definition.position}",
                )

    def show(self) -> None:
        """Print all definitions outside the default code file."""
        for definition in self.definitions:
            if definition.position.file == _CODE_FILE:
                continue
            line = f"{definition.position.file} {definition.name}"
            if definition.attributes:
                line += "(" + "".join(
                    f"{a.name}:{a.typedef}, " for a in definition.attributes
                ) + ")"
            if not definition.returned.is_unknown():
                line += f" -> {definition.returned}"
            print(line)