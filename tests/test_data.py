import pytest

from dryopea.data import Data, DefinitionError, rust_type
from dryopea.definitions import Argument, Context, DefType, Position, Variable
from dryopea.diagnostics import Diagnostics, Level
from dryopea.typedefs import (
    I32,
    Integer,
    Keys,
    Long,
    Null,
    Reference,
    Routine,
    Spacial,
    Text,
    Unknown,
    Vector,
)
from dryopea.values import Int

POS = Position("test.gcp", 1, 1)
BASES = ("integer", "long", "boolean", "float", "text", "single",
         "vector", "reference", "index", "hash")


@pytest.fixture
def data():
    d = Data()
    for name in BASES:
        d.add_def(name, POS, DefType.TYPE)
    return d


def test_add_def_numbers_and_lookup(data):
    nr = data.add_def("point", POS, DefType.STRUCT)
    assert nr == len(BASES)
    assert len(data) == len(BASES) + 1
    assert data.def_nr("point") == nr
    assert data.def_name("point").def_type is DefType.STRUCT
    assert data.definition(nr).returned == Unknown(nr)
    assert data.def_nr("missing") is None


def test_dual_definition_raises(data):
    with pytest.raises(DefinitionError):
        data.add_def("integer", POS, DefType.TYPE)


def test_def_name_unknown_raises(data):
    with pytest.raises(DefinitionError):
        data.def_name("missing")


def test_add_fn_self(data):
    diag = Diagnostics()
    nr = data.add_fn(diag, POS, "abs", [Argument("self", I32)])
    assert data.definition(nr).name == "_tp_integer_abs"
    integer = data.def_nr("integer")
    a_nr = data.attr(integer, "abs")
    assert data.attr_type(integer, a_nr) == Routine(nr)
    assert data.definition(integer).attributes[a_nr].mutable is False
    assert data.get_fn("abs", [Argument("self", I32)]) == nr
    assert diag.is_empty()


def test_add_fn_redefine_reports_error(data):
    diag = Diagnostics()
    data.add_fn(diag, POS, "print", [Argument("v", Text())])
    assert data.add_fn(diag, POS, "print", [Argument("v", Text())]) is None
    assert diag.level == Level.ERROR
    assert diag.lines[0].startswith("Error: Cannot redefine")


def test_add_fn_both_creates_dynamic(data):
    diag = Diagnostics()
    nr = data.add_fn(diag, POS, "len", [Argument("both", Text())])
    main = data.def_nr("len")
    assert data.def_type(main) is DefType.DYNAMIC
    a_nr = data.attr(main, "text")
    assert data.attr_type(main, a_nr) == Routine(nr)
    assert data.get_fn("len", [Argument("both", Text())]) == nr


def test_add_fn_unknown_self_type(data):
    diag = Diagnostics()
    nr = data.add_fn(diag, POS, "odd", [Argument("self", Keys())])
    assert data.definition(nr).name == "odd"
    assert "Unknown type" in diag.lines[0]


def test_add_fn_arguments(data):
    diag = Diagnostics()
    nr = data.add_fn(
        diag, POS, "f", [Argument("a", I32, Int(1), constant=True), Argument("b", Long())]
    )
    attrs = data.definition(nr).attributes
    assert [a.name for a in attrs] == ["a", "b"]
    assert attrs[0].mutable is False and attrs[1].mutable is True
    assert attrs[0].value == Int(1)


def test_operators(data):
    diag = Diagnostics()
    first = data.add_op(diag, POS, "OpAddInt", [Argument("a", I32), Argument("b", I32)])
    second = data.add_op(diag, POS, "OpAddLong", [Argument("a", Long()), Argument("b", Long())])
    assert data.get_possible("OpAdd", POS) == [first, second]
    assert data.definition(first).op_code == 0
    assert data.has_op(1)
    assert data.operator(1).name == "OpAddLong"
    assert not data.has_op(2)
    with pytest.raises(DefinitionError):
        data.operator(5)


def test_get_possible_unknown_raises(data):
    diag = Diagnostics()
    data.add_op(diag, POS, "OpGenThing", [])
    with pytest.raises(DefinitionError):
        data.get_possible("OpGen", POS)


def test_set_returned_once(data):
    nr = data.add_def("f", POS, DefType.FUNCTION)
    data.set_returned(nr, I32)
    assert data.attr_type(nr, None) == I32
    with pytest.raises(DefinitionError):
        data.set_returned(nr, Text())


def test_set_attr_type_once(data):
    diag = Diagnostics()
    nr = data.add_def("point", POS, DefType.STRUCT)
    a_nr = data.add_attribute(diag, nr, "x", Unknown(0), False)
    data.set_attr_type(nr, a_nr, I32)
    assert data.attr_type(nr, a_nr) == I32
    with pytest.raises(DefinitionError):
        data.set_attr_type(nr, a_nr, Long())
    with pytest.raises(DefinitionError):
        data.set_attr_type(nr, None, Long())


def test_double_attribute(data):
    diag = Diagnostics()
    nr = data.add_def("point", POS, DefType.STRUCT)
    a_nr = data.add_attribute(diag, nr, "x", Unknown(0), False)
    assert data.add_attribute(diag, nr, "x", Unknown(0), False) == a_nr
    assert "Double attribute 'point.x'" in diag.lines[0]
    data.add_attribute(diag, nr, "x", I32, False)
    assert "Cannot change the type of attribute: point.x" in diag.lines[1]


def test_set_attr_check(data):
    diag = Diagnostics()
    nr = data.add_fn(diag, POS, "f", [Argument("a", I32), Argument("b", I32, Int(2))])
    data.set_attr_check(nr, 0, Int(3))
    assert data.definition(nr).attributes[0].check == Int(3)
    with pytest.raises(DefinitionError):
        data.set_attr_check(nr, 1, Int(3))


def test_attr_nullable(data):
    diag = Diagnostics()
    nr = data.add_def("point", POS, DefType.STRUCT)
    a_nr = data.add_attribute(diag, nr, "x", I32, False)
    assert data.attr_nullable(nr, a_nr) is True
    assert data.attr_nullable(nr, None) is False


def test_referenced(data):
    data.set_referenced(1, 2, Int(0))
    data.set_referenced(None, 2, Int(0))
    assert data.def_referenced(1)
    assert not data.def_referenced(2)
    assert data.def_type(None) is DefType.UNKNOWN


@pytest.mark.parametrize(
    "tp, context, expected",
    [
        (Integer(0, 255), Context.ARGUMENT, "u8"),
        (Integer(0, 1000), Context.ARGUMENT, "u16"),
        (Integer(-10, 100), Context.ARGUMENT, "i8"),
        (Integer(-1000, 1000), Context.ARGUMENT, "i16"),
        (I32, Context.ARGUMENT, "i32"),
        (Text(), Context.ARGUMENT, "Str"),
        (Text(), Context.VARIABLE, "String"),
        (Long(), Context.REFERENCE, "&i64"),
        (Reference(3), Context.RESULT, "DbRef"),
        (Unknown(0), Context.ARGUMENT, "??"),
    ],
)
def test_rust_type(tp, context, expected):
    assert rust_type(tp, context) == expected


def test_rust_type_incorrect():
    with pytest.raises(DefinitionError):
        rust_type(Spacial(1, (0,)), Context.ARGUMENT)


def test_type_def_nr_and_elm(data):
    assert data.type_def_nr(Vector(I32)) == data.def_nr("vector")
    assert data.type_elm(Vector(I32)) == data.def_nr("integer")
    assert data.type_elm(Vector(Reference(7))) == 7
    assert data.type_def_nr(Text()) == data.def_nr("text")
    assert data.type_def_nr(Null()) is None


def test_vector_def_is_reused(data):
    diag = Diagnostics()
    first = data.vector_def(diag, POS, I32)
    assert data.vector_def(diag, POS, I32) == first
    definition = data.definition(first)
    assert definition.name.startswith("main_vector<")
    assert definition.attributes[0].typedef == Vector(I32)


def test_check_vector(data):
    point = data.add_def("point", POS, DefType.STRUCT)
    v_nr = data.check_vector(point, 12, POS)
    assert data.definition(v_nr).name == "vector<point>"
    assert data.definition(v_nr).parent == point
    assert data.definition(v_nr).known_type == 12
    assert data.check_vector(point, 13, POS) == v_nr


def test_show_type(data):
    point = data.add_def("point", POS, DefType.STRUCT)
    assert data.show_type(Vector(Reference(point))) == "vector<point>"
    assert data.show_type(Routine(point)) == "fn point"


def test_change_var_type(data):
    diag = Diagnostics()
    f = data.add_def("f", POS, DefType.FUNCTION)
    data.definition(f).variables.append(Variable("v", Unknown(0), POS, is_new=True))
    assert data.change_var_type(diag, POS, f, Int(0), I32) is False
    from dryopea.values import Var
    assert data.change_var_type(diag, POS, f, Var(0), I32) is True
    assert data.definition(f).variables[0].var_type == I32
    assert data.change_var_type(diag, POS, f, Var(0), Text()) is False
    assert "Cannot change type of variable 'v'" in diag.lines[0]
    assert data.change_var_type(diag, POS, None, Var(0), I32) is False


def test_change_var_type_vector(data):
    from dryopea.values import Var
    diag = Diagnostics()
    f = data.add_def("f", POS, DefType.FUNCTION)
    data.definition(f).variables.append(Variable("w", Vector(Unknown(0)), POS))
    data.change_var_type(diag, POS, f, Var(0), Vector(I32))
    assert data.definition(f).variables[0].var_type == Vector(I32)
    assert any(d.name.startswith("main_vector<") for d in data.definitions)
    assert diag.is_empty()


def test_test_used(data):
    diag = Diagnostics()
    f = data.add_fn(diag, POS, "f", [Argument("a", I32)])
    data.definition(f).variables.extend(
        [Variable("a", I32, POS), Variable("b", I32, POS, uses=1), Variable("_c", I32, POS)]
    )
    data.test_used(f, diag)
    assert diag.lines == ["Parameter a is never read in test.gcp line 1:1"]
    assert diag.level == Level.WARNING


def test_find_unused(data):
    diag = Diagnostics()
    point = data.add_def("point", POS, DefType.STRUCT)
    data.add_attribute(diag, point, "x", I32, False)
    data.add_attribute(diag, point, "y", I32, False)
    data.def_used(point)
    data.attr_used(point, 1)
    data.find_unused(diag)
    assert len(diag) == len(BASES) + 1
    assert any(line.startswith("Unused field point.x") for line in diag)
    assert not any("point.y" in line for line in diag)
    assert any(line.startswith("Unused definition integer") for line in diag)


def test_show_prints_definitions(data, capsys):
    diag = Diagnostics()
    f = data.add_fn(diag, POS, "f", [Argument("a", I32)])
    data.set_returned(f, Text())
    data.add_def("hidden", Position("default/01_code.gcp", 1, 1), DefType.TYPE)
    data.show()
    out = capsys.readouterr().out.splitlines()
    assert len(out) == len(BASES) + 1
    assert out[-1].startswith("test.gcp f(a:")
    assert out[-1].endswith(f" -> {Text()}")