import pytest

from dryopea.data import Data
from dryopea.definitions import DefType, Position, Variable
from dryopea.showcode import dump, show_code
from dryopea.typedefs import I32
from dryopea.values import (
    Block,
    Boolean,
    Break,
    Call,
    Continue,
    Drop,
    Enum,
    Float,
    If,
    Int,
    Iter,
    Let,
    Long,
    Loop,
    Null,
    Return,
    Set,
    Single,
    Text,
    Var,
)

POS = Position("test.gcp", 1, 1)


@pytest.fixture
def setup():
    data = Data()
    f = data.add_def("f", POS, DefType.FUNCTION)
    data.definition(f).variables.extend([Variable("x", I32, POS), Variable("y", I32, POS)])
    p = data.add_def("print", POS, DefType.FUNCTION)
    return data, f, p


@pytest.mark.parametrize(
    "value, expected",
    [
        (Null(), "null"),
        (Int(3), "3i32"),
        (Long(5), "5i64"),
        (Boolean(True), "true"),
        (Boolean(False), "false"),
        (Text("hi"), '"hi"'),
        (Enum(2, 7), "2u8(7)"),
        (Float(1.5), "1.5f64"),
        (Float(2.0), "2f64"),
        (Single(0.5), "0.5f32"),
        (Break(0), "break(0)"),
        (Continue(1), "continue(1)"),
    ],
)
def test_simple_values(setup, value, expected):
    data, f, _ = setup
    assert show_code(data, f, value, 0, True) == expected


def test_call_and_variables(setup):
    data, f, p = setup
    assert show_code(data, f, Call(p, (Var(0), Int(1))), 0, False) == "print(x, 1i32)"
    assert show_code(data, f, Return(Var(1)), 0, False) == "return y"
    assert show_code(data, f, Drop(Call(p, ())), 0, False) == "drop print()"


def test_block(setup):
    data, f, _ = setup
    block = Block((Let(0, Int(1)), Set(1, Var(0))))
    assert show_code(data, f, block, 0, True) == "{\n  let x = 1i32;\n  y = x;\n}"


def test_loop_indented(setup):
    data, f, _ = setup
    text = show_code(data, f, Loop((Break(0),)), 1, True)
    assert text == "  loop {\n    break(0);\n  }"


def test_if(setup):
    data, f, _ = setup
    text = show_code(data, f, If(Boolean(True), Break(0), Continue(1)), 0, False)
    assert text == "if true {break(0)} else {continue(1)}"


def test_iter(setup):
    data, f, _ = setup
    assert show_code(data, f, Iter(Var(0), Var(1)), 0, False) == "  xloop {y}"


def test_start_controls_indent(setup):
    data, f, _ = setup
    assert show_code(data, f, Int(1), 2, True) == "    " + show_code(data, f, Int(1), 2, False)


def test_dump(setup, capsys):
    data, f, p = setup
    value = Call(p, (Var(0),))
    dump(data, value, f)
    assert capsys.readouterr().out == show_code(data, f, value, 0, True) + "\n"