import dataclasses

import pytest

from dryopea import typedefs
from dryopea.values import (
    Block,
    Call,
    Float,
    If,
    Int,
    Keys,
    Let,
    Long,
    Loop,
    Null,
    Set,
    Single,
    Text,
    Var,
    to_default,
    v_if,
    v_let,
    v_set,
)


def test_is_op_matches_call_number():
    call = Call(7, [Int(1), Int(2)])
    assert call.is_op(7)
    assert not call.is_op(8)


def test_is_op_false_for_non_call():
    assert not Int(7).is_op(7)
    assert not Null().is_op(0)


def test_call_args_become_tuple():
    call = Call(3, [Int(1), Text("a")])
    assert call.args == (Int(1), Text("a"))
    assert call == Call(3, (Int(1), Text("a")))


def test_block_and_loop_compare_by_content():
    assert Block([Var(0), Var(1)]) == Block((Var(0), Var(1)))
    assert Loop([Var(0)]) != Block([Var(0)])
    assert Keys([1, 2]).keys == (1, 2)


@pytest.mark.parametrize(
    "tp",
    [
        typedefs.I32,
        typedefs.Boolean(),
        typedefs.Enum(3),
        typedefs.Vector(typedefs.Text()),
        typedefs.Sorted(1, [(0, True)]),
        typedefs.Index(1, [(0, False)]),
        typedefs.Hash(1, [0]),
        typedefs.Spacial(1, [0, 1]),
    ],
)
def test_to_default_int_types(tp):
    assert to_default(tp) == Int(0)


def test_to_default_other_types():
    assert to_default(typedefs.Long()) == Long(0)
    assert to_default(typedefs.Single()) == Single(0.0)
    assert to_default(typedefs.Float()) == Float(0.0)
    assert to_default(typedefs.Text()) == Text("")
    assert to_default(typedefs.Void()) == Null()
    assert to_default(typedefs.Reference(2)) == Null()


def test_helpers_build_nodes():
    node = v_if(Var(0), Int(1), Int(2))
    assert node == If(Var(0), Int(1), Int(2))
    assert node.true_value == Int(1)
    assert v_set(2, Int(5)) == Set(2, Int(5))
    assert v_let(1, Text("x")) == Let(1, Text("x"))
    assert v_set(1, Int(5)) != v_let(1, Int(5))


def test_values_are_immutable():
    value = Int(4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        value.value = 5
    assert value == Int(4)
    assert {value, Int(4)} == {Int(4)}