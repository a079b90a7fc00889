"""Standard operations on values where the lowest number of a type means null."""

from __future__ import annotations

import math
import struct
from decimal import Decimal

from dryopea.store import Store

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def _wrap(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    return value - (1 << bits) if value >> (bits - 1) else value


def _trunc_div(v1: int, v2: int) -> int:
    quotient = abs(v1) // abs(v2)
    return quotient if (v1 < 0) == (v2 < 0) else -quotient


def _trunc_rem(v1: int, v2: int) -> int:
    return v1 - v2 * _trunc_div(v1, v2)


def _to_single(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _saturate(value: float, low: int, high: int, null: int) -> int:
    if math.isnan(value):
        return null
    if value <= low:
        return low
    if value >= high:
        return high
    return int(value)


def format_text(val: str, width: int, direction: int, token: int) -> str:
    """Pad a text to ``width`` characters with the character ``token``.

    A negative direction aligns left, a positive one right and zero centres.
    """
    tokens = max(0, max(width, 0) - len(val))
    pad = chr(token & 0xFF)
    if direction < 0:
        return val + pad * tokens
    if direction > 0:
        return pad * tokens + val
    left = tokens // 2
    return pad * left + val + pad * (tokens - left)


def _radix_text(val: int, radix: int, plus: bool, note: bool, bits: int) -> str:
    mask = (1 << bits) - 1
    if radix == 2:
        return ("0b" if note else "") + format(val & mask, "b")
    if radix == 8:
        return ("0o" if note else "") + format(val & mask, "o")
    if radix == 10:
        sign = ("+" if plus else "") if val > 0 else "-"
        return sign + str(abs(val))
    if radix == 16:
        return ("0x" if note else "") + format(val & mask, "x")
    raise ValueError("Unknown radix")


def op_abs_int(val: int) -> int:
    return val if val == I32_MIN else abs(val)


def op_min_single_int(val: int) -> int:
    return val if val == I32_MIN else -val


def op_conv_long_from_int(val: int) -> int:
    return I64_MIN if val == I32_MIN else val


def op_conv_float_from_int(val: int) -> float:
    return math.nan if val == I32_MIN else float(val)


def op_conv_single_from_int(val: int) -> float:
    return math.nan if val == I32_MIN else _to_single(float(val))


def op_conv_bool_from_int(val: int) -> bool:
    return val != I32_MIN


def op_add_int(v1: int, v2: int) -> int:
    if v1 != I32_MIN and v2 != I32_MIN:
        return _wrap(v1 + v2, 32)
    return I32_MIN


def op_min_int(v1: int, v2: int) -> int:
    if v1 != I32_MIN and v2 != I32_MIN:
        return _wrap(v1 - v2, 32)
    return I32_MIN


def op_mul_int(v1: int, v2: int) -> int:
    if v1 != I32_MIN and v2 != I32_MIN:
        return _wrap(v1 * v2, 32)
    return I32_MIN


def op_div_int(v1: int, v2: int) -> int:
    if v1 != I32_MIN and v2 != I32_MIN and v2 != 0:
        return _wrap(_trunc_div(v1, v2), 32)
    return I32_MIN


def op_rem_int(v1: int, v2: int) -> int:
    if v1 != I32_MIN and v2 != I32_MIN and v2 != 0:
        return _wrap(_trunc_rem(v1, v2), 32)
    return I32_MIN


def op_eq_int(v1: int, v2: int) -> bool:
    return v1 != I32_MIN and v2 != I32_MIN and v1 == v2


def op_ne_int(v1: int, v2: int) -> bool:
    return v1 != I32_MIN and v2 != I32_MIN and v1 != v2


def op_lt_int(v1: int, v2: int) -> bool:
    return v1 != I32_MIN and v2 != I32_MIN and v1 < v2


def op_le_int(v1: int, v2: int) -> bool:
    return v1 != I32_MIN and v2 != I32_MIN and v1 <= v2


def format_int(
    val: int, radix: int, width: int, token: int, plus: bool, note: bool
) -> str:
    """Format an integer in the given radix, right aligned to ``width``."""
    text = "null" if val == I32_MIN else _radix_text(val, radix, plus, note, 32)
    return format_text(text, width, 1, token)


def op_abs_long(val: int) -> int:
    return val if val == I64_MIN else abs(val)


def op_min_single_long(val: int) -> int:
    return val if val == I64_MIN else -val


def op_cast_int_from_long(val: int) -> int:
    return I32_MIN if val == I64_MIN else _wrap(val, 32)


def op_conv_float_from_long(val: int) -> float:
    return math.nan if val == I64_MIN else float(val)


def op_conv_bool_from_long(val: int) -> bool:
    return val != I64_MIN


def op_add_long(v1: int, v2: int) -> int:
    if v1 != I64_MIN and v2 != I64_MIN:
        return _wrap(v1 + v2, 64)
    return I64_MIN


def op_min_long(v1: int, v2: int) -> int:
    if v1 != I64_MIN and v2 != I64_MIN:
        return _wrap(v1 - v2, 64)
    return I64_MIN


def op_mul_long(v1: int, v2: int) -> int:
    if v1 != I64_MIN and v2 != I64_MIN:
        return _wrap(v1 * v2, 64)
    return I64_MIN


def op_div_long(v1: int, v2: int) -> int:
    if v1 != I64_MIN and v2 != I64_MIN and v2 != 0:
        return _wrap(_trunc_div(v1, v2), 64)
    return I64_MIN


def op_rem_long(v1: int, v2: int) -> int:
    if v1 != I64_MIN and v2 != I64_MIN and v2 != 0:
        return _wrap(_trunc_rem(v1, v2), 64)
    return I64_MIN


def op_eq_long(v1: int, v2: int) -> bool:
    return v1 != I64_MIN and v2 != I64_MIN and v1 == v2


def op_ne_long(v1: int, v2: int) -> bool:
    return v1 != I64_MIN and v2 != I64_MIN and v1 != v2


def op_lt_long(v1: int, v2: int) -> bool:
    return v1 != I64_MIN and v2 != I64_MIN and v1 < v2


def op_le_long(v1: int, v2: int) -> bool:
    return v1 != I64_MIN and v2 != I64_MIN and v1 <= v2


def format_long(
    val: int, radix: int, width: int, token: int, plus: bool, note: bool
) -> str:
    """Format a long in the given radix, right aligned to ``width``."""
    text = "null" if val == I64_MIN else _radix_text(val, radix, plus, note, 64)
    return format_text(text, width, 1, token)


def op_cast_int_from_single(val: float) -> int:
    return _saturate(val, I32_MIN, I32_MAX, I32_MIN)


def op_cast_long_from_single(val: float) -> int:
    return _saturate(val, I64_MIN, I64_MAX, I64_MIN)


def op_cast_int_from_float(val: float) -> int:
    return _saturate(val, I32_MIN, I32_MAX, I32_MIN)


def op_cast_long_from_float(val: float) -> int:
    return _saturate(val, I64_MIN, I64_MAX, I64_MIN)


def _shortest_single(val: float) -> str:
    for precision in range(1, 18):
        text = f"{val:.{precision}g}"
        if _to_single(float(text)) == val:
            return text
    return repr(val)


def _format_number(val: float, width: int, precision: int, single: bool) -> str:
    if math.isnan(val):
        text = "NaN"
    elif math.isinf(val):
        text = "inf" if val > 0 else "-inf"
    elif precision != 0:
        text = f"{val:.{max(precision, 0)}f}"
    else:
        shortest = _shortest_single(val) if single else repr(val)
        text = format(Decimal(shortest).normalize(), "f")
    return text.rjust(max(width, 0))


def format_single(val: float, width: int, precision: int) -> str:
    """Format a single precision number; precision 0 gives the shortest form."""
    return _format_number(_to_single(val), width, precision, True)


def format_float(val: float, width: int, precision: int) -> str:
    """Format a double precision number; precision 0 gives the shortest form."""
    return _format_number(val, width, precision, False)


def op_eq_text(v1: int, v2: int) -> bool:
    return v1 != 0 and v2 != 0 and v1 == v2


def op_ne_text(v1: int, v2: int) -> bool:
    return v1 != 0 and v2 != 0 and v1 != v2


def op_clear_vector(store: Store, rec: int) -> None:
    """Empty a vector record and drop the references pointing into it."""
    if rec == 0:
        return
    store.references = [
        (0, 0) if r == rec else (r, pos) for r, pos in store.references
    ]
    store.set_int(rec, 4, 0)


def op_get_vector(
    store: Store, rec: int, pos: int, size: int, index: int
) -> tuple[int, int]:
    """Locate element ``index`` of the vector in field ``pos`` of ``rec``."""
    vec_rec = store.get_int(rec, pos)
    if vec_rec == 0:
        return (0, 0)
    length = store.get_int(vec_rec, 4)
    real = index + length if index < 0 else index
    if 0 <= real < length:
        return (vec_rec, 8 + real * size)
    return (0, 0)


def op_append_vector(store: Store, rec: int, pos: int, size: int) -> tuple[int, int]:
    """Add an element to the vector in field ``pos`` of ``rec``; returns its place."""
    vec_rec = store.get_int(rec, pos)
    if vec_rec == 0:
        vec_rec = store.claim((10 * size + 15) // 8)
        store.set_int(rec, pos, vec_rec)
        new_rec = 0
    else:
        new_rec = store.get_int(vec_rec, 4)
        moved = store.resize(vec_rec, ((new_rec + 1) * size + 15) // 8)
        if moved != vec_rec:
            store.set_int(rec, pos, moved)
        vec_rec = moved
    store.set_int(vec_rec, 4, new_rec + 1)
    # Room is kept for the claimed size (0) and the vector length (4).
    return (vec_rec, 8 + new_rec * size)


def op_remove_vector(store: Store, rec: int, pos: int, size: int, index: int) -> None:
    """Remove an element from a vector record, shifting the rest down."""
    length = op_length_vector(store, rec)
    real = index + length if index < 0 else index
    if 0 < real < length:
        store.move_content(rec, size * (real + 1), size * real, (length - real) * size)
        store.set_int(rec, pos, length - 1)


def op_insert_vector(
    store: Store, rec: int, pos: int, size: int, index: int
) -> tuple[int, int]:
    """Make room for an element in a vector record; its value is still unwritten."""
    length = op_length_vector(store, rec)
    real = index + length if index < 0 else index
    if 0 < real < length:
        store.move_content(rec, size * real, size * (real + 1), (length - real) * size)
        store.set_int(rec, pos, length + 1)
    return (rec, size * real)


def op_length_vector(store: Store, rec: int) -> int:
    return I32_MIN if rec == 0 else store.get_int(rec, 4)


def append(s: str, val: str) -> str:
    """Return ``s`` with ``val`` appended."""
    return s + val