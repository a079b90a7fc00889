# dryopea

Building blocks for the interpreter of a small, statically typed scripting
language. The package has no dependencies outside the standard library.

## Modules

- `dryopea.calc`: `calculate_positions(fields, vector, sub)` places record
  fields, given as `(size, alignment)` pairs, and returns a `Layout` with the
  `positions`, the record `size` and its `alignment`.
- `dryopea.diagnostics`: `Diagnostics` collects messages and keeps the highest
  `Level` seen (`DEBUG`, `WARNING`, `ERROR`, `FATAL`); `diagnostic_format`
  prefixes a message with its level.
- `dryopea.store`: `Store`, a growable area of 8 byte words handing out
  records with `claim`, `resize` and `delete`, with typed field access
  (`get_int`/`set_int`, `get_long`, `get_short`, `get_byte`, `get_float`,
  `get_single`, `get_boolean`, `get_str`/`set_str`/`append_str`) and a
  `validate` walk. Inconsistent content or access outside a record raises
  `StoreError`.
- `dryopea.external`: runtime operators where the smallest value of a type
  means null (`op_add_int`, `op_div_long`, `op_cast_int_from_float`, ...),
  formatting (`format_text`, `format_int`, `format_long`, `format_single`,
  `format_float`) and vector operations on a `Store` (`op_append_vector`,
  `op_get_vector`, `op_insert_vector`, `op_remove_vector`,
  `op_length_vector`, `op_clear_vector`).
- `dryopea.typedefs`: the types of the language (`Integer`, `Text`,
  `Vector`, `Sorted`, `Hash`, ...) with `is_same`, `size` and `show`.
- `dryopea.values`: the parse-tree values (`Int`, `Call`, `Block`, `If`,
  `Loop`, ...), `to_default` and the helpers `v_if`, `v_set`, `v_let`.
- `dryopea.definitions`: `Position`, `Argument`, `Attribute`, `Variable`,
  `DefType`, `Context` and `Definition`.
- `dryopea.data`: `Data`, the table of all definitions, with `add_def`,
  `add_fn`, `add_op`, `add_attribute`, `vector_def`, `find_unused`,
  `test_used` and more; `rust_type` names the generated native type of a
  type. Unknown definition or attribute numbers are `None`; misuse raises
  `DefinitionError`.
- `dryopea.showcode`: `show_code` renders a parse tree as readable text,
  `dump` prints it.
- `dryopea.create`: `operator_name`, `fill_source` builds the source text of
  the operator dispatch table from the operators in a `Data`, and
  `generate_code(data, path)` writes it to a file.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Null-aware operators and formatting:

```python
from dryopea.external import format_int, format_text, op_add_int, op_mul_int

format_text("aa", 5, 0, ord("_"))                       # '_aa__'
format_int(0x1234, 16, 0, ord(" "), False, True)        # '0x1234'
op_add_int(1, op_mul_int(2, 3))                         # 7
```

Claiming records and storing text:

```python
from dryopea.store import Store

store = Store(100)
rec = store.claim(2)
store.set_int(rec, 4, 42)
text = store.set_str("hello")
store.get_str(text)                                     # 'hello'
store.validate(0)
```

Laying out a record:

```python
from dryopea.calc import calculate_positions

layout = calculate_positions([(4, 4), (1, 1)], False, False)
layout.positions, layout.size, layout.alignment         # ([4, 8], 9, 4)
```

Registering an operator:

```python
from dryopea.data import Data
from dryopea.definitions import Argument, Position
from dryopea.diagnostics import Diagnostics
from dryopea.typedefs import I32

data = Data()
diagnostics = Diagnostics()
position = Position("lib.txt", 1, 1)
data.add_op(diagnostics, position, "OpAddInt", [Argument("v1", I32), Argument("v2", I32)])
data.get_possible("OpAdd", position)                    # [0]
data.operator(0).name                                   # 'OpAddInt'
```

Collecting diagnostics:

```python
from dryopea.diagnostics import Diagnostics, Level

diagnostics = Diagnostics()
diagnostics.add(Level.WARNING, "Variable x is never read")
str(diagnostics)                                        # 'Found 1 problems'
```

## What it does not do

There is no lexer, parser or interpreter loop here and no command to run a
script: a `Data` table is filled by calling its methods directly, and
`generate_code` only writes source text for the operator table; nothing in
the package compiles or runs that text.