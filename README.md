# dekotools

A library for building command streams for the Maxwell 3D engine:

- **MME macros** (`dekotools.mme_definitions`, `dekotools.mme_document`):
  encode macro instructions, resolve label references and produce a C/C++
  header that uploads the macro code and its exported entry points.
- **Engine definitions** (`dekotools.def_document`,
  `dekotools.def_backend_cpp`, `dekotools.def_backend_mme`): describe an
  engine's registers, enums, bit fields and register arrays, then emit a C++
  header of typed register helpers or a file of `%equ` definitions.
- **Binary files** (`dekotools.binary_file`): a reader/writer for little- or
  big-endian integers, floats and variable-length quantities.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

## Assembling a macro

```python
from dekotools.mme_definitions import make_nop, make_add_immediate
from dekotools.mme_document import MmeDocument

doc = MmeDocument()
doc.define_equ("Answer", 42)

doc.define_label("Entry", True)          # exported entry point
doc.add_instruction(make_add_immediate(1, doc.lookup_equ("Answer")))
doc.add_instruction(make_nop())

doc.finish()                             # resolves all label references
print(doc.generate_header("MmeMacro", 0))
```

`add_label_ref(ident, local)` records that the next instruction's immediate
refers to a label; `finish` (or `resolve_local_labels` and `resolve_labels`)
patches the immediate with the relative offset to that label. Defining a
global label with `define_label` closes the current scope of local labels.

`generate_header(name, subchannel)` returns the header text: an enum naming
each exported label's method, followed by the setup command words (built with
`make_cmd_header`) that load the code and the start addresses.
`write_header(stream, name, subchannel)` writes the same text to an open text
stream. The `code`, `labels` and `exports` properties show what has been
collected. Unresolved labels, unknown identifiers and duplicate names raise
`MmeError`.

The instruction encoders in `dekotools.mme_definitions` (`make_alu`,
`make_add_immediate`, `make_extract_insert`,
`make_extract_shift_left_immediate`, `make_extract_shift_left_register`,
`make_read`, `make_branch`, `make_result`, `make_nop`, …) return 32-bit
instruction words and take the enums `Operation`, `AluOperation`,
`ResultOperation` and `BranchCondition` where an operation is expected.

## Generating register definitions

```python
from dekotools.def_document import DefDocument, FieldType
from dekotools.def_backend_cpp import render_cpp_header
from dekotools.def_backend_mme import render_mme

doc = DefDocument()
doc.set_engine("3D", 0xB197, doc.add_doc("The 3D engine"))
doc.add_reg(0x45, "MmeInstructionRamPointer", doc.add_doc(""), 1, FieldType.uint())

print(render_cpp_header(doc))   # C++ header with register structs
print(render_mme(doc))          # %equ lines for macro sources
```

Enums, bit fields and register arrays are built by adding their members
(`add_enum_field`, `add_bits_field`, or `add_reg` between `push_array` and
`pop_array`) and then closing the body with `pop_enum_body`,
`pop_bits_body` or `pop_array`; the returned body index is passed to
`FieldType.enum`, `FieldType.bits`, `add_enum` or `add_array`. Name
clashes and class ids above 0xFFFF raise `DefError`.

`write_cpp_header(doc, stream)` and `write_mme(doc, stream)` write the same
output to an open text stream. `engine_struct_name` gives the C++ struct name
for an engine (`Engine` followed by the name, with a leading underscore
dropped).

## Binary files

```python
import io
from dekotools.binary_file import BinaryFile

f = BinaryFile(io.BytesIO())
f.set_big_endian()
f.write_word(0x12345678)
f.write_vl(300)
f.rewind()
assert f.read_word() == 0x12345678
assert f.read_vl() == 300
```

`BinaryFile.open(path, mode)` opens a file and can be used as a context
manager. Short reads raise `EOFError`. `string_from_file` returns a file's
whole contents as text; `bswap16`, `bswap32`, `bswap64` and `bit` are small
integer helpers.

## What the package does not do

There is no reader for macro source text or definition files, and no
command-line program: documents are built by calling the methods above, and
the generated output is returned as a string or written to a stream you
supply.

## Running the tests

```
pip install .[test]
pytest
```