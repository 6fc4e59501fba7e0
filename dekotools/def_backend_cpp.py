"""C++ header output for a definition document."""

from __future__ import annotations

from typing import List, TextIO

from .def_document import DefDocument, Field, FieldKind

_U32 = 0xFFFFFFFF

_HELPERS = (
    "#ifndef __dekodef_helpers\n"
    "#define __dekodef_helpers\n"
    "\ttemplate <typename T> constexpr unsigned ClassId = T::__classid;\n"
    "\ttemplate <typename T, unsigned index, unsigned size>\n"
    "\tstruct __reg {\n"
    "\t\tusing Parent = T;\n"
    "\t\tstatic constexpr unsigned Index = index;\n"
    "\t\tstatic constexpr unsigned Size = size;\n"
    "\t\tconst unsigned __idx;\n"
    "\t\tconstexpr operator unsigned() const noexcept { return __idx; }\n"
    "\t\tconstexpr __reg() noexcept : __idx{Index} {}\n"
    "\t\tconstexpr __reg(unsigned i) noexcept : __idx{ Parent::Index + i*Parent::Size + Index } {}\n"
    "\t};\n"
    "\ttemplate <typename T, unsigned index, unsigned count, unsigned shift>\n"
    "\tstruct __array : __reg<T,index,(1U<<shift)> {\n"
    "\t\tusing Parent = T;\n"
    "\t\tstatic constexpr bool __isarray = true;\n"
    "\t\tstatic constexpr unsigned Count = count;\n"
    "\t\tstatic constexpr unsigned Shift = shift;\n"
    "\t};\n"
    "\ttemplate <unsigned shift, unsigned size>\n"
    "\tstruct __bit {\n"
    "\t\tstatic constexpr unsigned Shift = shift;\n"
    "\t\tstatic constexpr unsigned Size = size;\n"
    "\t\tstatic constexpr unsigned Mask = ((1U<<Size)-1)<<Shift;\n"
    "\t\tconst unsigned __value;\n"
    "\t\tconstexpr operator unsigned() const noexcept { return __value; }\n"
    "\t\tconstexpr __bit(unsigned x = ~0U) noexcept : __value{ (x<<Shift) & Mask } {}\n"
    "\t};\n"
    "#endif\n\n"
)


def _u32(value: int) -> int:
    return value & _U32


def _lowest_bit_index(value: int) -> int:
    value &= _U32
    return (value & -value).bit_length() - 1 if value else -1


def engine_struct_name(name: str) -> str:
    """Return the C++ struct name for an engine; a leading underscore is dropped."""
    return "Engine" + (name[1:] if name.startswith("_") else name)


def render_cpp_header(doc: DefDocument) -> str:
    """Return the C++ header describing the engine's registers."""
    out: List[str] = []

    def emit_bits(indent: str, body: int) -> None:
        for bit in doc.bits_bodies[body]:
            low, high = bit.bits
            numbits = 1 + high - low
            out.append(f"{indent}\tstruct {bit.name} : __bit<{_u32(low)},{_u32(numbits)}> {{\n")
            out.append(f"{indent}\t\tusing __bit::__bit;\n")
            if bit.type.kind == FieldKind.ENUM:
                for val in doc.enum_bodies[bit.type.body]:
                    out.append(
                        f"{indent}\t\tstatic constexpr unsigned {val.name} = "
                        f"0x{_u32(val.value << low):08X};\n"
                    )
            out.append(f"{indent}\t}};\n")

    def emit_field(fld: Field, nested: bool) -> None:
        indent = "\t\t\t" if nested else "\t\t"
        kind = fld.type.kind
        if kind == FieldKind.ARRAY:
            shift = _u32(_lowest_bit_index(fld.array_next))
            out.append(
                f"{indent}struct {fld.name} : __array<__self, 0x{_u32(fld.index):03x}, "
                f"{_u32(fld.array_size)}, {shift}> {{\n"
            )
            out.append(f"{indent}\tusing __self = {fld.name};\n")
            for sub in doc.array_bodies[fld.type.body]:
                emit_field(sub, True)
            out.append(f"{indent}}};\n")
            return
        regsize = fld.array_size * 2 if kind == FieldKind.IOVA else fld.array_size
        out.append(
            f"{indent}struct {fld.name} : __reg<__self, 0x{_u32(fld.index):03x}, {_u32(regsize)}> {{\n"
        )
        out.append(f"{indent}\tusing __reg::__reg;\n")
        if kind == FieldKind.BITS:
            emit_bits(indent, fld.type.body)
        elif kind == FieldKind.ENUM:
            for val in doc.enum_bodies[fld.type.body]:
                out.append(f"{indent}\tstatic constexpr auto {val.name} = {val.value};\n")
        out.append(f"{indent}}};\n")

    struct_name = engine_struct_name(doc.engine_name)
    out.append("#pragma once\n\n")
    out.append("namespace maxwell {\n\n")
    out.append(_HELPERS)
    out.append(f"\tstruct {struct_name} {{\n")
    out.append(f"\t\tusing __self = {struct_name};\n")
    out.append(f"\t\tstatic constexpr unsigned __classid = 0x{_u32(doc.engine_class):04x};\n")
    for fld in doc.fields:
        emit_field(fld, False)
    out.append("\t};\n\n")
    out.append("}\n")
    return "".join(out)


def write_cpp_header(doc: DefDocument, stream: TextIO) -> None:
    stream.write(render_cpp_header(doc))