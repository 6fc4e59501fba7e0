"""Macro-assembler constant (%equ) output for a definition document."""

from __future__ import annotations

from typing import List, Optional, TextIO

from .def_document import DefDocument, Field, FieldKind

_U32 = 0xFFFFFFFF


def _u32(value: int) -> int:
    return value & _U32


def _s32(value: int) -> int:
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


def _lowest_bit_index(value: int) -> int:
    value &= _U32
    return (value & -value).bit_length() - 1 if value else -1


def render_mme(doc: DefDocument) -> str:
    """Return %equ definitions for every named enum and register."""
    out: List[str] = []

    def value(name: str, trail: str, number: int) -> None:
        out.append(f"%equ {name}{trail} {_s32(number)}\n")

    def hex_word(name: str, trail: str, number: int) -> None:
        out.append(f"%equ {name}{trail} 0x{_u32(number):08x}\n")

    def reg(name: str, trail: str, number: int) -> None:
        out.append(f"%equ {name}{trail} 0x{_u32(number):03x}\n")

    def enum(name: str, body: int) -> None:
        for member in doc.enum_bodies[body]:
            value(name, member.name, member.value)

    def bits(basename: str, body: int) -> None:
        for bit in doc.bits_bodies[body]:
            name = basename + bit.name
            low, high = bit.bits
            numbits = 1 + high - low
            hex_word(name, "", ((1 << numbits) - 1) << low)
            if bit.type.kind == FieldKind.ENUM:
                for member in doc.enum_bodies[bit.type.body]:
                    hex_word(name, member.name, member.value << low)
            value(name, "_Size", numbits)
            value(name, "_Shift", low)

    def emit_field(basename: Optional[str], baseindex: int, fld: Field) -> None:
        name = fld.name if basename is None else f"{basename}N{fld.name}"
        kind = fld.type.kind
        if kind == FieldKind.ARRAY:
            for sub in doc.array_bodies[fld.type.body]:
                emit_field(name, fld.index, sub)
            value(name, "_Count", fld.array_size)
            value(name, "_Shift", _lowest_bit_index(fld.array_next))
            reg(name, "_Size", fld.array_next)
            return
        reg(name, "", baseindex + fld.index)
        if fld.array_size > 1:
            value(name, "_Count", fld.array_size)
        if kind == FieldKind.BITS:
            bits(name, fld.type.body)
        elif kind == FieldKind.ENUM:
            enum(name, fld.type.body)
        elif kind == FieldKind.IOVA:
            reg(name, "_High", baseindex + fld.index)
            reg(name, "_Low", baseindex + fld.index + 1)

    for enum_name in sorted(doc.named_enums):
        enum(enum_name, doc.named_enums[enum_name].body)

    for fld in doc.fields:
        emit_field(None, 0, fld)

    return "".join(out)


def write_mme(doc: DefDocument, stream: TextIO) -> None:
    stream.write(render_mme(doc))