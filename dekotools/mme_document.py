"""Assembled macro program: labels, constants, code and header output."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, TextIO, Tuple

from .mme_definitions import IMMEDIATE_MASK, make_immediate

_WORD_MASK = 0xFFFFFFFF


class MmeError(Exception):
    """Raised for duplicate definitions and unresolved references."""


class SubmissionMode(IntEnum):
    """Method submission mode of a command header."""

    INCREASING = 1
    NON_INCREASING = 3
    INLINE = 4
    INCREASE_ONCE = 5


def _shift_field(field: int, pos: int, size: int) -> int:
    return (field & ((1 << size) - 1)) << pos


def make_cmd_header(mode: SubmissionMode, arg: int, subchannel: int, method: int) -> int:
    """Build a 32-bit command-stream method header."""
    return (
        _shift_field(method & 0xFFFF, 0, 13)
        | _shift_field(subchannel & 0xFF, 13, 3)
        | _shift_field(arg & 0xFFFF, 16, 13)
        | _shift_field(int(mode), 29, 3)
    )


def _resolve(code: List[int], labels: Dict[str, int], refs: Dict[int, str]) -> None:
    for position in sorted(refs):
        name = refs[position]
        if name not in labels:
            raise MmeError(f"Undefined reference to {name}")
        if position < len(code):
            target = labels[name] - position
            code[position] = (code[position] & ~IMMEDIATE_MASK & _WORD_MASK) | make_immediate(target)
    refs.clear()


class MmeDocument:
    """Collects the pieces of a macro program and emits the setup header."""

    def __init__(self) -> None:
        self._code: List[int] = []
        self._equs: Dict[str, int] = {}
        self._local_labels: Dict[str, int] = {}
        self._labels: Dict[str, int] = {}
        self._exports: List[str] = []
        self._local_label_refs: Dict[int, str] = {}
        self._label_refs: Dict[int, str] = {}

    @property
    def code(self) -> Tuple[int, ...]:
        return tuple(self._code)

    @property
    def labels(self) -> Dict[str, int]:
        return dict(self._labels)

    @property
    def exports(self) -> List[Tuple[str, int]]:
        return [(name, self._labels[name]) for name in self._exports]

    def define_equ(self, ident: str, value: int) -> None:
        if ident in self._equs:
            raise MmeError(f"Duplicate definition of {ident}")
        self._equs[ident] = value

    def define_local_label(self, ident: str) -> None:
        if ident in self._local_labels:
            raise MmeError(f"Duplicate local label {ident}")
        self._local_labels[ident] = len(self._code)

    def define_label(self, ident: str, exported: bool = False) -> None:
        """Define a global label; this closes the current local-label scope."""
        self.resolve_local_labels()
        if ident in self._labels:
            raise MmeError(f"Duplicate label {ident}")
        self._labels[ident] = len(self._code)
        if exported:
            self._exports.append(ident)

    def add_instruction(self, inst: int) -> None:
        self._code.append(inst & _WORD_MASK)

    def add_label_ref(self, ident: str, local: bool = False) -> None:
        """Record that the next instruction's immediate refers to a label."""
        refs = self._local_label_refs if local else self._label_refs
        refs.setdefault(len(self._code), ident)

    def lookup_equ(self, ident: str) -> int:
        try:
            return self._equs[ident]
        except KeyError:
            raise MmeError(f"Undefined identifier {ident}") from None

    def resolve_local_labels(self) -> None:
        try:
            _resolve(self._code, self._local_labels, self._local_label_refs)
        finally:
            self._local_labels.clear()

    def resolve_labels(self) -> None:
        _resolve(self._code, self._labels, self._label_refs)

    def finish(self) -> None:
        """Resolve all outstanding label references."""
        self.resolve_local_labels()
        self.resolve_labels()

    def generate_header(self, name: str = "MmeMacro", subchannel: int = 0) -> str:
        """Return the C header that uploads the program and its entry points."""
        lines = [
            "// Generated by dekomme",
            "#pragma once",
            "#include <stdint.h>",
            "",
            "enum {",
        ]
        lines.extend(
            f"\t{name}{export} = {0xE00 + 2 * i:#x},"
            for i, export in enumerate(self._exports)
        )
        lines += [
            "};",
            "",
            "#ifdef __cplusplus",
            f"static constexpr uint32_t {name}_SetupCmds[] = {{",
            "#else",
            f"static const uint32_t {name}_SetupCmds[] = {{",
            "#endif",
        ]

        def word(value: int) -> str:
            return f"\t0x{value & _WORD_MASK:08X},"

        lines.append(word(make_cmd_header(
            SubmissionMode.INCREASE_ONCE, 1 + len(self._code), subchannel, 0x45)))
        lines.append(word(0))
        lines.extend(word(inst) for inst in self._code)
        lines.append(word(make_cmd_header(
            SubmissionMode.INCREASE_ONCE, 1 + len(self._exports), subchannel, 0x47)))
        lines.append(word(0))
        lines.extend(word(self._labels[export]) for export in self._exports)
        lines.append("};")
        return "\n".join(lines) + "\n"

    def write_header(self, stream: TextIO, name: str = "MmeMacro", subchannel: int = 0) -> None:
        stream.write(self.generate_header(name, subchannel))