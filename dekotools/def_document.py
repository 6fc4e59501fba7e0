"""In-memory model of an engine register definition document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple


class DefError(Exception):
    """Raised when a definition conflicts with an earlier one or is out of range."""


class FieldKind(IntEnum):
    """Kind of value a register or bitfield holds."""

    UINT = 0
    BOOL = 1
    FLOAT = 2
    PIPE = 3
    IOVA = 4
    ENUM = 5
    BITS = 6
    ARRAY = 7


@dataclass(frozen=True)
class FieldType:
    """A field kind together with the body it refers to, where it has one."""

    kind: FieldKind
    body: int = 0

    @classmethod
    def uint(cls) -> "FieldType":
        return cls(FieldKind.UINT)

    @classmethod
    def bool_(cls) -> "FieldType":
        return cls(FieldKind.BOOL)

    @classmethod
    def float_(cls) -> "FieldType":
        return cls(FieldKind.FLOAT)

    @classmethod
    def pipe(cls) -> "FieldType":
        return cls(FieldKind.PIPE)

    @classmethod
    def iova(cls) -> "FieldType":
        return cls(FieldKind.IOVA)

    @classmethod
    def enum(cls, body: int) -> "FieldType":
        return cls(FieldKind.ENUM, body)

    @classmethod
    def bits(cls, body: int) -> "FieldType":
        return cls(FieldKind.BITS, body)

    @classmethod
    def array(cls, body: int) -> "FieldType":
        return cls(FieldKind.ARRAY, body)


@dataclass
class Field:
    """A register, or an array of register groups."""

    name: str
    doc: int
    index: int
    array_size: int
    array_next: int
    type: FieldType


@dataclass
class EnumField:
    name: str
    value: int
    doc: int


@dataclass
class BitsField:
    """A bit range of a register; ``bits`` is the (low, high) bit pair."""

    name: str
    doc: int
    bits: Tuple[int, int]
    type: FieldType


@dataclass
class NamedEnum:
    body: int
    doc: int


@dataclass
class DefDocument:
    """Collects the engine, registers, enums and bitfields of a definition."""

    doc_strings: List[str] = field(default_factory=list)
    engine_name: str = ""
    engine_class: int = 0
    engine_doc: int = -1
    enum_bodies: List[List[EnumField]] = field(default_factory=list)
    named_enums: Dict[str, NamedEnum] = field(default_factory=dict)
    bits_bodies: List[List[BitsField]] = field(default_factory=list)
    array_bodies: List[List[Field]] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    _cur_enum: List[EnumField] = field(default_factory=list, repr=False)
    _cur_bits: List[BitsField] = field(default_factory=list, repr=False)
    _cur_array: List[Field] = field(default_factory=list, repr=False)
    _in_array: bool = field(default=False, repr=False)

    def add_doc(self, text: str) -> int:
        """Store a documentation string and return its index."""
        self.doc_strings.append(text)
        return len(self.doc_strings) - 1

    def set_engine(self, name: str, class_id: int, doc: int) -> None:
        self.engine_name = name
        self.engine_class = class_id
        self.engine_doc = doc
        if class_id & ~0xFFFF:
            raise DefError("Class ID out of bounds")

    def add_reg(self, reg: int, name: str, doc: int, size: int, field_type: FieldType) -> None:
        """Add a register to the open array body, or to the engine."""
        target = self._cur_array if self._in_array else self.fields
        if any(f.name == name for f in target):
            raise DefError("Name already in use")
        target.append(Field(name, doc, reg, size, 0, field_type))

    def add_array(self, base: int, name: str, doc: int, size: int, body: int, next_: int) -> None:
        if any(f.name == name for f in self.fields):
            raise DefError("Name already in use")
        self.fields.append(Field(name, doc, base, size, next_, FieldType.array(body)))

    def add_enum(self, name: str, doc: int, body: int) -> None:
        if name in self.named_enums:
            raise DefError("Duplicate enum name")
        self.named_enums[name] = NamedEnum(body, doc)

    def add_enum_field(self, value: int, name: str, doc: int) -> None:
        if any(f.name == name for f in self._cur_enum):
            raise DefError("Duplicate enum value")
        self._cur_enum.append(EnumField(name, value, doc))

    def add_bits_field(self, bits: Tuple[int, int], name: str, doc: int, field_type: FieldType) -> None:
        if any(f.name == name for f in self._cur_bits):
            raise DefError("Duplicate bitfield")
        low, high = bits
        self._cur_bits.append(BitsField(name, doc, (low, high), field_type))

    def pop_enum_body(self) -> int:
        """Close the enum body being built and return its index."""
        self.enum_bodies.append(self._cur_enum)
        self._cur_enum = []
        return len(self.enum_bodies) - 1

    def pop_bits_body(self) -> int:
        """Close the bitfield body being built and return its index."""
        self.bits_bodies.append(self._cur_bits)
        self._cur_bits = []
        return len(self.bits_bodies) - 1

    def push_array(self) -> None:
        """Direct subsequent registers into a new array body."""
        self._in_array = True

    def pop_array(self) -> int:
        """Close the array body being built and return its index."""
        self._in_array = False
        self.array_bodies.append(self._cur_array)
        self._cur_array = []
        return len(self.array_bodies) - 1