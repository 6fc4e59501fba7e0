"""Endian-aware binary stream reading and writing helpers."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Optional


def bit(n: int) -> int:
    """Return a mask with only bit ``n`` set."""
    return 1 << n


def bswap16(x: int) -> int:
    return int.from_bytes((x & 0xFFFF).to_bytes(2, "little"), "big")


def bswap32(x: int) -> int:
    return int.from_bytes((x & 0xFFFFFFFF).to_bytes(4, "little"), "big")


def bswap64(x: int) -> int:
    return int.from_bytes((x & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little"), "big")


class BinaryFile:
    """A binary stream with fixed-width integer, float and varint I/O."""

    def __init__(self, stream: BinaryIO, *, own: bool = False, little_endian: bool = True) -> None:
        self.stream = stream
        self._own = own
        self.little_endian = little_endian

    @classmethod
    def open(cls, path, mode: str = "rb") -> "BinaryFile":
        if "b" not in mode:
            mode += "b"
        return cls(open(path, mode), own=True)

    def __enter__(self) -> "BinaryFile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the stream if this object opened it."""
        if self._own:
            self.stream.close()

    def set_little_endian(self) -> None:
        self.little_endian = True

    def set_big_endian(self) -> None:
        self.little_endian = False

    @property
    def _order(self) -> str:
        return "<" if self.little_endian else ">"

    def _read(self, code: str):
        fmt = self._order + code
        return struct.unpack(fmt, self.read_raw(struct.calcsize(fmt)))[0]

    def _write(self, code: str, value) -> None:
        self.write_raw(struct.pack(self._order + code, value))

    def read_dword(self) -> int:
        return self._read("Q")

    def write_dword(self, value: int) -> None:
        self._write("Q", value & 0xFFFFFFFFFFFFFFFF)

    def read_word(self) -> int:
        return self._read("I")

    def write_word(self, value: int) -> None:
        self._write("I", value & 0xFFFFFFFF)

    def read_hword(self) -> int:
        return self._read("H")

    def write_hword(self, value: int) -> None:
        self._write("H", value & 0xFFFF)

    def read_byte(self) -> int:
        return self.read_raw(1)[0]

    def write_byte(self, value: int) -> None:
        self.write_raw(bytes([value & 0xFF]))

    def read_vl(self) -> int:
        """Read a big-endian base-128 variable-length quantity."""
        value = 0
        while True:
            data = self.read_byte()
            value = ((value << 7) | (data & 0x7F)) & 0xFFFFFFFF
            if not data & 0x80:
                return value

    def write_vl(self, value: int) -> None:
        """Write a big-endian base-128 variable-length quantity."""
        value &= 0xFFFFFFFF
        size = 1
        temp = value
        while temp > 0x7F:
            temp >>= 7
            size += 1
        groups = [(value >> (7 * shift)) & 0x7F for shift in reversed(range(size))]
        self.write_raw(bytes([0x80 | g for g in groups[:-1]] + [groups[-1]]))

    def read_float(self) -> float:
        return self._read("f")

    def write_float(self, value: float) -> None:
        self._write("f", value)

    def read_raw(self, size: int) -> bytes:
        data = self.stream.read(size)
        if len(data) != size:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        return data

    def write_raw(self, data: bytes) -> None:
        written = self.stream.write(data)
        if written is not None and written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")

    def seek(self, pos: int, whence: int = io.SEEK_SET) -> None:
        self.stream.seek(pos, whence)

    def tell(self) -> int:
        return self.stream.tell()

    def rewind(self) -> None:
        self.stream.seek(0)

    def flush(self) -> None:
        self.stream.flush()


def string_from_file(filename) -> Optional[str]:
    """Return the whole contents of a file as text."""
    with BinaryFile.open(filename, "rb") as f:
        f.seek(0, io.SEEK_END)
        size = f.tell()
        f.rewind()
        return f.read_raw(size).decode("utf-8", errors="surrogateescape")